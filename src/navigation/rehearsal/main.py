# main.py
# Command-line entry point: analyses a saved routing result and rehearses it.
#
#   route-rehearsal route.json              # virtual-time rehearsal
#   route-rehearsal route.json --realtime   # real 5 s dwell per junction
#   route-rehearsal route.json --verbose --csv report.csv

import argparse
import json
import logging
import sys
import threading
from typing import List, Optional

from .models import PlaybackState, PlaybackStatus
from .nav_config import SUPPORTED_SPEEDS, RehearsalConfig
from .navigator import RehearsalSystem
from .scheduler import TimerScheduler, VirtualScheduler

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="route-rehearsal",
        description="Pick the junctions worth rehearsing on a route and play them back.",
    )
    parser.add_argument("route", help="Directions-style routing result (JSON file)")
    parser.add_argument("--speed", type=float, default=1.0,
                        help=f"playback speed, one of {', '.join(str(s) for s in SUPPORTED_SPEEDS)} (0 = skip)")
    parser.add_argument("--start", type=int, default=1,
                        help="junction number to start from (1-based)")
    parser.add_argument("--spacing", type=float, default=None,
                        help="minimum metres between selected junctions")
    parser.add_argument("--realtime", action="store_true",
                        help="wait real wall-clock dwell time instead of a virtual clock")
    parser.add_argument("--log-dir", default=".", help="directory for saved files")
    parser.add_argument("--save", action="store_true",
                        help="save decision points and playback events")
    parser.add_argument("--csv", default=None, help="write the per-junction report as CSV")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="debug logging and the per-junction report")
    return parser


def _make_printer():
    """Prints each point once, when it becomes current."""
    shown = {"index": None}

    def print_state(state: PlaybackState) -> None:
        if state.point is None or state.current_index == shown["index"]:
            return
        shown["index"] = state.current_index
        _print_point(state)

    return print_state


def _print_point(state: PlaybackState) -> None:
    pt = state.point
    flag = " [DECISION POINT]" if pt.is_decision_point else ""
    print(f"  {state.current_index + 1}/{state.total} ({state.progress:.0f}%) "
          f"{pt.type_label}{flag}: {pt.instruction}")
    print(f"      view: {pt.location.lat:.6f},{pt.location.lon:.6f} heading {pt.heading:.0f}°")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    # ------------------------------------------------------------------
    # Logging setup: configure once here, all modules inherit
    # ------------------------------------------------------------------
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = RehearsalConfig(
        verbose=args.verbose,
        log_dir=args.log_dir,
        log_events=args.save,
    )
    if args.spacing is not None:
        config.spacing_m = args.spacing

    try:
        with open(args.route, "r", encoding="utf-8") as f:
            directions = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read routing result {args.route}: {e}")
        return 1

    scheduler = TimerScheduler() if args.realtime else VirtualScheduler()
    system = RehearsalSystem(config, scheduler=scheduler)

    success, msg = system.analyze(directions)
    print(f"[Rehearsal] {msg}")
    if not success:
        return 0

    overview = system.overview()
    print(f"[Rehearsal] {overview['summary']}")
    print(f"[Rehearsal] {overview['total']} junctions, "
          f"{overview['roundabouts']} roundabouts, "
          f"{overview['decision_points']} decision points")
    for row in overview["rows"]:
        print(f"  {row}")

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------
    print("\n--- Rehearsal ---")
    done = threading.Event()
    sequencer = system.sequencer
    sequencer.subscribe(_make_printer())
    sequencer.subscribe(lambda s: done.set() if s.status is PlaybackStatus.COMPLETED else None)

    system.start_rehearsal(max(0, args.start - 1))
    sequencer.set_speed(args.speed)
    sequencer.play()

    if isinstance(scheduler, VirtualScheduler):
        scheduler.run_until_idle()
    else:
        try:
            done.wait()
        except KeyboardInterrupt:
            print("\n[Rehearsal] Interrupted.")
    system.stop_rehearsal()

    print("\n--- Most lingered moments ---")
    for rank, entry in enumerate(system.lingered, start=1):
        pt = entry.point
        print(f"  {rank}. #{pt.index + 1} {pt.commitment_level.value} "
              f"{entry.dwell_seconds:.1f}s (stress {entry.stress_score:.1f}): {pt.instruction}")

    if args.verbose:
        print("\n" + system.debug_report())

    if args.save or args.csv:
        system.save(args.csv)
    return 0


if __name__ == "__main__":
    sys.exit(main())
