# navigator.py
# Public entry point for the rehearsal system.
# Owns no business logic; delegates everything to specialist modules.

import logging
from typing import Any, Dict, List, Optional, Tuple

from .diagnostics import format_debug_report, format_route_summary, junction_overview
from .models import AnalysisResult, AnalysisStatus, DecisionPoint, LingeredPoint, PlaybackState, PlaybackStatus
from .nav_config import RehearsalConfig
from .nav_logger import RehearsalLogger
from .playback import PlaybackSequencer
from .route_analyzer import RouteAnalyzer
from .stress import most_lingered

logger = logging.getLogger(__name__)


class RehearsalSystem:
    """
    High-level rehearsal facade.

    Typical lifecycle:
        system = RehearsalSystem()
        ok, msg = system.analyze(directions_result)
        system.start_rehearsal()
        system.sequencer.play()
        ...
        system.lingered      # top stressful moments once completed

    Args:
        config:    Optional RehearsalConfig; defaults to RehearsalConfig().
        scheduler: Timer capability handed to the PlaybackSequencer.
    """

    def __init__(self, config: Optional[RehearsalConfig] = None, scheduler=None) -> None:
        self.config = config or RehearsalConfig()

        # Specialist modules
        self._analyzer  = RouteAnalyzer(self.config)
        self._sequencer = PlaybackSequencer(self.config, scheduler=scheduler)
        self._logger    = RehearsalLogger(self.config)

        self._result: Optional[AnalysisResult] = None
        self._summary: str = ""
        self._lingered: List[LingeredPoint] = []
        self._completed: bool = False

        self._sequencer.subscribe(self._on_update)

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze(self, directions: Optional[Dict[str, Any]]) -> Tuple[bool, str]:
        """
        Analyse a routing result; replaces any previous analysis.

        Returns:
            (success, message)
        """
        self.stop_rehearsal()
        self._completed = False
        self._lingered = []
        self._result = self._analyzer.analyze_route(directions)
        self._summary = format_route_summary(directions)

        if self._result.status is not AnalysisStatus.READY:
            logger.warning(f"Analysis ended with {self._result.status.name}: {self._result.message}")
            return False, self._result.message

        logger.info(f"Route ready: {self._summary}")
        if self.config.verbose:
            logger.debug("\n" + self.debug_report())
        return True, self._result.message

    # ------------------------------------------------------------------
    # Rehearsal control
    # ------------------------------------------------------------------

    def start_rehearsal(self, start_index: int = 0) -> Tuple[bool, str]:
        """Load the analysed points into the sequencer, optionally at a given point."""
        points = self.points
        if not points:
            return False, "Nothing to rehearse."

        self._completed = False
        self._lingered = []
        self._sequencer.init(points)
        if start_index > 0:
            self._sequencer.go_to(start_index)
        return True, f"Rehearsing {len(points)} junctions."

    def stop_rehearsal(self) -> None:
        """Tear down playback; dwell measured so far stays in the record."""
        if self._sequencer.status is not PlaybackStatus.IDLE:
            self._sequencer.destroy()
            logger.info("Rehearsal stopped.")

    def _on_update(self, state: PlaybackState) -> None:
        if self.config.log_events:
            self._logger.log_playback_event(state)

        if state.status is PlaybackStatus.COMPLETED and not self._completed:
            self._completed = True
            self._lingered = most_lingered(
                self.points,
                self._sequencer.dwell_seconds,
                self.config.commitment_weights,
                self.config.stress_top_n,
            )
            if self.config.verbose:
                logger.debug("\n" + self.debug_report())

    # ------------------------------------------------------------------
    # Reporting / persistence
    # ------------------------------------------------------------------

    def debug_report(self) -> str:
        return format_debug_report(
            self.points,
            self._sequencer.dwell_seconds,
            self._lingered if self._completed else None,
            self.config.instruction_preview_chars,
        )

    def overview(self) -> Dict[str, Any]:
        data = junction_overview(self.points)
        data["summary"] = self._summary
        return data

    def save(self, csv_path: Optional[str] = None) -> bool:
        saved = self._logger.save_decision_points(self.points)
        if csv_path:
            saved = self._logger.export_report_csv(
                self.points, self._sequencer.dwell_seconds, csv_path,
            ) and saved
        return saved

    # ------------------------------------------------------------------
    # Convenience read-only properties
    # ------------------------------------------------------------------

    @property
    def sequencer(self) -> PlaybackSequencer:
        return self._sequencer

    @property
    def points(self) -> List[DecisionPoint]:
        return list(self._result.points) if self._result else []

    @property
    def analysis(self) -> Optional[AnalysisResult]:
        return self._result

    @property
    def is_completed(self) -> bool:
        return self._completed

    @property
    def lingered(self) -> List[LingeredPoint]:
        return list(self._lingered)
