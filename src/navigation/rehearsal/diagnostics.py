# diagnostics.py
# Read-only reporting over analysis output and playback telemetry:
# the verbose debug panel, route summary line and junction overview.

from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from .models import DecisionPoint, JunctionType, LingeredPoint

REPORT_COLUMNS = [
    "index", "leg", "step", "distance", "score", "commitment",
    "dwell_s", "reasons", "instruction",
]


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def truncate_text(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 1] + "…"


def format_distance(meters: Optional[float]) -> str:
    """1234 → "1.2 km", 12345 → "12 km", 640 → "640 m"; "" when unknown."""
    if not meters or meters <= 0:
        return ""
    if meters >= 10_000:
        return f"{round(meters / 1000)} km"
    if meters >= 1000:
        return f"{meters / 1000:.1f} km"
    return f"{round(meters)} m"


def format_duration(seconds: Optional[float]) -> str:
    """3900 → "1 hr 5 min"; "" when unknown."""
    if not seconds or seconds <= 0:
        return ""
    mins = round(seconds / 60)
    if mins < 60:
        return f"{mins} min"
    hours, rem = divmod(mins, 60)
    return f"{hours} hr" if rem == 0 else f"{hours} hr {rem} min"


def _point_distance(point: DecisionPoint) -> str:
    if point.distance_meters > 0:
        return f"{round(point.distance_meters)} m"
    return point.distance_text or "n/a"


def _dwell_text(dwell: Optional[float]) -> str:
    return f"{round(dwell)}s" if dwell is not None else "0s"


# ---------------------------------------------------------------------------
# Route level
# ---------------------------------------------------------------------------

def format_route_summary(result: Optional[Dict[str, Any]]) -> str:
    """
    "Start → End · 12 km · 14 min" from the first route's legs.

    Addresses are cut at the first comma. Empty string when there is no route.
    """
    routes = (result or {}).get("routes") or []
    legs = routes[0].get("legs") if routes and isinstance(routes[0], dict) else None
    if not legs:
        return ""

    start = str(legs[0].get("start_address") or "").split(",")[0]
    end = str(legs[-1].get("end_address") or "").split(",")[0]
    distance = 0.0
    duration = 0.0
    for leg in legs:
        for key in ("distance", "duration"):
            value = (leg.get(key) or {}).get("value")
            if isinstance(value, (int, float)):
                if key == "distance":
                    distance += value
                else:
                    duration += value
    return f"{start} → {end} · {format_distance(distance)} · {format_duration(duration)}"


def junction_overview(points: Sequence[DecisionPoint]) -> Dict[str, Any]:
    """Counts and list rows shown before a rehearsal starts."""
    return {
        "total": len(points),
        "roundabouts": sum(1 for pt in points if pt.junction_type is JunctionType.ROUNDABOUT),
        "decision_points": sum(1 for pt in points if pt.is_decision_point),
        "rows": [
            f"{pt.index + 1}. [{pt.type_label}] {pt.instruction}"
            for pt in points
        ],
    }


# ---------------------------------------------------------------------------
# Debug report
# ---------------------------------------------------------------------------

def format_debug_report(
    points: Sequence[DecisionPoint],
    dwell_seconds: Optional[Mapping[int, float]] = None,
    lingered: Optional[Sequence[LingeredPoint]] = None,
    preview_chars: int = 90,
) -> str:
    """
    One row per point, plus a "Most lingered moments" block once playback
    has completed (pass lingered only then).
    """
    dwell_seconds = dwell_seconds or {}
    rows: List[str] = []
    for i, pt in enumerate(points):
        reasons = ", ".join(pt.reasons)
        rows.append(
            f"{i + 1}. leg {pt.leg_index} step {pt.step_index} · {_point_distance(pt)} · "
            f"score {pt.score} · {pt.commitment_level.value} · "
            f"dwell {_dwell_text(dwell_seconds.get(pt.index))} · {reasons} · "
            f"{truncate_text(pt.instruction, preview_chars)}"
        )

    if lingered:
        rows.append("")
        rows.append("Most lingered moments")
        for rank, entry in enumerate(lingered, start=1):
            pt = entry.point
            rows.append(
                f"{rank}. #{pt.index + 1} · {pt.commitment_level.value} · "
                f"{_dwell_text(entry.dwell_seconds)} · {entry.stress_score:.1f} · "
                f"{truncate_text(pt.instruction, preview_chars)}"
            )
    return "\n".join(rows)


def report_frame(
    points: Sequence[DecisionPoint],
    dwell_seconds: Optional[Mapping[int, float]] = None,
) -> pd.DataFrame:
    """Tabular form of the debug report, one row per point."""
    dwell_seconds = dwell_seconds or {}
    return pd.DataFrame({
        "index": [pt.index for pt in points],
        "leg": [pt.leg_index for pt in points],
        "step": [pt.step_index for pt in points],
        "distance": [pt.distance_meters for pt in points],
        "score": [pt.score for pt in points],
        "commitment": [pt.commitment_level.value for pt in points],
        "dwell_s": [dwell_seconds.get(pt.index, 0.0) for pt in points],
        "reasons": [", ".join(pt.reasons) for pt in points],
        "instruction": [pt.instruction for pt in points],
    }, columns=REPORT_COLUMNS)
