# step_flattener.py
# Turns a Directions-style routing result into one ordered list of steps.
# Total and order-preserving: nothing is filtered here.

import logging
from typing import Any, Dict, List, Optional

from .geo_utils import calculate_bearing, strip_markup
from .models import Coord, FlatStep, RawStep, RouteLeg

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _parse_coord(raw: Any) -> Optional[Coord]:
    """Accepts {"lat", "lng"} (Directions) or {"lat", "lon"}; None if unusable."""
    if not isinstance(raw, dict):
        return None
    lat = raw.get("lat")
    lon = raw.get("lng", raw.get("lon"))
    try:
        return Coord(float(lat), float(lon))
    except (TypeError, ValueError):
        return None


def _parse_distance(raw: Any):
    if not isinstance(raw, dict):
        return 0.0, ""
    return _as_float(raw.get("value")), str(raw.get("text") or "")


def _parse_step(raw: Dict[str, Any], leg_index: int, step_index: int) -> RawStep:
    meters, text = _parse_distance(raw.get("distance"))
    instruction = raw.get("html_instructions", raw.get("instructions")) or ""
    return RawStep(
        leg_index=leg_index,
        step_index=step_index,
        start=_parse_coord(raw.get("start_location")),
        end=_parse_coord(raw.get("end_location")),
        distance_meters=meters,
        distance_text=text,
        instruction_html=str(instruction),
        maneuver=raw.get("maneuver") or None,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_directions(result: Optional[Dict[str, Any]]) -> Optional[List[RouteLeg]]:
    """
    Read the first route of a Directions-style result.

    Args:
        result: {"routes": [{"legs": [{"distance": {...}, "steps": [...]}]}]}

    Returns:
        List of RouteLeg, or None when the result holds no route.
    """
    if not isinstance(result, dict):
        return None
    routes = result.get("routes") or []
    if not isinstance(routes, list) or not routes or not isinstance(routes[0], dict):
        return None

    legs: List[RouteLeg] = []
    for leg_index, raw_leg in enumerate(routes[0].get("legs") or []):
        if not isinstance(raw_leg, dict):
            logger.debug(f"Leg {leg_index} is not a mapping, treated as empty.")
            legs.append(RouteLeg())
            continue
        meters, _ = _parse_distance(raw_leg.get("distance"))
        steps = [
            _parse_step(raw, leg_index, step_index)
            for step_index, raw in enumerate(raw_leg.get("steps") or [])
            if isinstance(raw, dict)
        ]
        legs.append(RouteLeg(distance_meters=meters, steps=steps))
    return legs


def total_distance(legs: List[RouteLeg]) -> float:
    """Sum of per-leg distances in metres."""
    return sum(leg.distance_meters for leg in legs if leg.distance_meters > 0)


def flatten_route(legs: List[RouteLeg]) -> List[FlatStep]:
    """
    Concatenate every leg's steps into whole-route order.

    Each step gets a strictly increasing order_index, the initial bearing
    from its start to its end coordinate and a plain-text instruction.
    """
    flat: List[FlatStep] = []
    for leg in legs:
        for step in leg.steps:
            heading = 0.0
            if step.start and step.end:
                heading = calculate_bearing(
                    step.start.lat, step.start.lon,
                    step.end.lat, step.end.lon,
                )
            flat.append(FlatStep(
                order_index=len(flat),
                leg_index=step.leg_index,
                step_index=step.step_index,
                start=step.start,
                end=step.end,
                distance_meters=step.distance_meters,
                distance_text=step.distance_text,
                instruction_html=step.instruction_html,
                instruction=strip_markup(step.instruction_html),
                heading=heading,
                maneuver=step.maneuver,
            ))
    return flat
