import pytest

from navigation.rehearsal.models import CommitmentLevel, Coord, DecisionPoint, JunctionType
from navigation.rehearsal.nav_config import RehearsalConfig
from navigation.rehearsal.scheduler import VirtualScheduler

BASE_LAT = 51.5
BASE_LON = -0.12
STEP_DEG = 0.01          # ≈ 1.1 km of latitude between consecutive steps


def step(text, meters=500, maneuver=None, text_key="html_instructions"):
    """A step dict without coordinates; build_route() places it."""
    raw = {text_key: text, "distance": {"value": meters, "text": f"{meters} m"}}
    if maneuver:
        raw["maneuver"] = maneuver
    return raw


def build_route(*legs, leg_meters=None, step_deg=STEP_DEG, **leg_fields):
    """
    Directions-style result; every step starts step_deg further north than
    the previous one and ends where the next one starts.
    """
    position = 0
    out_legs = []
    for leg_index, steps in enumerate(legs):
        placed = []
        for raw in steps:
            raw = dict(raw)
            raw.setdefault("start_location", {"lat": BASE_LAT + position * step_deg, "lng": BASE_LON})
            raw.setdefault("end_location", {"lat": BASE_LAT + (position + 1) * step_deg, "lng": BASE_LON})
            placed.append(raw)
            position += 1
        meters = leg_meters if leg_meters is not None else sum(s["distance"]["value"] for s in steps)
        leg = {"distance": {"value": meters, "text": f"{meters / 1000:.1f} km"}, "steps": placed}
        leg.update(leg_fields)
        out_legs.append(leg)
    return {"routes": [{"legs": out_legs}]}


def make_point(index, is_decision=False, level=CommitmentLevel.LOW, instruction=None):
    return DecisionPoint(
        index=index,
        order_index=index * 2,
        leg_index=0,
        step_index=index * 2,
        location=Coord(BASE_LAT + index * STEP_DEG, BASE_LON),
        heading=0.0,
        instruction=instruction or f"Junction {index}",
        junction_type=JunctionType.COMPLEX,
        type_label=JunctionType.COMPLEX.label,
        is_primary=False,
        is_lead_in=False,
        is_decision_point=is_decision,
        commitment_level=level,
        score=9 if is_decision else 4,
        reasons=("lane-commitment",),
        distance_meters=300.0,
        distance_text="300 m",
    )


@pytest.fixture
def config():
    return RehearsalConfig()


@pytest.fixture
def clock():
    return VirtualScheduler()


@pytest.fixture
def points():
    return [make_point(0), make_point(1, is_decision=True), make_point(2)]
