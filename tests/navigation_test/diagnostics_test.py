import pytest

from navigation.rehearsal.diagnostics import (
    REPORT_COLUMNS, format_debug_report, format_distance, format_duration,
    format_route_summary, junction_overview, report_frame, truncate_text,
)
from navigation.rehearsal.models import CommitmentLevel
from navigation.rehearsal.stress import most_lingered

from conftest import build_route, make_point, step


@pytest.mark.parametrize("meters, text", [
    (0, ""), (None, ""), (640, "640 m"), (1234, "1.2 km"), (12_345, "12 km"),
])
def test_format_distance(meters, text):
    assert format_distance(meters) == text


@pytest.mark.parametrize("seconds, text", [
    (0, ""), (840, "14 min"), (3600, "1 hr"), (3900, "1 hr 5 min"),
])
def test_format_duration(seconds, text):
    assert format_duration(seconds) == text


def test_truncate_text():
    assert truncate_text("short", 90) == "short"
    assert truncate_text("abcdefghij", 5) == "abcd…"


def test_route_summary():
    result = build_route(
        [step("Head north", 6000)],
        [step("Turn left", 6000)],
        start_address="Reading, UK",
        end_address="Heathrow Airport, Longford, UK",
        duration={"value": 840, "text": "14 min"},
    )
    assert format_route_summary(result) == "Reading → Heathrow Airport · 12 km · 28 min"
    assert format_route_summary(None) == ""


def test_junction_overview(points):
    overview = junction_overview(points)
    assert overview["total"] == 3
    assert overview["roundabouts"] == 0
    assert overview["decision_points"] == 1
    assert overview["rows"][1] == "2. [Tricky Junction] Junction 1"


def test_debug_report_rows_and_lingered_block():
    points = [make_point(0, level=CommitmentLevel.MEDIUM), make_point(1, instruction="x" * 120)]
    dwell = {0: 4.4}

    before = format_debug_report(points, dwell)
    assert before.splitlines()[0] == (
        "1. leg 0 step 0 · 300 m · score 4 · medium · dwell 4s · lane-commitment · Junction 0"
    )
    assert before.splitlines()[1].endswith("x" * 89 + "…")
    assert "Most lingered moments" not in before

    after = format_debug_report(points, dwell, most_lingered(points, dwell))
    lines = after.splitlines()
    assert lines[3] == "Most lingered moments"
    assert lines[4] == "1. #1 · medium · 4s · 6.6 · Junction 0"


def test_report_frame(points):
    frame = report_frame(points, {1: 2.5})
    assert list(frame.columns) == REPORT_COLUMNS
    assert len(frame) == 3
    assert frame["dwell_s"].tolist() == [0.0, 2.5, 0.0]
    assert frame["commitment"].tolist() == ["low", "low", "low"]
