import pytest

from navigation.rehearsal.candidate_selector import CandidateSelector
from navigation.rehearsal.geo_utils import haversine_distance
from navigation.rehearsal.nav_config import RehearsalConfig
from navigation.rehearsal.step_flattener import flatten_route, parse_directions
from navigation.rehearsal.step_scorer import StepScorer

from conftest import build_route, step


def scored_route(result, config=None):
    legs = parse_directions(result)
    return StepScorer(config).score_route(flatten_route(legs))


@pytest.mark.parametrize("km, expected", [
    (70, 12),       # round(10) + 5 = 15, clamped
    (10, 6),        # round(1.43) + 5
    (31.5, 10),     # 4.5 rounds half up
    (3, 6),         # clamped to the minimum
    (0, 8),         # unknown length
])
def test_target_count(km, expected):
    assert CandidateSelector().target_count(km * 1000) == expected


def test_empty_when_nothing_qualifies():
    steps = scored_route(build_route([step("Head north"), step("Turn left onto High St")]))
    assert CandidateSelector().select(steps, 1000) == []


def test_spacing_keeps_higher_score():
    # two qualifying steps ~55 m apart
    result = build_route(
        [
            step("Keep left towards the City Centre", 50),    # 6 + 6 + 2 + 1
            step("Keep right", 50),                           # 6
            step("Head north on Park Rd", 800),
        ],
        step_deg=0.0005,
    )
    selected = CandidateSelector().select(scored_route(result), 900)
    main = [s for s in selected if not s.is_lead_in]

    assert [s.order_index for s in main] == [0]
    assert main[0].score == 15


def test_lead_in_added_before_selected_step():
    result = build_route([
        step("Head north on Park Rd", 800),
        step("At the roundabout, take the 3rd exit", 300, "roundabout-left"),
        step("Turn left onto High St", 30),
    ])
    selected = CandidateSelector().select(scored_route(result), 1130)

    assert [s.order_index for s in selected] == [0, 1]
    lead_in, junction = selected
    assert lead_in.is_lead_in is True
    assert lead_in.reasons[-1] == "lead-in"
    assert junction.is_lead_in is False


def test_short_predecessor_is_not_a_lead_in():
    result = build_route([
        step("Head north on Park Rd", 30),
        step("At the roundabout, take the 3rd exit", 300, "roundabout-left"),
    ])
    selected = CandidateSelector().select(scored_route(result), 330)
    assert [s.order_index for s in selected] == [1]


def test_prepare_predecessor_is_a_lead_in_even_when_short():
    result = build_route([
        step("Prepare to turn", 30),
        step("At the roundabout, take the 3rd exit", 300, "roundabout-left"),
    ])
    selected = CandidateSelector().select(scored_route(result), 330)
    assert [s.order_index for s in selected] == [0, 1]
    assert selected[0].is_lead_in


def test_lead_in_is_exempt_from_spacing():
    # lead-in and junction start ~55 m apart, inside spacing_m
    result = build_route(
        [
            step("Head north on Park Rd", 800),
            step("Prepare to turn", 30),
            step("At the roundabout, take the 3rd exit", 300, "roundabout-left"),
        ],
        step_deg=0.0005,
    )
    selected = CandidateSelector().select(scored_route(result), 1130)

    assert [s.order_index for s in selected] == [1, 2]
    lead_in, junction = selected
    assert lead_in.is_lead_in is True
    assert junction.is_lead_in is False
    gap = haversine_distance(lead_in.start.lat, lead_in.start.lon, junction.start.lat, junction.start.lon)
    assert gap < RehearsalConfig().spacing_m


def long_route(pairs=20):
    """Alternating plain approach steps and qualifying junctions, 1.1 km apart."""
    steps = []
    for i in range(pairs):
        steps.append(step(f"Head north on Road {i}", 1100))
        if i % 3 == 0:
            steps.append(step("At the roundabout, take the 2nd exit towards the Airport", 1100, "roundabout-right"))
        else:
            steps.append(step("Keep left at the fork", 1100, "fork-left"))
    return build_route(steps, leg_meters=70_000)


def test_trim_drops_lead_ins_first():
    selected = CandidateSelector().select(scored_route(long_route()), 70_000)

    assert len(selected) == 12
    assert not any(s.is_lead_in for s in selected)


def test_trim_to_max_keeps_highest_main_points():
    config = RehearsalConfig(max_points=4)
    selected = CandidateSelector(config).select(scored_route(long_route(), config), 70_000)

    assert len(selected) == 4
    assert all(s.score == 9 for s in selected)


def test_output_invariants_on_long_route():
    steps = scored_route(long_route())
    selected = CandidateSelector().select(steps, 70_000)

    orders = [s.order_index for s in selected]
    assert orders == sorted(orders) and len(set(orders)) == len(orders)
    main = [s for s in selected if not s.is_lead_in]
    for i, a in enumerate(main):
        for b in main[i + 1:]:
            assert haversine_distance(a.start.lat, a.start.lon, b.start.lat, b.start.lon) >= 150


def test_equal_scores_prefer_earlier_steps():
    result = build_route([step("Keep left at the fork", 1100, "fork-left") for _ in range(10)], leg_meters=10_000)
    selected = CandidateSelector().select(scored_route(result), 10_000)
    main = [s.order_index for s in selected if not s.is_lead_in]
    assert main == [0, 1, 2, 3, 4, 5]
