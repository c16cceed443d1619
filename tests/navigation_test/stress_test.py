import pytest

from navigation.rehearsal.models import CommitmentLevel
from navigation.rehearsal.stress import most_lingered

from conftest import make_point


def test_weighted_by_commitment_level():
    points = [
        make_point(0, level=CommitmentLevel.LOW),
        make_point(1, level=CommitmentLevel.HIGH),
        make_point(2, level=CommitmentLevel.MEDIUM),
        make_point(3, level=CommitmentLevel.LOW),
    ]
    dwell = {0: 10.0, 1: 6.0, 2: 7.0, 3: 2.0}

    ranked = most_lingered(points, dwell)

    assert [entry.point.index for entry in ranked] == [1, 2, 0]
    assert [entry.stress_score for entry in ranked] == pytest.approx([12.0, 10.5, 10.0])


def test_unshown_points_count_as_zero():
    points = [make_point(0), make_point(1)]
    ranked = most_lingered(points, {1: 1.0})

    assert ranked[0].point.index == 1
    assert ranked[1].dwell_seconds == 0.0
    assert ranked[1].stress_score == 0.0


def test_ties_keep_route_order_and_top_n():
    points = [make_point(i) for i in range(5)]
    ranked = most_lingered(points, {i: 4.0 for i in range(5)}, top_n=2)
    assert [entry.point.index for entry in ranked] == [0, 1]
