# stress.py
# "Most lingered" ranking: which junctions held the driver's attention longest.

from typing import Dict, List, Mapping, Optional, Sequence

from .models import DecisionPoint, LingeredPoint
from .nav_config import COMMITMENT_WEIGHTS


def most_lingered(
    points: Sequence[DecisionPoint],
    dwell_seconds: Mapping[int, float],
    weights: Optional[Dict[str, float]] = None,
    top_n: int = 3,
) -> List[LingeredPoint]:
    """
    Rank points by dwell time weighted by commitment level.

    Args:
        points:        Decision points of the rehearsal.
        dwell_seconds: Sequencer dwell record keyed by point index; points
                       never shown count as zero.
        weights:       commitment level → weight (low 1, medium 1.5, high 2).
        top_n:         How many entries to return.

    Returns:
        Up to top_n LingeredPoint, highest stress first (ties by index).
    """
    weights = weights or COMMITMENT_WEIGHTS
    ranked = []
    for point in points:
        dwell = dwell_seconds.get(point.index, 0.0)
        weight = weights.get(point.commitment_level.value, 1.0)
        ranked.append(LingeredPoint(point, dwell, dwell * weight))
    ranked.sort(key=lambda entry: (-entry.stress_score, entry.point.index))
    return ranked[:top_n]
