# step_scorer.py
# Heuristic rehearsal-worthiness scoring for individual route steps.
# Each step is judged together with its immediate neighbours.

import logging
import re
from typing import Iterable, List, Optional, Sequence

from .models import CommitmentLevel, FlatStep, JunctionType, ScoredStep
from .nav_config import RehearsalConfig

logger = logging.getLogger(__name__)


def _matches_any(patterns: Iterable[re.Pattern], text: str) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def commitment_level(reasons: Sequence[str]) -> CommitmentLevel:
    """
    Qualitative severity derived from the reasons a step scored.

    high:   lane commitment under a short window, or a numbered roundabout
            exit that also needs a lane commitment
    medium: any single one of those signals
    """
    lane = "lane-commitment" in reasons
    short = "short-window" in reasons
    exit_ordinal = "roundabout-exit" in reasons

    if (lane and short) or (exit_ordinal and lane):
        return CommitmentLevel.HIGH
    if lane or short or exit_ordinal:
        return CommitmentLevel.MEDIUM
    return CommitmentLevel.LOW


class StepScorer:
    """
    Applies the scoring rules to a flattened route.

    Args:
        config: RehearsalConfig with weights, distance thresholds and the
                instruction pattern table to match against.
    """

    def __init__(self, config: Optional[RehearsalConfig] = None) -> None:
        self.config = config or RehearsalConfig()
        self.patterns = self.config.patterns

    # ------------------------------------------------------------------
    # Pattern predicates
    # ------------------------------------------------------------------

    def is_roundabout(self, step: FlatStep) -> bool:
        if step.maneuver and self.patterns.complex_maneuvers.get(step.maneuver) == "roundabout":
            return True
        return _matches_any(self.patterns.roundabout, step.instruction_html)

    def has_complexity_signal(self, step: FlatStep) -> bool:
        text = step.instruction_html
        return (
            any(pattern.search(text) for pattern, _ in self.patterns.complexity_keywords)
            or _matches_any(self.patterns.roundabout, text)
            or _matches_any(self.patterns.lane_commitment, text)
        )

    def is_prepare(self, step: FlatStep) -> bool:
        return _matches_any(self.patterns.prepare, step.instruction.lower())

    def is_major_maneuver(self, step: Optional[FlatStep]) -> bool:
        if step is None:
            return False
        if step.maneuver and (
            step.maneuver in self.patterns.complex_maneuvers
            or step.maneuver in self.patterns.turn_maneuvers
        ):
            return True
        return self.has_complexity_signal(step)

    def is_motorway_cruise(self, text: str) -> bool:
        if not _matches_any(self.patterns.cruise, text):
            return False
        has_lane_cue = (
            _matches_any(self.patterns.lane_commitment, text)
            or _matches_any(self.patterns.cruise_breakers, text)
        )
        return not has_lane_cue

    def junction_type(self, step: FlatStep) -> JunctionType:
        """Roundabout first, then the maneuver table, then keywords in order."""
        if self.is_roundabout(step):
            return JunctionType.ROUNDABOUT
        if step.maneuver and step.maneuver in self.patterns.complex_maneuvers:
            return JunctionType(self.patterns.complex_maneuvers[step.maneuver])
        for pattern, type_name in self.patterns.complexity_keywords:
            if pattern.search(step.instruction_html):
                return JunctionType(type_name)
        return JunctionType.COMPLEX

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def score(
        self,
        step: FlatStep,
        prev: Optional[FlatStep] = None,
        next_step: Optional[FlatStep] = None,
    ) -> ScoredStep:
        """
        Score one step.

        Args:
            step:      The step being judged.
            prev:      Its predecessor in route order (unused by the current
                       rules; kept so rule tables can look backwards).
            next_step: Its successor in route order, for the short-window rule.

        Returns:
            ScoredStep carrying score, reasons, exclusion and junction type.
        """
        cfg = self.config
        weights = cfg.weights
        text = step.instruction.lower()
        junction_type = self.junction_type(step)

        # 1. Motorway cruise overrides every other signal
        if self.is_motorway_cruise(text):
            return ScoredStep.from_flat(
                step, score=0, reasons=("motorway-cruise",), exclude=True,
                junction_type=junction_type, is_primary=False,
            )

        reasons: List[str] = []
        score = 0

        # 2. Lane commitment; numbered exits belong to the roundabout rule
        if _matches_any(self.patterns.lane_commitment, self.patterns.exit_ordinal.sub("", text)):
            score += weights.lane_commitment
            reasons.append("lane-commitment")

        # 3. Roundabout
        roundabout = self.is_roundabout(step)
        if roundabout:
            score += weights.roundabout
            reasons.append("roundabout")
            if self.patterns.exit_ordinal.search(text):
                score += weights.roundabout_exit
                reasons.append("roundabout-exit")
            elif 0 < step.distance_meters < cfg.small_roundabout_m:
                score += weights.small_roundabout
                reasons.append("small-roundabout")

        # 4. Short decision window
        if next_step is not None and self.is_prepare(step) and self.is_major_maneuver(next_step):
            gap = next_step.distance_meters
            if 0 < gap <= cfg.short_window_tight_m:
                score += weights.short_window_tight
                reasons.append("short-window")
            elif 0 < gap <= cfg.short_window_m:
                score += weights.short_window
                reasons.append("short-window")

        # 5. Signage / visual overload
        if (_matches_any(self.patterns.visual_overload, step.instruction_html)
                or _matches_any(self.patterns.visual_overload, text)):
            score += weights.signage
            reasons.append("signage")

        # 6. Social pressure
        if _matches_any(self.patterns.social_pressure, text):
            score += weights.pressure
            reasons.append("pressure")

        score = max(0, score)

        # 7. Nothing worth rehearsing
        if score == 0 and not self.has_complexity_signal(step):
            return ScoredStep.from_flat(
                step, score=0, reasons=tuple(reasons), exclude=True,
                junction_type=junction_type, is_primary=False,
            )

        # A point without a location cannot be shown
        exclude = step.start is None
        if exclude:
            logger.debug(f"Step {step.order_index} has no start coordinate, excluded.")

        return ScoredStep.from_flat(
            step, score=score, reasons=tuple(reasons), exclude=exclude,
            junction_type=junction_type, is_primary=roundabout,
        )

    def score_route(self, steps: List[FlatStep]) -> List[ScoredStep]:
        """Score every step in context of its neighbours."""
        scored: List[ScoredStep] = []
        for i, step in enumerate(steps):
            prev = steps[i - 1] if i > 0 else None
            nxt = steps[i + 1] if i + 1 < len(steps) else None
            result = self.score(step, prev, nxt)
            logger.debug(
                f"Step {result.order_index} (leg {result.leg_index}/{result.step_index}): "
                f"score {result.score} {list(result.reasons)}"
                f"{' excluded' if result.exclude else ''}"
            )
            scored.append(result)
        return scored
