# nav_config.py
# All tuneable constants in one place.
# Pass a RehearsalConfig instance to every module that needs settings.

import os
from dataclasses import dataclass, field
from typing import Dict, Tuple

from .patterns import ENGLISH_PATTERNS, InstructionPatterns


# ---------------------------------------------------------------------------
# Playback constants
# ---------------------------------------------------------------------------

SKIP_SPEED: float = 0.0                       # sentinel: advance without dwelling
SUPPORTED_SPEEDS: Tuple[float, ...] = (0.5, 1.0, 2.0, SKIP_SPEED)

COMMITMENT_WEIGHTS: Dict[str, float] = {"low": 1.0, "medium": 1.5, "high": 2.0}


# ---------------------------------------------------------------------------
# Scoring weights
# ---------------------------------------------------------------------------

@dataclass
class ScoreWeights:
    lane_commitment: int = 6
    roundabout: int = 4
    roundabout_exit: int = 2
    small_roundabout: int = -3
    short_window_tight: int = 6           # next maneuver ≤ short_window_tight_m away
    short_window: int = 4                 # next maneuver ≤ short_window_m away
    signage: int = 2
    pressure: int = 1


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class RehearsalConfig:
    # Scoring
    weights: ScoreWeights = field(default_factory=ScoreWeights)
    patterns: InstructionPatterns = ENGLISH_PATTERNS
    small_roundabout_m: float = 120.0
    short_window_tight_m: float = 120.0
    short_window_m: float = 250.0
    decision_score_threshold: int = 8     # score ≥ this → flagged decision point

    # Selection
    spacing_m: float = 150.0              # min distance between independent points
    min_points: int = 6
    max_points: int = 12
    default_target: int = 8               # used when the route length is unknown
    km_per_point: float = 7.0
    base_points: int = 5
    lead_in_min_distance_m: float = 40.0

    # Playback
    base_dwell_ms: float = 5000.0
    decision_dwell_multiplier: float = 1.6
    default_speed: float = 1.0
    commitment_weights: Dict[str, float] = field(
        default_factory=lambda: dict(COMMITMENT_WEIGHTS)
    )
    stress_top_n: int = 3

    # Diagnostics / logging
    verbose: bool = False
    log_events: bool = False              # append every playback state to session log
    instruction_preview_chars: int = 90
    log_dir: str = "."                    # directory for saved JSON files
    points_filename: str = "decision_points.json"
    session_filename: str = "rehearsal_session.jsonl"

    @property
    def points_filepath(self) -> str:
        return os.path.join(self.log_dir, self.points_filename)

    @property
    def session_filepath(self) -> str:
        return os.path.join(self.log_dir, self.session_filename)
