# patterns.py
# Instruction phrase tables used by the step scorer.
# Tables are plain data: swap ENGLISH_PATTERNS for another locale's table
# and the scorer works unchanged.

import re
from dataclasses import dataclass
from typing import Dict, Tuple


def _compile(*expressions: str) -> Tuple[re.Pattern, ...]:
    return tuple(re.compile(expr, re.IGNORECASE) for expr in expressions)


@dataclass(frozen=True)
class InstructionPatterns:
    """
    Phrase tables for one instruction locale.

    Attributes:
        complex_maneuvers:  maneuver code → junction type
        turn_maneuvers:     plain turn codes that still count as a major maneuver
        roundabout:         text that identifies a roundabout
        lane_commitment:    text that commits the driver to a lane
        prepare:            text that announces an upcoming maneuver
        visual_overload:    road-sign / destination cues
        social_pressure:    high-stakes destination categories
        complexity_keywords: ordered (pattern, junction type) pairs
        exit_ordinal:       explicit roundabout exit number ("2nd exit")
        cruise:             plain continuation phrases
        cruise_breakers:    cues that cancel the cruise override
    """

    complex_maneuvers: Dict[str, str]
    turn_maneuvers: frozenset
    roundabout: Tuple[re.Pattern, ...]
    lane_commitment: Tuple[re.Pattern, ...]
    prepare: Tuple[re.Pattern, ...]
    visual_overload: Tuple[re.Pattern, ...]
    social_pressure: Tuple[re.Pattern, ...]
    complexity_keywords: Tuple[Tuple[re.Pattern, str], ...]
    exit_ordinal: re.Pattern
    cruise: Tuple[re.Pattern, ...]
    cruise_breakers: Tuple[re.Pattern, ...]


# ---------------------------------------------------------------------------
# English (Google Directions phrasing, UK and US)
# ---------------------------------------------------------------------------

ENGLISH_PATTERNS = InstructionPatterns(
    complex_maneuvers={
        "roundabout-left":  "roundabout",
        "roundabout-right": "roundabout",
        "merge":            "merge",
        "fork-left":        "fork",
        "fork-right":       "fork",
        "ramp-left":        "merge",
        "ramp-right":       "merge",
        "turn-sharp-left":  "sharp-turn",
        "turn-sharp-right": "sharp-turn",
        "uturn-left":       "uturn",
        "uturn-right":      "uturn",
    },
    turn_maneuvers=frozenset({"turn-left", "turn-right"}),
    roundabout=_compile(
        r"roundabout",
        r"exit\s+the\s+roundabout",
        r"traffic\s+circle",
        r"gyratory",
        r"rotary",
        r"take\s+the\s+\d+(st|nd|rd|th)\s+exit",
    ),
    lane_commitment=_compile(
        r"keep\s+left",
        r"keep\s+right",
        r"use\s+the\s+left\s+lane",
        r"use\s+the\s+right\s+lane",
        r"stay\s+in\s+the\s+left",
        r"stay\s+in\s+the\s+right",
        r"merge",
        r"slip\s+road",
        r"exit",
        r"take\s+the\s+ramp",
        r"keep\s+to",
    ),
    prepare=_compile(
        r"prepare",
        r"keep",
        r"merge",
        r"exit",
        r"take\s+the\s+ramp",
    ),
    visual_overload=_compile(
        r"signs?",
        r"towards",
        r"\bA\d+\b",
        r"\bM\d+\b",
        r"\bB\d+\b",
        r"destination",
        r"follow",
    ),
    social_pressure=_compile(
        r"city\s+centre",
        r"airport",
        r"hospital",
    ),
    complexity_keywords=tuple(
        (re.compile(expr, re.IGNORECASE), junction_type)
        for expr, junction_type in (
            (r"merge\s+onto",         "merge"),
            (r"take\s+the\s+ramp",    "merge"),
            (r"keep\s+(left|right)",  "fork"),
            (r"fork",                 "fork"),
            (r"sharp\s+(left|right)", "sharp-turn"),
            (r"u-turn",               "uturn"),
            (r"lane",                 "complex"),
            (r"slip\s+road",          "merge"),
        )
    ),
    exit_ordinal=re.compile(r"(\d+)(st|nd|rd|th)\s+exit", re.IGNORECASE),
    cruise=_compile(
        r"continue\s+on\s+[am]\d+",
        r"continue\s+for\s+\d+",
        r"continue\s+straight",
    ),
    cruise_breakers=_compile(r"exit", r"merge"),
)
