# models.py
# Shared data structures and enums used across all modules.

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coord:
    """Immutable geographic coordinate."""
    lat: float
    lon: float


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class JunctionType(Enum):
    ROUNDABOUT = "roundabout"
    MERGE      = "merge"
    FORK       = "fork"
    SHARP_TURN = "sharp-turn"
    UTURN      = "uturn"
    COMPLEX    = "complex"

    @property
    def label(self) -> str:
        return _TYPE_LABELS[self]


_TYPE_LABELS = {
    JunctionType.ROUNDABOUT: "Roundabout",
    JunctionType.MERGE:      "Merge",
    JunctionType.FORK:       "Fork / Lane Split",
    JunctionType.SHARP_TURN: "Sharp Turn",
    JunctionType.UTURN:      "U-Turn",
    JunctionType.COMPLEX:    "Tricky Junction",
}


class CommitmentLevel(Enum):
    LOW    = "low"
    MEDIUM = "medium"
    HIGH   = "high"


class PlaybackStatus(Enum):
    IDLE      = "idle"
    SHOWING   = "showing"
    PLAYING   = "playing"
    COMPLETED = "completed"


class AnalysisStatus(Enum):
    NO_ROUTE      = "no_route"
    NO_CANDIDATES = "no_candidates"
    READY         = "ready"


# ---------------------------------------------------------------------------
# Routing service input
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RawStep:
    """A single step as delivered by the routing service."""
    leg_index: int
    step_index: int
    start: Optional[Coord]
    end: Optional[Coord]
    distance_meters: float = 0.0
    distance_text: str = ""
    instruction_html: str = ""
    maneuver: Optional[str] = None


@dataclass
class RouteLeg:
    """One leg of a route: total distance plus its ordered steps."""
    distance_meters: float = 0.0
    steps: List[RawStep] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Analysis pipeline records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FlatStep:
    """A RawStep placed in whole-route order, with derived heading and text."""
    order_index: int
    leg_index: int
    step_index: int
    start: Optional[Coord]
    end: Optional[Coord]
    distance_meters: float
    distance_text: str
    instruction_html: str
    instruction: str                 # markup stripped
    heading: float                   # degrees [0, 360)
    maneuver: Optional[str] = None


@dataclass(frozen=True)
class ScoredStep(FlatStep):
    """A FlatStep plus the scorer's verdict."""
    score: int = 0
    reasons: Tuple[str, ...] = ()
    exclude: bool = False
    junction_type: JunctionType = JunctionType.COMPLEX
    is_primary: bool = False
    is_lead_in: bool = False

    @classmethod
    def from_flat(cls, flat: FlatStep, **verdict: Any) -> "ScoredStep":
        base = {f.name: getattr(flat, f.name) for f in fields(FlatStep)}
        return cls(**base, **verdict)


# ---------------------------------------------------------------------------
# Output contract
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DecisionPoint:
    """A junction selected for rehearsal."""
    index: int                       # position in the final sequence
    order_index: int                 # position in the flattened route
    leg_index: int
    step_index: int
    location: Coord
    heading: float
    instruction: str
    junction_type: JunctionType
    type_label: str
    is_primary: bool
    is_lead_in: bool
    is_decision_point: bool
    commitment_level: CommitmentLevel
    score: int
    reasons: Tuple[str, ...]
    distance_meters: float
    distance_text: str
    maneuver: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "order_index": self.order_index,
            "leg_index": self.leg_index,
            "step_index": self.step_index,
            "location": {"lat": self.location.lat, "lon": self.location.lon},
            "heading": self.heading,
            "instruction": self.instruction,
            "type": self.junction_type.value,
            "type_label": self.type_label,
            "is_primary": self.is_primary,
            "is_lead_in": self.is_lead_in,
            "is_decision_point": self.is_decision_point,
            "commitment_level": self.commitment_level.value,
            "score": self.score,
            "reasons": list(self.reasons),
            "distance_meters": self.distance_meters,
            "distance": self.distance_text,
            "maneuver": self.maneuver,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "DecisionPoint":
        return DecisionPoint(
            index=d["index"],
            order_index=d["order_index"],
            leg_index=d["leg_index"],
            step_index=d["step_index"],
            location=Coord(d["location"]["lat"], d["location"]["lon"]),
            heading=d["heading"],
            instruction=d["instruction"],
            junction_type=JunctionType(d["type"]),
            type_label=d["type_label"],
            is_primary=d["is_primary"],
            is_lead_in=d["is_lead_in"],
            is_decision_point=d["is_decision_point"],
            commitment_level=CommitmentLevel(d["commitment_level"]),
            score=d["score"],
            reasons=tuple(d["reasons"]),
            distance_meters=d["distance_meters"],
            distance_text=d["distance"],
            maneuver=d.get("maneuver"),
        )


@dataclass
class AnalysisResult:
    """Returned by analyze_route(): outcome, user-facing message and points."""
    status: AnalysisStatus
    message: str
    points: List[DecisionPoint] = field(default_factory=list)
    total_distance_m: float = 0.0


# ---------------------------------------------------------------------------
# Playback
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlaybackState:
    """Snapshot pushed to subscribers on every sequencer change."""
    status: PlaybackStatus
    current_index: int
    total: int
    point: Optional[DecisionPoint]
    is_playing: bool
    speed: float
    progress: float                  # percent
    is_first: bool
    is_last: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "current_index": self.current_index,
            "total": self.total,
            "point_index": self.point.index if self.point else None,
            "is_playing": self.is_playing,
            "speed": self.speed,
            "progress": round(self.progress, 2),
            "is_first": self.is_first,
            "is_last": self.is_last,
        }


@dataclass(frozen=True)
class LingeredPoint:
    """A decision point ranked by weighted dwell time."""
    point: DecisionPoint
    dwell_seconds: float
    stress_score: float
