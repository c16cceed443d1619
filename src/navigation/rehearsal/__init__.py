# Junction rehearsal: pick the hard junctions on a route, then play them back.

from .models import (
    AnalysisResult, AnalysisStatus, CommitmentLevel, Coord, DecisionPoint,
    JunctionType, PlaybackState, PlaybackStatus,
)
from .nav_config import RehearsalConfig, ScoreWeights
from .navigator import RehearsalSystem
from .patterns import ENGLISH_PATTERNS, InstructionPatterns
from .playback import PlaybackSequencer
from .route_analyzer import RouteAnalyzer
from .scheduler import TimerScheduler, VirtualScheduler
from .stress import most_lingered

__all__ = [
    "AnalysisResult", "AnalysisStatus", "CommitmentLevel", "Coord", "DecisionPoint",
    "JunctionType", "PlaybackState", "PlaybackStatus", "RehearsalConfig", "ScoreWeights",
    "RehearsalSystem", "ENGLISH_PATTERNS", "InstructionPatterns", "PlaybackSequencer",
    "RouteAnalyzer", "TimerScheduler", "VirtualScheduler", "most_lingered",
]
