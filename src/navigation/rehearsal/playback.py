# playback.py
# State machine that walks a decision point list with auto-advance timers.
# Call init() once per rehearsal, then drive it with play/pause/next/prev.
#
#   IDLE ──init──▶ SHOWING ◀──pause/play──▶ PLAYING
#                     │                        │
#                     └──────next at end───────┴──▶ COMPLETED

import logging
import threading
from typing import Callable, Dict, List, Optional, Sequence

from .models import DecisionPoint, PlaybackState, PlaybackStatus
from .nav_config import SKIP_SPEED, SUPPORTED_SPEEDS, RehearsalConfig
from .scheduler import TimerScheduler

logger = logging.getLogger(__name__)

Subscriber = Callable[[PlaybackState], None]


class PlaybackSequencer:
    """
    Stepwise playback of decision points.

    Dwell telemetry lives in a separate record keyed by point index; the
    DecisionPoint objects themselves are never modified.

    Usage:
        sequencer = PlaybackSequencer(config)
        unsubscribe = sequencer.subscribe(render)
        sequencer.init(points)
        sequencer.play()

    Args:
        config:    RehearsalConfig with dwell timing.
        scheduler: Object with schedule(delay_ms, cb) / cancel(token) / now();
                   defaults to a real-time TimerScheduler.
        clock:     Seconds source for dwell measurement; defaults to
                   scheduler.now.
    """

    def __init__(
        self,
        config: Optional[RehearsalConfig] = None,
        scheduler=None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.config = config or RehearsalConfig()
        self._scheduler = scheduler or TimerScheduler()
        self._clock = clock or self._scheduler.now
        self._lock = threading.RLock()

        self._points: List[DecisionPoint] = []
        self._index: int = 0
        self._status = PlaybackStatus.IDLE
        self._speed: float = self.config.default_speed
        self._timer = None
        self._timer_generation: int = 0
        self._shown_at: Optional[float] = None
        self._dwell: Dict[int, float] = {}
        self._subscribers: List[Subscriber] = []

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register for state snapshots; returns a function that unsubscribes."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _emit(self) -> None:
        snapshot = self.state
        for callback in list(self._subscribers):
            callback(snapshot)

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def status(self) -> PlaybackStatus:
        return self._status

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def is_playing(self) -> bool:
        return self._status is PlaybackStatus.PLAYING

    @property
    def points(self) -> List[DecisionPoint]:
        return list(self._points)

    @property
    def dwell_seconds(self) -> Dict[int, float]:
        """Seconds each point was current, keyed by point index."""
        return dict(self._dwell)

    @property
    def state(self) -> PlaybackState:
        total = len(self._points)
        point = self._points[self._index] if 0 <= self._index < total else None
        return PlaybackState(
            status=self._status,
            current_index=self._index,
            total=total,
            point=point,
            is_playing=self.is_playing,
            speed=self._speed,
            progress=((self._index + 1) / total) * 100 if total else 0.0,
            is_first=self._index == 0,
            is_last=self._index == total - 1,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self, points: Sequence[DecisionPoint]) -> None:
        """Load a new point list, reset to the first point and show it."""
        with self._lock:
            self._cancel_timer()
            self._points = list(points)
            self._index = 0
            self._speed = self.config.default_speed
            self._shown_at = None
            self._dwell = {}

            if not self._points:
                self._status = PlaybackStatus.IDLE
                logger.warning("Sequencer initialised with no points; staying idle.")
                return

            self._status = PlaybackStatus.SHOWING
            self._show(0)

    def destroy(self) -> None:
        """Stop playback, finalise the current dwell and drop the points."""
        with self._lock:
            self._cancel_timer()
            self._record_dwell()
            self._points = []
            self._index = 0
            self._status = PlaybackStatus.IDLE
            self._emit()

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def play(self) -> None:
        with self._lock:
            if not self._points:
                return
            self._status = PlaybackStatus.PLAYING
            if self._shown_at is None:
                self._shown_at = self._clock()
            self._emit()
            self._arm()

    def pause(self) -> None:
        """
        Stop auto-advance and write the current point's dwell so far.

        The point stays current, so its dwell keeps counting from when it
        was first shown. A COMPLETED sequencer stays COMPLETED.
        """
        with self._lock:
            self._cancel_timer()
            if self._shown_at is not None and 0 <= self._index < len(self._points):
                self._dwell[self._index] = self._clock() - self._shown_at
            if self._status is PlaybackStatus.PLAYING:
                self._status = PlaybackStatus.SHOWING
                self._emit()

    def toggle_play(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def next(self) -> None:
        with self._lock:
            if not self._points:
                return
            if self._index < len(self._points) - 1:
                self._show(self._index + 1)
                self._arm()
            else:
                self._complete()

    def prev(self) -> None:
        with self._lock:
            if not self._points or self._index == 0:
                return
            if self._status is PlaybackStatus.COMPLETED:
                self._status = PlaybackStatus.SHOWING
            self._show(self._index - 1)
            self._arm()

    def go_to(self, index: int) -> None:
        """Jump straight to a point, e.g. one picked from the overview list."""
        with self._lock:
            if not 0 <= index < len(self._points):
                logger.warning(f"go_to({index}) ignored: {len(self._points)} points loaded.")
                return
            if self._status is PlaybackStatus.COMPLETED:
                self._status = PlaybackStatus.SHOWING
            self._show(index)
            self._arm()

    def set_speed(self, multiplier: float) -> None:
        """
        Args:
            multiplier: 0.5, 1 or 2; 0 means skip (advance without dwelling).
        """
        with self._lock:
            if multiplier not in SUPPORTED_SPEEDS:
                logger.warning(f"Unsupported speed {multiplier}; keeping {self._speed}.")
                return
            self._speed = multiplier
            self._emit()
            if self.is_playing and multiplier == SKIP_SPEED:
                self._cancel_timer()
                self.next()

    # ------------------------------------------------------------------
    # Timing
    # ------------------------------------------------------------------

    def dwell_delay_ms(self, point: Optional[DecisionPoint] = None) -> float:
        """Auto-advance delay for a point at the current speed."""
        if self._speed == SKIP_SPEED:
            return 0.0
        delay = self.config.base_dwell_ms / self._speed
        if point is not None and point.is_decision_point:
            delay *= self.config.decision_dwell_multiplier
        return delay

    def _arm(self) -> None:
        self._cancel_timer()
        if not self.is_playing:
            return
        delay = self.dwell_delay_ms(self._points[self._index])
        generation = self._timer_generation
        self._timer = self._scheduler.schedule(delay, lambda: self._on_timer(generation))
        logger.debug(f"Auto-advance from point {self._index} in {delay:.0f} ms.")

    def _cancel_timer(self) -> None:
        self._timer_generation += 1
        if self._timer is not None:
            self._scheduler.cancel(self._timer)
            self._timer = None

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            # a cancelled threading.Timer can still fire once
            if generation != self._timer_generation or not self.is_playing:
                return
            self._timer = None
            self.next()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _show(self, index: int) -> None:
        self._record_dwell()
        self._index = index
        self._shown_at = self._clock()
        self._emit()

    def _record_dwell(self) -> None:
        if self._shown_at is not None and 0 <= self._index < len(self._points):
            self._dwell[self._index] = self._clock() - self._shown_at
        self._shown_at = None

    def _complete(self) -> None:
        self._cancel_timer()
        self._record_dwell()
        if self._status is PlaybackStatus.COMPLETED:
            return
        self._status = PlaybackStatus.COMPLETED
        logger.info(f"Rehearsal completed after {len(self._points)} points.")
        self._emit()
