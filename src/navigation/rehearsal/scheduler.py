# scheduler.py
# Cancellable single-shot delayed callbacks for the playback sequencer.
#
# Both schedulers share one interface:
#   token = scheduler.schedule(delay_ms, callback)
#   scheduler.cancel(token)
#   scheduler.now()  → seconds, used as the sequencer's dwell clock

import heapq
import itertools
import threading
import time
from typing import Callable, List, Optional, Tuple


class TimerScheduler:
    """Real wall-clock scheduling on threading.Timer."""

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(0.0, delay_ms) / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return timer

    def cancel(self, token: Optional[threading.Timer]) -> None:
        if token is not None:
            token.cancel()

    def now(self) -> float:
        return time.monotonic()


class VirtualScheduler:
    """
    Deterministic virtual clock.

    Nothing runs until advance() or run_until_idle() is called; callbacks
    fire in due-time order (ties in scheduling order) and may schedule more.

    Usage:
        clock = VirtualScheduler()
        sequencer = PlaybackSequencer(config, scheduler=clock)
        sequencer.play()
        clock.advance(5000)
    """

    def __init__(self) -> None:
        self.now_ms: float = 0.0
        self._counter = itertools.count()
        self._queue: List[Tuple[float, int, Callable[[], None]]] = []
        self._cancelled: set = set()

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> int:
        token = next(self._counter)
        heapq.heappush(self._queue, (self.now_ms + max(0.0, delay_ms), token, callback))
        return token

    def cancel(self, token: Optional[int]) -> None:
        if token is not None:
            self._cancelled.add(token)

    def now(self) -> float:
        return self.now_ms / 1000.0

    @property
    def pending(self) -> int:
        return sum(1 for _, token, _ in self._queue if token not in self._cancelled)

    def next_due(self) -> Optional[float]:
        """Absolute virtual time (ms) of the next live callback, if any."""
        for due, token, _ in sorted(self._queue):
            if token not in self._cancelled:
                return due
        return None

    def _pop_due(self, until_ms: float):
        while self._queue and self._queue[0][0] <= until_ms:
            due, token, callback = heapq.heappop(self._queue)
            if token in self._cancelled:
                self._cancelled.discard(token)
                continue
            return due, callback
        return None

    def advance(self, ms: float) -> int:
        """
        Move the clock forward by ms, firing everything that falls due.

        Returns:
            Number of callbacks fired.
        """
        target = self.now_ms + ms
        fired = 0
        while True:
            item = self._pop_due(target)
            if item is None:
                break
            due, callback = item
            self.now_ms = max(self.now_ms, due)
            callback()
            fired += 1
        self.now_ms = target
        return fired

    def run_until_idle(self, max_callbacks: int = 10_000) -> int:
        """Jump from one due callback to the next until nothing is pending."""
        fired = 0
        while fired < max_callbacks:
            due = self.next_due()
            if due is None:
                break
            fired += self.advance(due - self.now_ms)
        return fired
