"""Cooperative, single-threaded scheduling of frame and delayed callbacks.

Nothing here runs on its own: the host (the Streamlit fragment, or a test)
calls ``Scheduler.run_pending()`` and whatever is due runs right there, on
the caller's thread.
"""
import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Handle:
    """A scheduled callback. Cancelling is idempotent."""

    def __init__(self, callback: Callable[[float], None], when: float = 0.0):
        self._callback: Optional[Callable[[float], None]] = callback
        self.when = when
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._callback is None

    def cancel(self) -> None:
        self._cancelled = True
        self._callback = None

    def _run(self, now: float) -> bool:
        callback, self._callback = self._callback, None
        if self._cancelled or callback is None:
            return False
        callback(now)
        return True


class Scheduler:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._timers: List[Tuple[float, int, Handle]] = []
        self._frames: List[Handle] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay: float, callback: Callable[[float], None]) -> Handle:
        """Run callback once, on the first pump at least delay seconds from now."""
        handle = Handle(callback, self.now() + max(0.0, delay))
        heapq.heappush(self._timers, (handle.when, next(self._seq), handle))
        return handle

    def request_frame(self, callback: Callable[[float], None]) -> Handle:
        """Run callback once, on the next pump."""
        handle = Handle(callback, self.now())
        self._frames.append(handle)
        return handle

    @property
    def pending(self) -> int:
        live_timers = sum(1 for _, _, h in self._timers if not h.cancelled)
        live_frames = sum(1 for h in self._frames if not h.cancelled)
        return live_timers + live_frames

    def run_pending(self, now: Optional[float] = None) -> int:
        """Run due timers, then the frames requested before this call.

        Returns the number of callbacks that ran.
        """
        now = self.now() if now is None else now
        frames, self._frames = self._frames, []
        ran = 0
        while self._timers and self._timers[0][0] <= now:
            _, _, handle = heapq.heappop(self._timers)
            if handle._run(now):
                ran += 1
        for handle in frames:
            if handle._run(now):
                ran += 1
        return ran

    def cancel_all(self) -> None:
        for _, _, handle in self._timers:
            handle.cancel()
        for handle in self._frames:
            handle.cancel()
        self._timers = []
        self._frames = []


class RepeatingTask:
    """Calls step once per frame until stopped.

    At most one frame request is outstanding at any time, so start() on a
    running task does nothing.
    """

    def __init__(self, scheduler: Scheduler, step: Callable[[float], None], name: str = "task"):
        self._scheduler = scheduler
        self._step = step
        self._handle: Optional[Handle] = None
        self._running = False
        self.name = name

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._handle = self._scheduler.request_frame(self._tick)
        logger.debug("Started %s", self.name)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._running:
            logger.debug("Stopped %s", self.name)
        self._running = False

    def _tick(self, now: float) -> None:
        self._handle = None
        self._step(now)
        # step may have stopped (or restarted) us
        if self._running and self._handle is None:
            self._handle = self._scheduler.request_frame(self._tick)
