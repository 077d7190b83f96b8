"""Simulated progress indicator owned by one long-running request."""

from __future__ import annotations

import random
import threading
from typing import Optional

TICK_RANGE = (0.2, 0.7)
TICK_CAP = 92.0
COMPLETE = 100.0


class ProgressTracker:
    """Progress value for a single request lifecycle.

    ``tick`` advances by a random increment up to :data:`TICK_CAP`;
    ``complete`` snaps to 100 and ``cancel`` resets to 0. When used as a
    context manager with ``interval`` set, a background thread ticks until
    the block exits, and the tracker is cancelled if the block raises.
    """

    def __init__(
        self,
        interval: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.interval = interval
        self.rng = rng or random.Random()
        self.value = 0.0
        self.active = False
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> "ProgressTracker":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.cancel()
        elif self.active:
            self.complete()
        self._stop_ticker()

    @property
    def ticker_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            self.value = 0.0
            self.active = True
        if self.interval:
            self._stop.clear()
            self._thread = threading.Thread(target=self._run, name="progress-ticker", daemon=True)
            self._thread.start()

    def tick(self) -> float:
        with self._lock:
            if self.active and self.value < TICK_CAP:
                self.value = min(TICK_CAP, self.value + self.rng.uniform(*TICK_RANGE))
            return self.value

    def complete(self) -> None:
        self._stop_ticker()
        with self._lock:
            self.value = COMPLETE
            self.active = False

    def cancel(self) -> None:
        self._stop_ticker()
        with self._lock:
            self.value = 0.0
            self.active = False

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.tick()

    def _stop_ticker(self) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()


__all__ = ["COMPLETE", "ProgressTracker", "TICK_CAP", "TICK_RANGE"]
