from __future__ import annotations

import logging
import math
import threading
import time
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60.0


class Scheduler:
    """Run ``tick`` now and then once per interval, never two ticks at a time."""

    def __init__(
        self,
        tick: Callable[[], Any],
        interval: float = DEFAULT_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.tick = tick
        self.interval = interval
        self._sleep = sleep
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def trigger(self) -> bool:
        """Run one tick unless another is still in progress. Returns whether it ran."""
        if not self._lock.acquire(blocking=False):
            logger.warning("Previous tick still running; skipping this one")
            return False
        try:
            self.tick()
        except Exception:
            logger.exception("Tick failed")
        finally:
            self._lock.release()
        return True

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Loop forever (or for ``max_ticks`` ticks). Slots missed by a slow tick are dropped."""
        start = self._clock()
        slot = 0
        ticks = 0
        while True:
            self.trigger()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                return ticks

            now = self._clock()
            next_slot = max(slot + 1, math.ceil((now - start) / self.interval))
            if next_slot > slot + 1:
                logger.warning("Tick overran the interval; skipped %d slot(s)", next_slot - slot - 1)
            slot = next_slot
            self._sleep(max(0.0, start + slot * self.interval - now))
