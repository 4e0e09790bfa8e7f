"""
One-shot debounce timer that turns a burst of hits into one flush.
"""

import asyncio
import logging
from typing import Callable, Optional, Set

from gameasure.constants import FLUSH_DELAY

from .loop import DispatchLoop


class FlushScheduler:
    """
    Arms a delayed flush on the dispatch loop.

    The queue decides when arming is needed (its empty to non-empty
    transition); the scheduler only owns the timers. Each armed timer fires
    its flush exactly once and is forgotten afterwards.
    """

    def __init__(
        self,
        loop: DispatchLoop,
        on_fire: Callable[[], None],
        delay: float = FLUSH_DELAY,
    ):
        self.loop = loop
        self.on_fire = on_fire
        self.delay = delay
        self._timers: Set[asyncio.TimerHandle] = set()

        self.logger = logging.getLogger(__name__)

    def arm(self) -> None:
        """
        Schedule a flush ``delay`` seconds from now. Safe from any thread.
        """
        self.logger.debug("Arming flush in %.3fs", self.delay)
        self.loop.call_soon(self._arm_on_loop)

    def _arm_on_loop(self) -> None:
        timer: Optional[asyncio.TimerHandle] = None

        def fire() -> None:
            self._timers.discard(timer)  # type: ignore[arg-type]
            self._fire()

        timer = asyncio.get_running_loop().call_later(self.delay, fire)
        self._timers.add(timer)

    def _fire(self) -> None:
        self.logger.debug("Flush timer fired")
        try:
            self.on_fire()
        except Exception:
            self.logger.exception("Flush callback failed")

    @property
    def pending(self) -> int:
        return len(self._timers)

    def fire_pending(self) -> int:
        """
        Fire every armed timer right away. Must run on the dispatch loop.

        Returns:
            The number of timers fired.
        """
        timers, self._timers = self._timers, set()
        for timer in timers:
            timer.cancel()
            self._fire()
        return len(timers)
