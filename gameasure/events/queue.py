"""
Pending hits waiting for the next flush.
"""

from enum import Enum
import threading
from typing import List


class QueueState(Enum):
    EMPTY = "empty"
    PENDING = "pending"


class HitQueue:
    """
    Ordered buffer of encoded hits guarded by a single lock.

    The queue and its "flush armed" flag live under the same lock so that
    append, transition detection and drain are linearizable: exactly one
    append observes each empty to non-empty transition, and a drain takes
    everything appended before it and nothing appended after.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hits: List[str] = []
        self._armed = False

    def append(self, hit: str) -> bool:
        """
        Add a hit to the tail of the queue.

        Args:
            hit: The encoded hit.

        Returns:
            True if the queue was empty before this append, meaning the
            caller is responsible for scheduling a flush.
        """
        with self._lock:
            transition = not self._hits and not self._armed
            self._hits.append(hit)
            if transition:
                self._armed = True
            return transition

    def drain(self) -> List[str]:
        """
        Remove and return every hit currently queued.

        Clears the armed flag, so the next append starts a new window.
        """
        with self._lock:
            hits, self._hits = self._hits, []
            self._armed = False
            return hits

    @property
    def state(self) -> QueueState:
        with self._lock:
            return QueueState.PENDING if self._armed else QueueState.EMPTY

    def __len__(self) -> int:
        with self._lock:
            return len(self._hits)

    def __bool__(self) -> bool:
        return len(self) > 0
