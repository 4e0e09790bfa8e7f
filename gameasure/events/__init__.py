from .dispatcher import DispatchResult, Dispatcher, build_batch
from .loop import DispatchLoop
from .queue import HitQueue, QueueState
from .scheduler import FlushScheduler
from .transport import Transport

__all__ = [
    "DispatchResult",
    "Dispatcher",
    "build_batch",
    "DispatchLoop",
    "HitQueue",
    "QueueState",
    "FlushScheduler",
    "Transport",
]
