"""
Engine that encodes, batches and ships analytics hits.
"""

from concurrent.futures import Future
from dataclasses import dataclass
import logging
import threading
from typing import Any, Callable, Dict, Optional

from gameasure.config import EngineConfig
from gameasure.encoding import encode_hit
from gameasure.errors import EngineNotRunningError, HitEncodingError
from gameasure.events import (
    DispatchLoop,
    DispatchResult,
    Dispatcher,
    FlushScheduler,
    HitQueue,
    QueueState,
    Transport,
)
from gameasure.models import Collect, Custom, QueryRepresentable

LOG = logging.getLogger(__name__)

LogSink = Callable[[str], None]


@dataclass
class EngineMetrics:
    hits_tracked: int = 0
    hits_dropped: int = 0
    flushes: int = 0
    hits_sent: int = 0
    failures: int = 0


class GAMeasurement:
    """
    Batches hits and posts them to the collection endpoint.

    ``track`` never blocks on the network and never raises for delivery
    problems: the first hit entering an empty queue arms a flush after the
    debounce window, every hit tracked before the flush fires rides along
    in the same batch, and the outcome is reported to ``log``.

    Args:
        defaults: Default context added to every hit.
        log: Optional sink receiving human readable outcome messages.
        config: Engine settings, defaults when omitted.
        transport: HTTP transport, built from ``config`` when omitted.
    """

    def __init__(
        self,
        defaults: Collect,
        log: Optional[LogSink] = None,
        config: Optional[EngineConfig] = None,
        transport: Optional[Transport] = None,
    ):
        self.defaults = defaults
        self.log = log
        self.config = config or EngineConfig()

        self.transport = transport or Transport(
            timeout=self.config.timeout, proxy=self.config.proxy
        )
        self.queue = HitQueue()
        self.loop = DispatchLoop()
        self.dispatcher = Dispatcher(
            self.queue,
            self.transport,
            endpoint=self.config.endpoint,
            single_endpoint=self.config.single_endpoint,
        )
        self.scheduler = FlushScheduler(
            self.loop, on_fire=self._flush, delay=self.config.flush_delay
        )

        self.metrics = EngineMetrics()
        self._metrics_lock = threading.Lock()
        self._start_lock = threading.Lock()

    @classmethod
    def setup(cls, defaults: Collect, **kwargs) -> "GAMeasurement":
        """
        Build and start an engine in one call.
        """
        engine = cls(defaults, **kwargs)
        engine.start()
        return engine

    def start(self) -> None:
        with self._start_lock:
            if self.loop.running:
                return

            self.loop.start()
            # hits queued while the loop was down still need their flush
            if self.queue.state is QueueState.PENDING:
                self.scheduler.arm()

    def stop(self, timeout: float = 5.0) -> bool:
        """
        Flush whatever is queued, wait for in-flight sends and close the
        HTTP client.

        Returns:
            True if everything finished within ``timeout``.
        """

        async def drain() -> None:
            fired = self.scheduler.fire_pending()
            if fired:
                LOG.debug("Fired %s pending flushes on shutdown", fired)

        return self.loop.stop(
            before_stop=drain, after_stop=self.transport.aclose, timeout=timeout
        )

    def __enter__(self) -> "GAMeasurement":
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    def _count(self, **increments: int) -> None:
        with self._metrics_lock:
            for name, value in increments.items():
                setattr(self.metrics, name, getattr(self.metrics, name) + value)

    def _encode(
        self, request: QueryRepresentable, custom: Optional[Custom]
    ) -> Optional[str]:
        try:
            return encode_hit(self.defaults, request, custom)
        except HitEncodingError as e:
            LOG.debug("Dropping hit that could not be encoded: %s", e)
            self._count(hits_dropped=1)
            return None

    def track(
        self, request: QueryRepresentable, custom: Optional[Custom] = None
    ) -> None:
        """
        Queue a hit for the next batch.

        Args:
            request: The event, exception or screen view to record.
            custom: Optional custom dimension and metric for this hit.
        """
        hit = self._encode(request, custom)
        if hit is None:
            return

        if not self.loop.running:
            self.start()

        self._count(hits_tracked=1)
        if self.queue.append(hit):
            try:
                self.scheduler.arm()
            except EngineNotRunningError:
                LOG.warning("Dispatch loop stopped, hit will be sent on next start")

    def send(
        self, request: QueryRepresentable, custom: Optional[Custom] = None
    ) -> Optional[Future]:
        """
        Post a single hit right away, outside of any batch.

        Returns:
            Future resolving to the DispatchResult, or None if the hit
            could not be encoded.
        """
        hit = self._encode(request, custom)
        if hit is None:
            return None

        if not self.loop.running:
            self.start()

        self._count(hits_tracked=1)
        future = self.loop.submit(self.dispatcher.send_single(hit))
        future.add_done_callback(self._report)
        return future

    def _flush(self) -> None:
        future = self.loop.submit(self.dispatcher.flush())
        future.add_done_callback(self._report)

    def _report(self, future: Future) -> None:
        try:
            result: DispatchResult = future.result()
        except Exception:
            LOG.exception("Dispatch failed unexpectedly")
            return

        if result.count == 0:
            return

        if result.ok:
            self._count(flushes=1, hits_sent=result.count)
            LOG.debug("Delivered %s hits", result.count)
        else:
            self._count(flushes=1, failures=1)
            LOG.debug("Dropped %s hits: %s", result.count, result.error)

        if self.log is not None and result.message is not None:
            try:
                self.log(result.message)
            except Exception:
                LOG.exception("Log sink raised")

    def get_metrics(self) -> Dict[str, Any]:
        with self._metrics_lock:
            return {
                "hits_tracked": self.metrics.hits_tracked,
                "hits_dropped": self.metrics.hits_dropped,
                "flushes": self.metrics.flushes,
                "hits_sent": self.metrics.hits_sent,
                "failures": self.metrics.failures,
                "current_queue_size": len(self.queue),
            }
