"""
Background thread hosting the asyncio loop that runs timers and sends.
"""

import asyncio
from concurrent.futures import Future
import logging
import threading
from typing import Any, Awaitable, Callable, Optional, Set

from gameasure.errors import EngineNotRunningError


class DispatchLoop:
    """
    An asyncio event loop running in a separate daemon thread.

    Callers on any thread hand work to the loop without blocking; results
    come back as concurrent futures.
    """

    def __init__(self, name: str = "gameasure-dispatch"):
        self.name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._started = threading.Event()
        self._futures: Set[Future] = set()
        self._lock = threading.Lock()

        self.logger = logging.getLogger(__name__)

    @property
    def running(self) -> bool:
        return self._loop is not None and self._loop.is_running()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return

            self._started.clear()
            self._loop = asyncio.new_event_loop()
            self._thread = threading.Thread(
                target=self._run_event_loop, name=self.name, daemon=True
            )
            self._thread.start()

        self._started.wait()
        self.logger.debug("Dispatch loop %s started", self.name)

    def _run_event_loop(self) -> None:
        loop = self._loop
        assert loop is not None
        asyncio.set_event_loop(loop)
        loop.call_soon(self._started.set)

        try:
            loop.run_forever()
        finally:
            loop.close()
            self.logger.debug("Dispatch loop %s closed", self.name)

    def _require_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None or self._loop.is_closed():
            raise EngineNotRunningError()
        return self._loop

    def submit(self, coro: Awaitable[Any]) -> Future:
        """
        Schedule a coroutine on the loop.

        Returns:
            Future that will hold the coroutine's result.
        """
        loop = self._require_loop()
        try:
            future = asyncio.run_coroutine_threadsafe(coro, loop)  # type: ignore[arg-type]
        except RuntimeError as e:
            # the loop closed after the check above
            if asyncio.iscoroutine(coro):
                coro.close()
            raise EngineNotRunningError() from e
        with self._lock:
            self._futures.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._futures.discard(future)

    def call_soon(self, callback: Callable[[], Any]) -> None:
        loop = self._require_loop()
        try:
            loop.call_soon_threadsafe(callback)
        except RuntimeError as e:
            raise EngineNotRunningError() from e

    def stop(
        self,
        before_stop: Optional[Callable[[], Awaitable[Any]]] = None,
        after_stop: Optional[Callable[[], Awaitable[Any]]] = None,
        timeout: float = 5.0,
    ) -> bool:
        """
        Stop the loop.

        ``before_stop`` runs first, then every coroutine still in flight
        (including the ones ``before_stop`` submitted) is awaited, then
        ``after_stop`` runs and the loop is closed.

        Returns:
            True if the thread finished within ``timeout``.
        """
        with self._lock:
            loop, thread = self._loop, self._thread
            if loop is None or thread is None or not thread.is_alive():
                return True

        async def shutdown() -> None:
            if before_stop is not None:
                await before_stop()

            with self._lock:
                pending = [f for f in self._futures if not f.done()]
            if pending:
                self.logger.info("Waiting for %s pending sends", len(pending))
                await asyncio.gather(
                    *(asyncio.wrap_future(f) for f in pending),
                    return_exceptions=True,
                )

            if after_stop is not None:
                await after_stop()

        future = asyncio.run_coroutine_threadsafe(shutdown(), loop)
        try:
            future.result(timeout)
        except Exception:
            self.logger.exception("Error while shutting down dispatch loop")
        finally:
            loop.call_soon_threadsafe(loop.stop)

        thread.join(timeout)
        with self._lock:
            self._thread = None
        return not thread.is_alive()
