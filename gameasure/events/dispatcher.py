"""
Drains the queue and ships its hits as one batch.
"""

from dataclasses import dataclass
import logging
from typing import List, Optional

from gameasure.constants import HIT_SEPARATOR
from gameasure.errors import (
    GAMeasurementError,
    ServerRejectionError,
    TransportError,
)

from .queue import HitQueue
from .transport import Transport

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
STATUS_NO_HITS = "no_hits"


@dataclass(frozen=True)
class DispatchResult:
    """
    Outcome of one flush or single-hit send.
    """

    status: str
    count: int
    payload: str = ""
    http_status: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS

    @property
    def message(self) -> Optional[str]:
        """
        Human readable outcome handed to the log sink, None when nothing
        was sent.
        """
        if self.status == STATUS_SUCCESS:
            return f"Sent data:\n{self.payload}"
        if self.status == STATUS_ERROR:
            return f"Error: {self.error}"
        return None


def build_batch(hits: List[str]) -> str:
    """
    Join hits one per line, with a trailing newline after the last one.
    """
    return HIT_SEPARATOR.join(hits) + HIT_SEPARATOR


class Dispatcher:
    """
    Sends batches with at most one attempt each.

    Failures are turned into results, never raised, and the hits of a
    failed batch are discarded.
    """

    def __init__(
        self,
        queue: HitQueue,
        transport: Transport,
        endpoint: str,
        single_endpoint: Optional[str] = None,
    ):
        self.queue = queue
        self.transport = transport
        self.endpoint = endpoint
        self.single_endpoint = single_endpoint or endpoint

        self.logger = logging.getLogger(__name__)

    async def flush(self) -> DispatchResult:
        """
        Send everything currently queued as one batch.
        """
        # A previous flush may already have taken everything
        hits = self.queue.drain()
        if not hits:
            self.logger.debug("Flush found an empty queue")
            return DispatchResult(status=STATUS_NO_HITS, count=0)

        self.logger.info("[Flush] -> Sending %s hits to %s", len(hits), self.endpoint)
        return await self._post(self.endpoint, build_batch(hits), len(hits))

    async def send_single(self, hit: str) -> DispatchResult:
        """
        Send one hit right away as a batch of size one, bypassing the queue.
        """
        return await self._post(self.single_endpoint, build_batch([hit]), 1)

    async def _post(self, url: str, body: str, count: int) -> DispatchResult:
        try:
            response = await self.transport.post(url, body.encode("utf-8"))
        except ServerRejectionError as e:
            self.logger.warning("Endpoint rejected %s hits: %s", count, e.status_code)
            return DispatchResult(
                status=STATUS_ERROR,
                count=count,
                payload=body,
                http_status=e.status_code,
                error=str(e.status_code),
            )
        except TransportError as e:
            self.logger.warning("Failed to send %s hits: %s", count, e)
            return DispatchResult(
                status=STATUS_ERROR, count=count, payload=body, error=e.message
            )
        except GAMeasurementError as e:
            self.logger.error("Failed to send %s hits: %s", count, e)
            return DispatchResult(
                status=STATUS_ERROR, count=count, payload=body, error=e.message
            )
        except Exception as e:
            self.logger.exception("Unexpected error sending %s hits: %s", count, e)
            return DispatchResult(
                status=STATUS_ERROR, count=count, payload=body, error=repr(e)
            )

        self.logger.info(
            "Successfully sent %s hits, status: %s", count, response.status_code
        )
        return DispatchResult(
            status=STATUS_SUCCESS,
            count=count,
            payload=body,
            http_status=response.status_code,
        )
