"""Single-flight replay of the offline queue."""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Optional

from . import metrics
from .queue import OfflineQueue
from .transport import RequestTransport

logger = logging.getLogger(__name__)


class DrainStatus(str, enum.Enum):
    IDLE = "idle"
    DRAINING = "draining"
    ABORTED = "aborted"


class DrainController:
    """Replays queued URLs newest first, one at a time, stopping at the first failure.

    ``tick()`` is called by the host scheduler. A pass starts only when no pass
    is running, the queue holds entries and the most recent transmission
    succeeded. Because entries are consumed from the tail, an aborted pass
    leaves the oldest entries in place and the next pass resumes from the
    newest survivor without a stored cursor.
    """

    def __init__(
        self,
        queue: OfflineQueue,
        transport: RequestTransport,
        *,
        throttle: float = 0.0,
        enabled: bool = True,
    ) -> None:
        self._queue = queue
        self._transport = transport
        self._throttle = max(0.0, throttle)
        self._enabled = enabled
        self._status = DrainStatus.IDLE
        self._draining = False
        self._last_transmit_succeeded = False
        self._task: Optional[asyncio.Task] = None
        self.last_outcome: Optional[str] = None

    @property
    def status(self) -> DrainStatus:
        return self._status

    @property
    def is_draining(self) -> bool:
        return self._draining

    @property
    def last_transmit_succeeded(self) -> bool:
        return self._last_transmit_succeeded

    def record_transmit(self, succeeded: bool) -> None:
        self._last_transmit_succeeded = succeeded

    def should_drain(self) -> bool:
        return (
            self._enabled
            and not self._draining
            and self._queue.has_pending
            and self._last_transmit_succeeded
        )

    def tick(self) -> Optional["asyncio.Task[int]"]:
        if not self.should_drain():
            return None
        # Claimed before the task exists so a tick during this pass's first
        # suspension cannot start a second one.
        self._draining = True
        self._status = DrainStatus.DRAINING
        self._task = asyncio.get_running_loop().create_task(self._run_pass())
        self._task.add_done_callback(self._report_failure)
        return self._task

    async def wait_idle(self) -> None:
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait({task})

    async def _run_pass(self) -> int:
        delivered = 0
        outcome = "completed"
        start_count = self._queue.count
        logger.info("Replaying offline events count=%d", start_count)
        try:
            index = start_count - 1
            while index >= 0:
                url = self._queue.peek(index)
                if url is None:
                    # Treated as already delivered by an interrupted earlier pass.
                    logger.debug("Skipping missing offline event index=%d", index)
                    self._queue.remove(index)
                    index -= 1
                    continue

                result = await self._transport.send(url)
                if not result.retryable:
                    metrics.EVENTS_DROPPED.inc()
                    logger.warning("Dropping unsendable offline event index=%d error=%s", index, result.error)
                    self._queue.remove(index)
                    index -= 1
                    continue

                self._last_transmit_succeeded = result.succeeded
                if not result.succeeded:
                    self._status = DrainStatus.ABORTED
                    outcome = "aborted"
                    metrics.EVENTS_FAILED.labels(path="drain").inc()
                    logger.warning(
                        "Offline event replay aborted error=%s url=[%s]", result.error, result.final_url
                    )
                    break

                self._queue.remove(index)
                delivered += 1
                metrics.EVENTS_SENT.labels(path="drain").inc()
                index -= 1
                if index >= 0:
                    await asyncio.sleep(self._throttle)
        except asyncio.CancelledError:
            outcome = "cancelled"
            raise
        except Exception:
            outcome = "failed"
            self._last_transmit_succeeded = False
            raise
        finally:
            self._draining = False
            self._status = DrainStatus.IDLE
            self.last_outcome = outcome
            metrics.DRAIN_PASSES.labels(outcome=outcome).inc()
            remaining = self._queue.sync() if outcome != "failed" else self._queue.count
            logger.info(
                "Offline replay finished outcome=%s delivered=%d remaining=%d", outcome, delivered, remaining
            )
        return delivered

    @staticmethod
    def _report_failure(task: "asyncio.Task[int]") -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Offline replay failed", exc_info=exc)


__all__ = ["DrainController", "DrainStatus"]
