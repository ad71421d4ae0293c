"""Visitor session manager: turns views and events into tracking requests."""

from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from . import metrics
from .config import TrackerConfig
from .drain import DrainController
from .encoder import advance_page, encode_event, encode_view
from .errors import BeaconError, QueueFull
from .models import SessionState
from .queue import OfflineQueue
from .scheduler import TickScheduler
from .session import MAX_COOKIE_ID, epoch_now, load_session
from .store import DurableStore, open_store
from .transport import RequestTransport

logger = logging.getLogger(__name__)


class Tracker:
    """Owns all mutable tracking state for one process.

    Direct sends never raise on network failure. When ``offline_logging`` is
    enabled a failed URL is written to the offline queue and replayed by the
    drain controller on a later tick.
    """

    def __init__(
        self,
        config: TrackerConfig,
        *,
        store: Optional[DurableStore] = None,
        transport: Optional[RequestTransport] = None,
        clock: Callable[[], int] = epoch_now,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._config = config
        self._store = store if store is not None else open_store(config.store_path)
        self._transport = transport or RequestTransport(config)
        self._clock = clock
        self._rng = rng or random.Random()
        self._session = load_session(self._store, config, now=clock(), rng=self._rng)
        self._queue = OfflineQueue(self._store, config.store_prefix, max_entries=config.max_queued_events)
        self._drain = DrainController(
            self._queue,
            self._transport,
            throttle=config.drain_throttle,
            enabled=config.offline_logging,
        )
        self._scheduler = TickScheduler(self.tick, config.tick_interval)
        logger.info(
            "Tracker initialised visits=%d pending_offline=%d",
            self._session.total_visits,
            self._queue.count,
        )

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def queue(self) -> OfflineQueue:
        return self._queue

    @property
    def drain(self) -> DrainController:
        return self._drain

    async def __aenter__(self) -> "Tracker":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self, *, run_scheduler: bool = True, initial_view: bool = True) -> None:
        """Begin the tracking session, optionally with the built-in tick loop."""
        if initial_view:
            await self.register_view("")
        if run_scheduler:
            self._scheduler.start()

    def tick(self) -> None:
        self._drain.tick()

    async def register_view(self, page_title: str) -> None:
        hit = advance_page(self._session, self._config, page_title)
        url = encode_view(self._config, self._session, hit, nonce=self._nonce(), now=self._clock())
        await self._submit(url)

    async def register_event(
        self,
        page_title: str,
        category: str,
        action: str,
        label: str = "",
        value: int = 0,
    ) -> None:
        hit = advance_page(self._session, self._config, page_title)
        url = encode_event(
            self._config,
            self._session,
            hit,
            category,
            action,
            label,
            value,
            nonce=self._nonce(),
            now=self._clock(),
        )
        await self._submit(url)

    async def purge_logged_events(self) -> int:
        return await self._queue.purge_all()

    async def close(self) -> None:
        await self._scheduler.stop()
        await self._drain.wait_idle()
        await self._transport.close()

    def _nonce(self) -> int:
        return self._rng.randrange(0, MAX_COOKIE_ID)

    async def _submit(self, url: str) -> None:
        result = await self._transport.send(url)
        if result.succeeded:
            self._drain.record_transmit(True)
            metrics.EVENTS_SENT.labels(path="direct").inc()
            return

        metrics.EVENTS_FAILED.labels(path="direct").inc()
        if not result.retryable:
            metrics.EVENTS_DROPPED.inc()
            logger.error("Tracking request rejected, dropping event error=%s", result.error)
            return

        self._drain.record_transmit(False)
        logger.error("Tracking request failed error=%s url=[%s]", result.error, result.final_url)
        if self._config.offline_logging:
            self._log_offline(url)

    def _log_offline(self, url: str) -> None:
        try:
            self._queue.append(url)
        except QueueFull as exc:
            metrics.EVENTS_DROPPED.inc()
            logger.warning("Offline event log full (%d entries); dropping event", exc.count)
            return
        except (OSError, BeaconError) as exc:
            metrics.EVENTS_DROPPED.inc()
            logger.error("Could not write offline event, dropping it: %s", exc)
            return
        metrics.EVENTS_QUEUED.inc()


__all__ = ["Tracker"]
