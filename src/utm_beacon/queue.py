"""Durable, index-addressed queue of tracking URLs awaiting retry."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from . import metrics
from .errors import QueueFull
from .models import QueuedEvent
from .store import DurableStore

logger = logging.getLogger(__name__)


class OfflineQueue:
    """Stores failed tracking URLs as ``<prefix>Log<i>`` keys plus a ``<prefix>LogCount`` length.

    Entries are never shifted. Removing the highest live index shrinks the
    persisted count immediately, so a process killed mid-drain restarts with a
    count that matches the surviving entries.
    """

    def __init__(self, store: DurableStore, prefix: str, *, max_entries: Optional[int] = None) -> None:
        if max_entries is not None and max_entries < 0:
            raise ValueError("max_entries must be non-negative")
        self._store = store
        self._count_key = prefix + "LogCount"
        self._entry_prefix = prefix + "Log"
        self._max_entries = max_entries
        self._has_pending = self.count != 0
        metrics.QUEUE_DEPTH.set(self.count)

    def _key(self, index: int) -> str:
        return f"{self._entry_prefix}{index}"

    @property
    def count(self) -> int:
        return self._store.get_int(self._count_key, 0)

    @property
    def capacity(self) -> Optional[int]:
        return self._max_entries

    @property
    def has_pending(self) -> bool:
        return self._has_pending

    def append(self, url: str) -> int:
        """Persist ``url`` at the next free index and return that index."""
        index = self.count
        if self._max_entries is not None and index >= self._max_entries:
            raise QueueFull(index)
        self._store.set_string(self._key(index), url)
        self._store.set_int(self._count_key, index + 1)
        self._has_pending = True
        metrics.QUEUE_DEPTH.set(index + 1)
        logger.debug("Queued event index=%d", index)
        return index

    def peek(self, index: int) -> Optional[str]:
        """Return the URL stored at ``index``, or None when the key is absent."""
        url = self._store.get_string(self._key(index))
        return url or None

    def remove(self, index: int) -> None:
        self._store.delete_key(self._key(index))
        self.sync()

    def sync(self) -> int:
        """Trim absent entries off the top of the index space and persist the count."""
        stored = self.count
        count = stored
        while count > 0 and not self._store.has_key(self._key(count - 1)):
            count -= 1
        if count != stored:
            self._store.set_int(self._count_key, count)
        self._has_pending = count != 0
        metrics.QUEUE_DEPTH.set(count)
        return count

    async def purge_all(self) -> int:
        """Delete every entry, yielding to the loop between deletions.

        The count is re-read on each step so entries appended while the purge
        is suspended are removed as well.
        """
        removed = 0
        index = 0
        while index < self.count:
            self._store.delete_key(self._key(index))
            removed += 1
            index += 1
            await asyncio.sleep(0)
        self._store.set_int(self._count_key, 0)
        self._has_pending = False
        metrics.QUEUE_DEPTH.set(0)
        logger.info("Purged offline event queue removed=%d", removed)
        return removed

    def entries(self) -> List[QueuedEvent]:
        events = []
        for index in range(self.count):
            url = self.peek(index)
            if url is not None:
                events.append(QueuedEvent(index=index, url=url))
        return events


__all__ = ["OfflineQueue"]
