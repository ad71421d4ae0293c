"""Persistent visitor session counters."""

from __future__ import annotations

import logging
import random
import time
import zlib
from typing import Optional

from .config import TrackerConfig
from .models import SessionState
from .store import DurableStore

logger = logging.getLogger(__name__)

MAX_COOKIE_ID = 2**31 - 1


def epoch_now() -> int:
    return int(time.time())


def site_id_for(domain: str) -> int:
    """Stable across processes, unlike the builtin ``hash`` of a str."""
    return zlib.crc32(domain.encode("utf-8")) & 0x7FFFFFFF


class SessionKeys:
    def __init__(self, prefix: str) -> None:
        self.cookie_id = prefix + "CookieID"
        self.first_run = prefix + "FirstRun"
        self.last_run = prefix + "LastRun"
        self.visits = prefix + "Visits"


def load_session(
    store: DurableStore,
    config: TrackerConfig,
    *,
    now: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> SessionState:
    """Load or initialise the visitor counters and record this session start.

    The cookie id and first-run epoch are written once. Every call stamps the
    last-run key with this session's start and bumps the visit counter.
    """
    current = epoch_now() if now is None else now
    rng = rng or random.Random()
    keys = SessionKeys(config.store_prefix)

    cookie_id = store.get_int(keys.cookie_id, -1)
    if cookie_id == -1:
        cookie_id = rng.randrange(0, MAX_COOKIE_ID)
        store.set_int(keys.cookie_id, cookie_id)
        first_run = current
        store.set_int(keys.first_run, first_run)
        logger.info("New visitor cookie assigned cookie_id=%s", cookie_id)
    else:
        first_run = store.get_int(keys.first_run, current)

    last_run = store.get_int(keys.last_run, current)
    store.set_int(keys.last_run, current)

    total_visits = store.get_int(keys.visits, 0) + 1
    store.set_int(keys.visits, total_visits)

    return SessionState(
        site_id=site_id_for(config.tracking_domain),
        cookie_id=cookie_id,
        first_run=first_run,
        last_run=last_run,
        session_start=current,
        total_visits=total_visits,
    )


__all__ = ["SessionState", "SessionKeys", "load_session", "site_id_for", "epoch_now"]
