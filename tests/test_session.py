from __future__ import annotations

import random

from conftest import make_config

from utm_beacon.session import load_session, site_id_for
from utm_beacon.store import MemoryStore


def test_first_run_assigns_cookie_and_counts_visit(store: MemoryStore) -> None:
    session = load_session(store, make_config(), now=1000, rng=random.Random(3))

    assert 0 <= session.cookie_id < 2**31 - 1
    assert session.first_run == session.last_run == session.session_start == 1000
    assert session.total_visits == 1
    assert session.last_page is None
    assert store.get_int("GAnalyticsCookieID") == session.cookie_id


def test_later_run_keeps_cookie_and_advances_counters(store: MemoryStore) -> None:
    config = make_config()
    first = load_session(store, config, now=1000)

    second = load_session(store, config, now=5000)

    assert second.cookie_id == first.cookie_id
    assert second.first_run == 1000
    assert second.last_run == 1000
    assert second.session_start == 5000
    assert second.total_visits == 2
    assert store.get_int("GAnalyticsLastRun") == 5000


def test_site_id_is_stable() -> None:
    assert site_id_for("example.test") == site_id_for("example.test")
    assert 0 <= site_id_for("example.test") < 2**31
    assert site_id_for("example.test") != site_id_for("other.test")
