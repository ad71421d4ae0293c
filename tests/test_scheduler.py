from __future__ import annotations

import asyncio

import pytest

from utm_beacon.scheduler import TickScheduler


async def test_scheduler_ticks_until_stopped() -> None:
    ticks = []
    scheduler = TickScheduler(lambda: ticks.append(1), interval=0.01)

    scheduler.start()
    scheduler.start()
    await asyncio.sleep(0.05)
    await scheduler.stop()
    seen = len(ticks)
    await asyncio.sleep(0.03)

    assert seen >= 2
    assert len(ticks) == seen
    assert not scheduler.running


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        TickScheduler(lambda: None, interval=0)
