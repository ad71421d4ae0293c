"""Process-wide tracker and convenience helpers.

    from utm_beacon import analytics

    await analytics.register_view("Main Menu")
    await analytics.register_event("Level 1", "gameplay", "death", label="spikes", value=3)

The tracker is built from ``TrackerConfig.from_env()`` on first use unless a
prebuilt one was installed with ``configure``.
"""

from __future__ import annotations

from typing import Optional

from .config import TrackerConfig
from .tracker import Tracker


class _Holder:
    tracker: Optional[Tracker] = None


_holder = _Holder()


def configure(tracker: Tracker) -> None:
    """Install ``tracker`` as the process-wide instance. The caller starts it."""
    _holder.tracker = tracker


async def get_tracker() -> Tracker:
    tracker = _holder.tracker
    if tracker is None:
        tracker = Tracker(TrackerConfig.from_env())
        # Installed before starting so concurrent callers share this instance.
        _holder.tracker = tracker
        await tracker.start()
    return tracker


async def register_view(page_title: str) -> None:
    tracker = await get_tracker()
    await tracker.register_view(page_title)


async def register_event(
    page_title: str, category: str, action: str, label: str = "", value: int = 0
) -> None:
    tracker = await get_tracker()
    await tracker.register_event(page_title, category, action, label, value)


async def erase_logs() -> int:
    tracker = await get_tracker()
    return await tracker.purge_logged_events()


async def shutdown() -> None:
    tracker, _holder.tracker = _holder.tracker, None
    if tracker is not None:
        await tracker.close()


__all__ = ["configure", "get_tracker", "register_view", "register_event", "erase_logs", "shutdown"]
