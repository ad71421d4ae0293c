"""Exception types raised by utm-beacon components."""

from __future__ import annotations


class BeaconError(Exception):
    """Base class for library errors."""


class QueueFull(BeaconError):
    """Raised when the offline queue has reached its configured capacity."""

    def __init__(self, count: int) -> None:
        super().__init__(f"offline event queue full ({count} entries)")
        self.count = count


class StoreError(BeaconError):
    """Raised when the durable store cannot be loaded."""


__all__ = ["BeaconError", "QueueFull", "StoreError"]
