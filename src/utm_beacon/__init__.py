"""utm-beacon: analytics event emitter with a durable offline retry queue."""

from .config import TrackerConfig
from .drain import DrainController, DrainStatus
from .errors import BeaconError, QueueFull, StoreError
from .queue import OfflineQueue
from .store import DurableStore, JsonFileStore, MemoryStore
from .tracker import Tracker
from .transport import RequestTransport

__all__ = [
    "TrackerConfig",
    "Tracker",
    "OfflineQueue",
    "DrainController",
    "DrainStatus",
    "RequestTransport",
    "DurableStore",
    "MemoryStore",
    "JsonFileStore",
    "BeaconError",
    "QueueFull",
    "StoreError",
]
