"""Configuration objects for the utm-beacon tracker."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_ENDPOINT = "http://www.google-analytics.com/__utm.gif"


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class TrackerConfig:
    tracking_id: str
    tracking_domain: str
    product_name: str = "Product"
    endpoint: str = DEFAULT_ENDPOINT
    offline_logging: bool = False
    max_queued_events: Optional[int] = None
    store_prefix: str = "GAnalytics"
    store_path: Optional[str] = None
    drain_throttle: float = 0.02
    tick_interval: float = 0.5
    timeout: float = 5.0
    user_agent: str = "utm-beacon/0.1.0"
    language: str = "en"
    screen_resolution: str = "-"

    @classmethod
    def from_env(cls) -> "TrackerConfig":
        max_queued = os.environ.get("UTM_BEACON_MAX_QUEUED")
        return cls(
            tracking_id=os.environ.get("UTM_BEACON_TRACKING_ID", "UA-00000000-0"),
            tracking_domain=os.environ.get("UTM_BEACON_DOMAIN", "localhost"),
            product_name=os.environ.get("UTM_BEACON_PRODUCT", "Product"),
            endpoint=os.environ.get("UTM_BEACON_ENDPOINT", DEFAULT_ENDPOINT),
            offline_logging=_env_bool("UTM_BEACON_OFFLINE_LOGGING", "false"),
            max_queued_events=int(max_queued) if max_queued else None,
            store_prefix=os.environ.get("UTM_BEACON_STORE_PREFIX", "GAnalytics"),
            store_path=os.environ.get("UTM_BEACON_STORE_PATH") or None,
            drain_throttle=float(os.environ.get("UTM_BEACON_DRAIN_THROTTLE", "0.02")),
            tick_interval=float(os.environ.get("UTM_BEACON_TICK_INTERVAL", "0.5")),
            timeout=float(os.environ.get("UTM_BEACON_TIMEOUT", "5.0")),
            language=os.environ.get("UTM_BEACON_LANGUAGE", "en"),
            screen_resolution=os.environ.get("UTM_BEACON_SCREEN", "-"),
        )


__all__ = ["TrackerConfig", "DEFAULT_ENDPOINT"]
