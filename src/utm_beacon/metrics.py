"""Prometheus instruments for the tracker."""

from __future__ import annotations

from prometheus_client import Counter, Gauge

EVENTS_SENT = Counter("utm_beacon_events_sent_total", "Tracking requests delivered", ["path"])
EVENTS_FAILED = Counter("utm_beacon_events_failed_total", "Tracking requests that failed", ["path"])
EVENTS_QUEUED = Counter("utm_beacon_events_queued_total", "Failed requests written to the offline queue")
EVENTS_DROPPED = Counter("utm_beacon_events_dropped_total", "Failed requests dropped because the queue was full")
DRAIN_PASSES = Counter("utm_beacon_drain_passes_total", "Offline queue drain passes", ["outcome"])
QUEUE_DEPTH = Gauge("utm_beacon_queue_depth", "Entries currently held in the offline queue")

__all__ = [
    "EVENTS_SENT",
    "EVENTS_FAILED",
    "EVENTS_QUEUED",
    "EVENTS_DROPPED",
    "DRAIN_PASSES",
    "QUEUE_DEPTH",
]
