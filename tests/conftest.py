from __future__ import annotations

import asyncio
from typing import Dict, List, Set

import httpx
import pytest

from utm_beacon.config import TrackerConfig
from utm_beacon.store import MemoryStore
from utm_beacon.transport import RequestTransport

ENDPOINT = "http://collector.test/__utm.gif"


def make_config(**overrides) -> TrackerConfig:
    defaults = dict(
        tracking_id="UA-1-1",
        tracking_domain="example.test",
        product_name="Demo",
        endpoint=ENDPOINT,
        offline_logging=True,
        drain_throttle=0.0,
        tick_interval=0.01,
        timeout=1.0,
    )
    defaults.update(overrides)
    return TrackerConfig(**defaults)


class FakeCollector:
    """MockTransport handler that records every URL and fails on demand."""

    def __init__(self) -> None:
        self.requests: List[str] = []
        self.failing: Set[str] = set()
        self.gates: Dict[str, asyncio.Event] = {}
        self.offline = False

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        gate = self.gates.get(url)
        if gate is not None:
            await gate.wait()
        if self.offline:
            raise httpx.ConnectError("network unreachable", request=request)
        if url in self.failing:
            return httpx.Response(503, text="Service Unavailable")
        return httpx.Response(200, content=b"GIF89a")


@pytest.fixture()
def collector() -> FakeCollector:
    return FakeCollector()


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
async def transport(collector: FakeCollector):
    client = httpx.AsyncClient(transport=httpx.MockTransport(collector))
    transport = RequestTransport(make_config(), client=client)
    yield transport
    await transport.close()


async def wait_for_requests(collector: FakeCollector, count: int) -> None:
    for _ in range(200):
        if len(collector.requests) >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"expected {count} requests, saw {len(collector.requests)}")
