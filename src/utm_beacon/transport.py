"""Async HTTP transport for tracking requests."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .config import TrackerConfig
from .models import TransportResult

logger = logging.getLogger(__name__)


class RequestTransport:
    """Issues one GET per tracking URL and reports the outcome instead of raising."""

    def __init__(self, config: TrackerConfig, *, client: Optional[httpx.AsyncClient] = None) -> None:
        self._config = config
        self._client = client or httpx.AsyncClient(
            timeout=config.timeout,
            follow_redirects=True,
            headers={"User-Agent": config.user_agent},
        )

    async def send(self, url: str) -> TransportResult:
        try:
            response = await self._client.get(url)
        except httpx.InvalidURL as exc:
            # Resending the same URL can never succeed.
            return TransportResult(succeeded=False, final_url=url, error=f"invalid URL: {exc}", retryable=False)
        except httpx.HTTPError as exc:
            logger.debug("Tracking request errored url=%s error=%r", url, exc)
            return TransportResult(succeeded=False, final_url=url, error=str(exc) or type(exc).__name__)

        final_url = str(response.url)
        if response.is_error:
            return TransportResult(
                succeeded=False,
                final_url=final_url,
                error=f"HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return TransportResult(succeeded=True, final_url=final_url, status_code=response.status_code)

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["RequestTransport"]
