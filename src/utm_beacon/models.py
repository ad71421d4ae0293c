"""Pydantic models shared across tracker components."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class QueuedEvent(BaseModel):
    index: int = Field(..., ge=0)
    url: str


class TransportResult(BaseModel):
    succeeded: bool
    final_url: str
    error: Optional[str] = None
    status_code: Optional[int] = None
    retryable: bool = True


class SessionState(BaseModel):
    site_id: int
    cookie_id: int = Field(..., ge=0)
    first_run: int
    last_run: int
    session_start: int
    total_visits: int = Field(..., ge=1)
    last_page: Optional[str] = None


__all__ = ["QueuedEvent", "TransportResult", "SessionState"]
