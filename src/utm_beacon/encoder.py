"""Builds ``__utm.gif`` request URLs from session state.

The encoders do no I/O: callers supply the nonce and timestamp so the same
inputs always produce the same URL. ``advance_page`` is the one function that
changes its argument, recording the new page on the session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import quote, quote_plus

from .config import TrackerConfig
from .models import SessionState

TRACKER_VERSION = "4.6.5"


@dataclass(frozen=True)
class PageHit:
    title: str
    path: str
    referrer: Optional[str] = None


def escape_title(page_title: str) -> str:
    # Spaces must become %20; a "+" in the title is rejected by the endpoint.
    return quote(page_title, safe="")


def advance_page(session: SessionState, config: TrackerConfig, page_title: str) -> PageHit:
    """Record ``page_title`` as the current page and return the hit describing it."""
    title = escape_title(page_title)
    referrer = None
    if session.last_page is not None:
        referrer = quote_plus(f"http://{config.tracking_domain}/{session.last_page}")
    path = quote_plus(config.product_name) + "/" + title
    session.last_page = path
    return PageHit(title=title, path=path, referrer=referrer)


def _cookie_field(session: SessionState, now: int) -> str:
    site = session.site_id
    utma = (
        f"__utma={site}.{session.cookie_id}.{session.first_run}."
        f"{session.last_run}.{session.session_start}.{session.total_visits};"
    )
    utmb = f"__utmb={site};"
    utmc = f"__utmc={site};"
    utmz = f"__utmz={site}.{now}.{session.total_visits}.1.utmccn=(direct)|utmcsr=(direct)|utmcmd=(none);"
    return quote_plus(f"{utma}+{utmb}+{utmc}+{utmz}")


def _base_fields(
    config: TrackerConfig, session: SessionState, hit: PageHit, nonce: int, now: int
) -> Dict[str, str]:
    fields = {
        "utmwv": TRACKER_VERSION,
        "utmn": str(nonce),
        "utmhn": quote_plus(config.tracking_domain),
        "utmcs": "-",
        "utmsr": config.screen_resolution,
        "utmsc": quote_plus("24-bit"),
        "utmul": config.language,
        "utmje": "0",
        "utmfl": "-",
        "utmdt": hit.title,
    }
    if hit.referrer is not None:
        fields["utmr"] = hit.referrer
    fields["utmp"] = hit.path
    fields["utmac"] = config.tracking_id
    fields["utmcc"] = _cookie_field(session, now)
    fields["utmcr"] = "1"
    return fields


def event_payload(category: str, action: str, label: str = "", value: int = 0) -> str:
    if not label:
        utme = f"5({category}*{action})"
    else:
        utme = f"5({category}*{action}*{label})({value})"
    return quote(utme, safe="()*")


def build_url(endpoint: str, fields: Dict[str, str]) -> str:
    # Values are escaped as they are added; joining must not escape them again.
    return endpoint + "?" + "&".join(f"{key}={value}" for key, value in fields.items())


def encode_view(
    config: TrackerConfig, session: SessionState, hit: PageHit, *, nonce: int, now: int
) -> str:
    return build_url(config.endpoint, _base_fields(config, session, hit, nonce, now))


def encode_event(
    config: TrackerConfig,
    session: SessionState,
    hit: PageHit,
    category: str,
    action: str,
    label: str = "",
    value: int = 0,
    *,
    nonce: int,
    now: int,
) -> str:
    fields = _base_fields(config, session, hit, nonce, now)
    fields["utmt"] = "event"
    fields["utme"] = event_payload(category, action, label, value)
    return build_url(config.endpoint, fields)


__all__ = [
    "PageHit",
    "advance_page",
    "encode_view",
    "encode_event",
    "event_payload",
    "escape_title",
    "build_url",
    "TRACKER_VERSION",
]
