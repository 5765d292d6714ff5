"""Configuration objects and constants for link extraction."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_CDP_ENDPOINT = "http://localhost:9222"
CDP_ENDPOINT_ENV = "PAGE_LINKS_CDP_URL"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) page-links/0.1"
)


def _default_cdp_endpoint() -> str:
    return os.getenv(CDP_ENDPOINT_ENV) or DEFAULT_CDP_ENDPOINT


@dataclass
class ExtractConfig:
    """Settings that control how pages are located, rendered, and fetched."""

    navigation_timeout: float = 30.0
    wait_after_load: float = 1.0
    headless: bool = True
    request_timeout: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    cdp_endpoint: str = field(default_factory=_default_cdp_endpoint)
