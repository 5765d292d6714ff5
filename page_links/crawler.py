"""Locate or render pages and run link extraction against them."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

import requests
from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Page,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import ExtractConfig
from .dom import PlaywrightDom, StaticDom
from .extractor import extract_visible_links

logger = logging.getLogger("page_links")

_VISIBILITY_STATE_SCRIPT = "() => document.visibilityState"


class NoActivePageError(RuntimeError):
    """Raised when the connected browser has no page to read from."""


def _all_pages(browser: Browser) -> List[Page]:
    return [page for context in browser.contexts for page in context.pages]


async def find_active_page(pages: Sequence[Page]) -> Page:
    """Pick the tab the user is looking at, or the most recently opened one."""
    if not pages:
        raise NoActivePageError("No active tab found")
    for page in pages:
        try:
            state = await page.evaluate(_VISIBILITY_STATE_SCRIPT)
        except PlaywrightError as exc:
            logger.debug("Skipping unreadable tab %s: %s", page.url, exc)
            continue
        if state == "visible":
            return page
    return pages[-1]


async def extract_links_from_current_tab(
    config: Optional[ExtractConfig] = None,
) -> List[str]:
    """Extract links from the active tab of a browser reachable over CDP.

    Resolves to an empty list when no browser or tab is available, or when
    anything in the extraction fails.
    """
    config = config or ExtractConfig()
    try:
        async with async_playwright() as playwright:
            logger.info("Connecting to browser at %s", config.cdp_endpoint)
            browser = await playwright.chromium.connect_over_cdp(config.cdp_endpoint)
            page = await find_active_page(_all_pages(browser))
            logger.info("Extracting links from %s", page.url)
            return await extract_visible_links(PlaywrightDom(page))
    except NoActivePageError as exc:
        logger.error("Error extracting links: %s", exc)
        return []
    except Exception:  # pylint: disable=broad-except
        logger.exception("Error extracting links from the current tab")
        return []


async def extract_links_from_url(
    url: str,
    config: Optional[ExtractConfig] = None,
) -> List[str]:
    """Render ``url`` in a headless browser and extract its visible links."""
    config = config or ExtractConfig()
    try:
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=config.headless)
            try:
                page = await browser.new_page(user_agent=config.user_agent)
                page.set_default_navigation_timeout(config.navigation_timeout * 1000)
                logger.info("Loading %s", url)
                await page.goto(url, wait_until="networkidle")
                if config.wait_after_load:
                    await page.wait_for_timeout(int(config.wait_after_load * 1000))
                return await extract_visible_links(PlaywrightDom(page))
            finally:
                await browser.close()
    except PlaywrightTimeoutError as exc:
        logger.error("Timeout while loading %s: %s", url, exc)
        return []
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unexpected error loading %s", url)
        return []


def fetch_static_html(url: str, config: ExtractConfig) -> Tuple[str, str]:
    """Download raw HTML without rendering; returns the body and final URL."""
    resp = requests.get(
        url,
        timeout=config.request_timeout,
        headers={"User-Agent": config.user_agent},
    )
    resp.raise_for_status()
    return resp.text, resp.url


async def extract_links_from_html_async(html: str, base_url: str = "") -> List[str]:
    """Run the extraction pipeline over an HTML string from async code."""
    return await extract_visible_links(StaticDom(html, base_url))


def extract_links_from_html(html: str, base_url: str = "") -> List[str]:
    """Run the extraction pipeline over an HTML string.

    This starts its own event loop and cannot be called while one is already
    running; use ``extract_links_from_html_async`` there instead.
    """
    return asyncio.run(extract_links_from_html_async(html, base_url))


async def extract_links_from_static_url(
    url: str,
    config: Optional[ExtractConfig] = None,
) -> List[str]:
    """Fetch ``url`` with requests and extract links from the unrendered HTML."""
    config = config or ExtractConfig()
    try:
        logger.info("Fetching %s", url)
        html, final_url = fetch_static_html(url, config)
    except requests.RequestException as exc:
        logger.error("Failed to fetch %s: %s", url, exc)
        return []
    return await extract_links_from_html_async(html, final_url)
