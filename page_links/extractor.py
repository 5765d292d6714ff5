"""Collect, validate, and order the URLs visible on a page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Set

from .dom import DomElement, PageDom, is_visible
from .patterns import scan_text
from .urls import has_fetchable_scheme, is_valid_url

logger = logging.getLogger("page_links")


@dataclass(frozen=True)
class ElementRule:
    """Which elements to read, which attribute holds the URL, and whether it must be visible."""

    name: str
    selector: str
    attribute: str
    requires_visibility: bool


# Media sources count even when the player itself is hidden.
ELEMENT_RULES = (
    ElementRule("links", "a[href]", "href", requires_visibility=True),
    ElementRule("images", "img[src]", "src", requires_visibility=True),
    ElementRule("media", "video[src], audio[src], source[src]", "src", requires_visibility=False),
)


async def element_is_visible(element: DomElement) -> bool:
    """Measure an element right now and apply the visibility rules."""
    box = await element.bounding_box()
    visibility = await element.computed_style("visibility")
    display = await element.computed_style("display")
    return is_visible(box, visibility, display)


async def harvest_elements(dom: PageDom, rule: ElementRule) -> Set[str]:
    """Return URLs from the elements matching a single rule."""
    found: Set[str] = set()
    for element in await dom.query_all(rule.selector):
        url = await element.resolved_url(rule.attribute)
        if not has_fetchable_scheme(url):
            continue
        if rule.requires_visibility and not await element_is_visible(element):
            continue
        found.add(url)
    logger.debug("Harvested %d %s URLs", len(found), rule.name)
    return found


async def collect_candidates(dom: PageDom) -> Set[str]:
    """Merge text matches and element attributes into one candidate set."""
    text = await dom.inner_text()
    candidates = scan_text(text)
    logger.debug("Found %d candidate URLs in page text", len(candidates))
    for rule in ELEMENT_RULES:
        candidates |= await harvest_elements(dom, rule)
    return candidates


def finalize_urls(candidates: Iterable[str]) -> List[str]:
    """Drop candidates that do not parse and sort the rest by code point."""
    return sorted({url for url in candidates if is_valid_url(url)})


async def extract_visible_links(dom: PageDom) -> List[str]:
    """Return the sorted unique URLs visible in ``dom``.

    Any failure while reading the page is logged and yields an empty list;
    a partially harvested page is never returned.
    """
    try:
        candidates = await collect_candidates(dom)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Failed to read links from the page")
        return []
    links = finalize_urls(candidates)
    dropped = len(candidates) - len(links)
    if dropped:
        logger.debug("Discarded %d candidates that are not valid URLs", dropped)
    return links


async def extract_links_from_current_page(dom: PageDom) -> List[str]:
    """Entry point for callers that already hold the page context."""
    return await extract_visible_links(dom)
