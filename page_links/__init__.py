"""List the unique URLs visible on a web page."""

from .crawler import (
    NoActivePageError,
    extract_links_from_current_tab,
    extract_links_from_html,
    extract_links_from_html_async,
    extract_links_from_static_url,
    extract_links_from_url,
)
from .dom import PlaywrightDom, StaticDom, is_visible
from .extractor import extract_links_from_current_page, extract_visible_links
from .urls import filter_urls_by_domain, is_valid_url

__all__ = [
    "NoActivePageError",
    "PlaywrightDom",
    "StaticDom",
    "extract_links_from_current_page",
    "extract_links_from_current_tab",
    "extract_links_from_html",
    "extract_links_from_html_async",
    "extract_links_from_static_url",
    "extract_links_from_url",
    "extract_visible_links",
    "filter_urls_by_domain",
    "is_valid_url",
    "is_visible",
]
