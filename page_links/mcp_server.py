"""MCP server exposing page-links extraction tools."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from .config import ExtractConfig
from .crawler import extract_links_from_current_tab, extract_links_from_url
from .urls import filter_urls_by_domain

logger = logging.getLogger("page_links.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="page-links")


def _response(links: List[str], domain: Optional[str]) -> Dict[str, Any]:
    if domain:
        links = filter_urls_by_domain(links, domain)
    return {"success": True, "links": links, "count": len(links)}


@mcp.tool()
async def extract_links(url: str, domain: Optional[str] = None) -> Dict[str, Any]:
    """Render a web page with Playwright and list the unique URLs visible on it."""
    try:
        links = await extract_links_from_url(url, ExtractConfig())
        return _response(links, domain)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("extract_links failed for %s", url)
        return {"success": False, "error": str(exc)}


@mcp.tool()
async def extract_current_tab_links(domain: Optional[str] = None) -> Dict[str, Any]:
    """List the unique URLs visible in the active tab of the debugging browser."""
    try:
        links = await extract_links_from_current_tab(ExtractConfig())
        return _response(links, domain)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("extract_current_tab_links failed")
        return {"success": False, "error": str(exc)}


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
