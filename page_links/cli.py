"""Command-line entry point for page-links."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from typing import List, Optional, Sequence

from .config import ExtractConfig
from .crawler import (
    extract_links_from_current_tab,
    extract_links_from_static_url,
    extract_links_from_url,
)
from .models import ExtractionResult
from .urls import filter_urls_by_domain

logger = logging.getLogger("page_links.cli")

CURRENT_TAB_SOURCE = "current-tab"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="List the unique URLs visible on web pages.",
    )
    parser.add_argument(
        "urls",
        nargs="*",
        help="Pages to render and scan. Without URLs the active browser tab is used.",
    )
    parser.add_argument(
        "--current",
        action="store_true",
        help="Scan the active tab of a browser started with --remote-debugging-port",
    )
    parser.add_argument(
        "--cdp-url",
        default=None,
        help="DevTools endpoint of the running browser (default: $PAGE_LINKS_CDP_URL or http://localhost:9222)",
    )
    parser.add_argument(
        "--static",
        action="store_true",
        help="Fetch raw HTML with requests instead of rendering it in Chromium",
    )
    parser.add_argument(
        "--domain",
        default=None,
        help="Only keep URLs whose host contains this text",
    )
    parser.add_argument(
        "--wait",
        type=float,
        default=1.0,
        help="Seconds to wait after network idle before scanning",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Navigation timeout in seconds",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON document with links, counts, and timings",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ExtractConfig:
    config = ExtractConfig(
        navigation_timeout=args.timeout,
        wait_after_load=args.wait,
        request_timeout=args.timeout,
    )
    if args.cdp_url:
        config.cdp_endpoint = args.cdp_url
    return config


async def _extract(source: str, args: argparse.Namespace, config: ExtractConfig) -> List[str]:
    if source == CURRENT_TAB_SOURCE:
        return await extract_links_from_current_tab(config)
    if args.static:
        return await extract_links_from_static_url(source, config)
    return await extract_links_from_url(source, config)


async def run(args: argparse.Namespace) -> List[ExtractionResult]:
    """Extract links for every requested source, one after another."""
    config = build_config(args)
    sources = list(args.urls)
    if args.current or not sources:
        sources.insert(0, CURRENT_TAB_SOURCE)

    results: List[ExtractionResult] = []
    for source in sources:
        start = time.perf_counter()
        links = await _extract(source, args, config)
        if args.domain:
            links = filter_urls_by_domain(links, args.domain)
        elapsed = time.perf_counter() - start
        logger.info("Found %d unique URLs on %s in %.2fs", len(links), source, elapsed)
        results.append(ExtractionResult(source=source, links=links, elapsed_seconds=elapsed))
    return results


def _write_results(results: List[ExtractionResult], as_json: bool) -> None:
    if as_json:
        payload = [result.to_dict() for result in results]
        json.dump(payload[0] if len(payload) == 1 else payload, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        for result in results:
            for link in result.links:
                sys.stdout.write(link + "\n")
    sys.stdout.flush()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.INFO
    if args.json and not args.verbose:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    overall_start = time.perf_counter()
    results = asyncio.run(run(args))
    total_elapsed = time.perf_counter() - overall_start
    _write_results(results, args.json)

    empty = sum(1 for result in results if not result.links)
    logger.debug(
        "Finished in %.2fs (%d sources, %d without links)",
        total_elapsed,
        len(results),
        empty,
    )


if __name__ == "__main__":
    main()
