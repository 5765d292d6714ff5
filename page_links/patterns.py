"""Regular expressions that recognise URL-like substrings in page text."""

from __future__ import annotations

import re
from typing import Optional, Set

_SUFFIX = (
    r"(?:/[\w/_.]*)?"  # path
    r"(?:\?[\w&=%.]*)?"  # query
    r"(?:#[\w.]*)?"  # fragment
)

ABSOLUTE_URL_PATTERN = re.compile(
    r"(?:https?|ftp)://[-\w.]+(?::[0-9]+)?" + _SUFFIX,
    re.IGNORECASE | re.ASCII,
)

WWW_URL_PATTERN = re.compile(
    r"www\.[-\w.]+\.[a-z]{2,}" + _SUFFIX,
    re.IGNORECASE | re.ASCII,
)

DEFAULT_SCHEME_PREFIX = "https://"


def find_absolute_urls(text: str) -> Set[str]:
    """Return every protocol-qualified match, whitespace-trimmed."""
    return {match.group(0).strip() for match in ABSOLUTE_URL_PATTERN.finditer(text)}


def find_www_urls(text: str) -> Set[str]:
    """Return ``www.`` matches, qualified with ``https://`` when needed."""
    found: Set[str] = set()
    for match in WWW_URL_PATTERN.finditer(text):
        candidate = match.group(0).strip()
        if not candidate.startswith("http"):
            candidate = DEFAULT_SCHEME_PREFIX + candidate
        found.add(candidate)
    return found


def scan_text(text: Optional[str]) -> Set[str]:
    """Collect candidate URLs from rendered page text.

    Both patterns run over the whole text independently. Overlapping hits
    (``https://www.example.com`` matches both) collapse in the returned set,
    and anything malformed is left for the validity filter to drop.
    """
    if not text:
        return set()
    return find_absolute_urls(text) | find_www_urls(text)
