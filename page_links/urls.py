"""URL validity checks and filters used on extracted link lists."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional
from urllib.parse import SplitResult, urlsplit

SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
SPECIAL_SCHEMES = {"http", "https", "ftp", "ws", "wss"}
FETCHABLE_PREFIXES = ("http", "ftp")
_C0_AND_SPACE = "".join(chr(code) for code in range(0x21))
_FORBIDDEN_HOST_CHARS = set("<>^|\\") | set(_C0_AND_SPACE) | {"\x7f"}


def _ipv4_number(part: str) -> Optional[int]:
    """Parse one dotted IPv4 part the way browsers do (decimal, 0x hex, 0 octal)."""
    if not part:
        return None
    radix = 10
    if part[:2].lower() == "0x":
        part, radix = part[2:], 16
    elif len(part) > 1 and part.startswith("0"):
        part, radix = part[1:], 8
    if not part:
        return 0
    if any(char not in "0123456789abcdef"[:radix] for char in part.lower()):
        return None
    return int(part, radix)


def _ends_in_number(host: str) -> bool:
    labels = host.split(".")
    if labels[-1] == "" and len(labels) > 1:
        labels.pop()
    last = labels[-1]
    if last and last.isascii() and last.isdigit():
        return True
    return last[:2].lower() == "0x" and _ipv4_number(last) is not None


def _is_ipv4(host: str) -> bool:
    labels = host.split(".")
    if labels[-1] == "" and len(labels) > 1:
        labels.pop()
    if len(labels) > 4:
        return False
    numbers = [_ipv4_number(label) for label in labels]
    if any(number is None for number in numbers):
        return False
    if any(number > 255 for number in numbers[:-1]):
        return False
    return numbers[-1] < 256 ** (5 - len(numbers))


def _host_is_valid(host: Optional[str]) -> bool:
    if not host:
        return False
    if any(char in _FORBIDDEN_HOST_CHARS or char.isspace() for char in host):
        return False
    if ":" not in host and _ends_in_number(host):
        return _is_ipv4(host)
    return True


def _parse(value: str) -> Optional[SplitResult]:
    """Split a URL and reject anything that lacks a usable scheme or host."""
    candidate = value.strip(_C0_AND_SPACE)
    if not candidate or not SCHEME_PATTERN.match(candidate):
        return None
    try:
        parts = urlsplit(candidate)
        port = parts.port
    except ValueError:
        return None
    if parts.scheme in SPECIAL_SCHEMES:
        if not _host_is_valid(parts.hostname):
            return None
        if port is not None and not 0 <= port <= 65535:
            return None
    return parts


def is_valid_url(value: str) -> bool:
    """Return True when ``value`` parses as a syntactically valid URL.

    Only ASCII controls and spaces are trimmed from the ends. A host whose
    last label is numeric must be a well-formed IPv4 address, so
    ``http://256.0.0.1`` and ``http://example.123`` are rejected.
    """
    if not isinstance(value, str):
        return False
    return _parse(value) is not None


def filter_urls_by_domain(urls: Iterable[str], domain: str) -> List[str]:
    """Keep URLs whose host contains ``domain``.

    This is a plain substring test on the hostname: ``"github.com"`` keeps
    ``api.github.com`` and also ``evilgithub.com.example.org``. Entries that
    do not parse are dropped without raising.
    """
    kept: List[str] = []
    for url in urls:
        parts = _parse(url) if isinstance(url, str) else None
        if parts is None:
            continue
        if domain in (parts.hostname or ""):
            kept.append(url)
    return kept


def has_fetchable_scheme(url: Optional[str]) -> bool:
    """Return True for ``http``/``https``/``ftp`` URLs as browsers serialise them."""
    return bool(url) and url.startswith(FETCHABLE_PREFIXES)
