"""Page contexts the extractor reads from.

A page context exposes the handful of DOM reads the extractor needs:
rendered text, element lookup by CSS selector, and per element the resolved
URL attribute, the rendered bounding box, and computed style values. Every
read happens when it is awaited, so geometry and style always reflect the
page at harvest time.

``PlaywrightDom`` reads a live browser page. ``StaticDom`` approximates the
same answers from HTML alone with BeautifulSoup.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Protocol
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag
from playwright.async_api import ElementHandle, Page

from .models import BoundingBox

HIDDEN_VISIBILITY = "hidden"
NO_DISPLAY = "none"

_INNER_TEXT_SCRIPT = """
() => {
  const body = document.body;
  if (!body) {
    return '';
  }
  return body.innerText || body.textContent || '';
}
"""

_RESOLVED_URL_SCRIPT = """
(el, attr) => {
  const value = el[attr];
  if (typeof value === 'string') {
    return value;
  }
  return el.getAttribute(attr) || '';
}
"""

_COMPUTED_STYLE_SCRIPT = """
(el, prop) => window.getComputedStyle(el).getPropertyValue(prop)
"""


def is_visible(box: Optional[BoundingBox], visibility: str, display: str) -> bool:
    """Decide whether an element is rendered and visually present."""
    if box is None or box.width <= 0 or box.height <= 0:
        return False
    if visibility.strip().lower() == HIDDEN_VISIBILITY:
        return False
    return display.strip().lower() != NO_DISPLAY


class DomElement(Protocol):
    async def resolved_url(self, attribute: str) -> str: ...

    async def bounding_box(self) -> Optional[BoundingBox]: ...

    async def computed_style(self, prop: str) -> str: ...


class PageDom(Protocol):
    async def inner_text(self) -> str: ...

    async def query_all(self, selector: str) -> List[DomElement]: ...


class PlaywrightElement:
    """Element handle from a live Playwright page."""

    def __init__(self, handle: ElementHandle) -> None:
        self._handle = handle

    async def resolved_url(self, attribute: str) -> str:
        value = await self._handle.evaluate(_RESOLVED_URL_SCRIPT, attribute)
        return value or ""

    async def bounding_box(self) -> Optional[BoundingBox]:
        return BoundingBox.from_mapping(await self._handle.bounding_box())

    async def computed_style(self, prop: str) -> str:
        value = await self._handle.evaluate(_COMPUTED_STYLE_SCRIPT, prop)
        return value or ""


class PlaywrightDom:
    """Reads text and elements from a Playwright ``Page``."""

    def __init__(self, page: Page) -> None:
        self.page = page

    async def inner_text(self) -> str:
        text = await self.page.evaluate(_INNER_TEXT_SCRIPT)
        return text or ""

    async def query_all(self, selector: str) -> List[PlaywrightElement]:
        handles = await self.page.query_selector_all(selector)
        return [PlaywrightElement(handle) for handle in handles]


_SKIPPED_TEXT_TAGS = {"script", "style", "noscript", "template", "head", "title"}
_ZERO_LENGTH = re.compile(r"^\s*(?:0+(?:\.0*)?|\.0+)(?:px|em|rem|%|vw|vh|pt)?\s*$")
_LENGTH = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(px)?\s*$")


def _inline_declarations(tag: Tag) -> Dict[str, str]:
    """Parse ``style="a: b; c: d"`` into a lower-cased property map."""
    declarations: Dict[str, str] = {}
    raw = tag.get("style")
    if not raw:
        return declarations
    for chunk in str(raw).split(";"):
        if ":" not in chunk:
            continue
        prop, value = chunk.split(":", 1)
        value = value.replace("!important", "").strip().lower()
        if prop.strip() and value:
            declarations[prop.strip().lower()] = value
    return declarations


def _own_display(tag: Tag) -> str:
    declared = _inline_declarations(tag).get("display")
    if declared:
        return declared
    if tag.has_attr("hidden"):
        return NO_DISPLAY
    return "inline"


def _inherited_visibility(tag: Tag) -> str:
    node: Optional[Tag] = tag
    while node is not None and node.name != "[document]":
        declared = _inline_declarations(node).get("visibility")
        if declared and declared != "inherit":
            return declared
        node = node.parent
    return "visible"


def _is_rendered(tag: Tag) -> bool:
    """False when the element or any ancestor has ``display: none``."""
    node: Optional[Tag] = tag
    while node is not None and node.name != "[document]":
        if _own_display(node) == NO_DISPLAY:
            return False
        node = node.parent
    return True


def _declared_length(tag: Tag, prop: str) -> Optional[str]:
    return _inline_declarations(tag).get(prop) or (
        str(tag.get(prop)) if tag.has_attr(prop) else None
    )


def _axis_size(tag: Tag, prop: str) -> float:
    declared = _declared_length(tag, prop)
    if declared is None:
        return 1.0
    if _ZERO_LENGTH.match(declared):
        return 0.0
    match = _LENGTH.match(declared)
    if match:
        return float(match.group(1))
    return 1.0


class StaticElement:
    """A parsed tag answering the same questions a live element would."""

    def __init__(self, tag: Tag, base_url: str) -> None:
        self.tag = tag
        self.base_url = base_url

    async def resolved_url(self, attribute: str) -> str:
        value = self.tag.get(attribute)
        if value is None:
            return ""
        raw = str(value).strip()
        try:
            return urljoin(self.base_url, raw)
        except ValueError:
            # unparseable values come back verbatim, as element.href does
            return raw

    async def bounding_box(self) -> Optional[BoundingBox]:
        if not _is_rendered(self.tag):
            return None
        if self.tag.name == "a" and not self.tag.get_text(strip=True) and not self.tag.find(True):
            # empty anchors collapse to nothing
            return BoundingBox(0.0, 0.0, 0.0, 0.0)
        return BoundingBox(
            x=0.0,
            y=0.0,
            width=_axis_size(self.tag, "width"),
            height=_axis_size(self.tag, "height"),
        )

    async def computed_style(self, prop: str) -> str:
        prop = prop.lower()
        if prop == "display":
            return _own_display(self.tag)
        if prop == "visibility":
            return _inherited_visibility(self.tag)
        return _inline_declarations(self.tag).get(prop, "")


class StaticDom:
    """Page context over a static HTML document."""

    def __init__(self, html: str, base_url: str = "") -> None:
        self.soup = BeautifulSoup(html or "", "html.parser")
        base_tag = self.soup.find("base", href=True)
        if base_tag is not None:
            try:
                base_url = urljoin(base_url, str(base_tag["href"]).strip())
            except ValueError:
                # browsers ignore a base URL that does not parse
                pass
        self.base_url = base_url

    def _text_is_rendered(self, text: NavigableString) -> bool:
        parent = text.parent
        if parent is None:
            return False
        for node in [parent, *parent.parents]:
            if node.name in _SKIPPED_TEXT_TAGS:
                return False
        return _is_rendered(parent) and _inherited_visibility(parent) != HIDDEN_VISIBILITY

    async def inner_text(self) -> str:
        root = self.soup.body or self.soup
        pieces = []
        for text in root.find_all(string=True):
            if type(text) is not NavigableString:
                continue
            if not self._text_is_rendered(text):
                continue
            stripped = text.strip()
            if stripped:
                pieces.append(stripped)
        return "\n".join(pieces)

    async def query_all(self, selector: str) -> List[StaticElement]:
        return [StaticElement(tag, self.base_url) for tag in self.soup.select(selector)]
