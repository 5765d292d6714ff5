"""Data models shared by the extraction pipeline and its front ends."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class BoundingBox:
    """Rendered geometry of an element, in CSS pixels."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, float]]) -> Optional["BoundingBox"]:
        """Build a box from Playwright's ``bounding_box()`` dictionary."""
        if not data:
            return None
        return cls(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            width=float(data.get("width", 0.0)),
            height=float(data.get("height", 0.0)),
        )


@dataclass
class ExtractionResult:
    """Links found on one page plus timing details."""

    source: str
    links: List[str]
    elapsed_seconds: float

    @property
    def count(self) -> int:
        return len(self.links)

    @property
    def average_seconds_per_link(self) -> Optional[float]:
        if not self.links:
            return None
        return self.elapsed_seconds / len(self.links)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "links": list(self.links),
            "count": self.count,
            "elapsed_seconds": round(self.elapsed_seconds, 4),
            "average_seconds_per_link": (
                None
                if self.average_seconds_per_link is None
                else round(self.average_seconds_per_link, 6)
            ),
        }
