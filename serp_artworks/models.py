"""Data models used throughout the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from bs4 import Tag


@dataclass(frozen=True)
class ArtworkRecord:
    """One artwork pulled out of a search results page.

    ``extensions`` is ``None`` when the key should be absent from the
    serialized record (strict mode), and a possibly empty tuple otherwise.
    """

    name: str
    link: str
    image: str = ""
    extensions: Optional[Tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "link": self.link,
            "image": self.image,
        }
        if self.extensions is not None:
            data["extensions"] = list(self.extensions)
        return data


@dataclass
class LenientCandidate:
    """Intermediate lenient-mode result that still carries its DOM container."""

    name: str
    link: str
    extensions: Tuple[str, ...]
    image: str
    node: Tag = field(repr=False, compare=False)
    index: int = 0

    def to_record(self) -> ArtworkRecord:
        return ArtworkRecord(
            name=self.name,
            link=self.link,
            image=self.image,
            extensions=self.extensions,
        )


@dataclass
class ImageAsset:
    """Record image persisted to disk."""

    name: str
    source: str
    filename: str
    relative_path: str
