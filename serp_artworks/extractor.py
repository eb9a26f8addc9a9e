"""High-level orchestration: load a results page and extract artwork records."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from bs4 import BeautifulSoup

from . import lenient, strict
from .config import ExtractionMode, ExtractorConfig
from .models import ArtworkRecord
from .renderer import load_document

logger = logging.getLogger("serp_artworks")


@dataclass
class ExtractionSummary:
    """Counts reported after a run."""

    total: int
    with_images: int
    with_extensions: int


def summarize(records: Sequence[ArtworkRecord]) -> ExtractionSummary:
    return ExtractionSummary(
        total=len(records),
        with_images=sum(1 for record in records if record.image),
        with_extensions=sum(1 for record in records if record.extensions),
    )


def extract_from_html(html: str, config: Optional[ExtractorConfig] = None) -> List[ArtworkRecord]:
    """Parse final HTML and run the configured extraction mode over it."""
    config = config or ExtractorConfig()
    soup = BeautifulSoup(html, "html.parser")
    if ExtractionMode(config.mode) is ExtractionMode.LENIENT:
        return lenient.extract_artworks(soup, config, markup=html)
    return strict.extract_artworks(soup, config)


def to_document(records: Sequence[ArtworkRecord]) -> Dict[str, Any]:
    return {"artworks": [record.to_dict() for record in records]}


async def extract_artworks(path: Path, config: Optional[ExtractorConfig] = None) -> List[ArtworkRecord]:
    config = config or ExtractorConfig()
    html = await load_document(path, config)
    records = extract_from_html(html, config)
    logger.info(
        "Extracted %d artworks from %s (%s mode)",
        len(records),
        path,
        ExtractionMode(config.mode).value,
    )
    return records


class GoogleSearchExtractor:
    """Extract artworks from one saved Google results page.

    Each call to :meth:`process` loads and parses the page afresh, so repeated
    calls on an unchanged file return identical records.
    """

    def __init__(self, path: Path, config: Optional[ExtractorConfig] = None) -> None:
        self.path = Path(path)
        self.config = config or ExtractorConfig()

    def process(self) -> List[ArtworkRecord]:
        return asyncio.run(extract_artworks(self.path, self.config))
