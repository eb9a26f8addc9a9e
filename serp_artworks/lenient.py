"""Lenient extraction for noisier pages.

Instead of demanding one clean card shape, every element that might hold an
artwork is inspected, best-effort fields are pulled out of it, and the
resulting candidates are filtered, deduplicated and sorted.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from . import filters
from .config import ExtractorConfig
from .images import find_data_uris, first_srcset_data_uri, is_inline_image
from .links import LENIENT_LINK_MARKER, absolute_link
from .models import ArtworkRecord, LenientCandidate
from .nodes import node_text

logger = logging.getLogger("serp_artworks.lenient")

CARD_SELECTORS = (
    '[role="listitem"], div[data-attrid], div[data-hveid], div[data-ved], '
    'div[jsname], g-scrolling-carousel div, div[class*="kb"], div[class*="kp"], '
    'div[class*="kltat"], div[class*="klitem"]'
)
EXTRA_SELECTORS = (
    'div[class*="g"], div[class*="rc"], div[class*="r"], li, ul > *, [data-ved]'
)
SEARCH_ANCHOR_SELECTOR = f'a[href*="{LENIENT_LINK_MARKER}"]'
ANCESTOR_LEVELS = 3
MIN_RAW_NAME_LENGTH = 2
MAX_EXTENSION_CHARS = 6
MAX_EXTENSIONS = 2

TRAILING_YEAR = re.compile(r"(\d{4})$")
YEAR_TOKEN = re.compile(r"^\d{3,4}$")


def _unique(nodes: Iterable[Tag]) -> List[Tag]:
    seen = set()
    result = []
    for node in nodes:
        if id(node) in seen:
            continue
        seen.add(id(node))
        result.append(node)
    return result


def _anchor_containers(anchors: List[Tag]) -> List[Tag]:
    containers: List[Tag] = []
    for anchor in anchors:
        containers.append(anchor)
        node = anchor
        for _ in range(ANCESTOR_LEVELS):
            node = node.parent
            if not isinstance(node, Tag) or isinstance(node, BeautifulSoup):
                break
            containers.append(node)
    return containers


def candidate_containers(soup: BeautifulSoup) -> List[Tag]:
    """Every element worth inspecting, first-seen order, no repeats."""
    anchors = soup.select(SEARCH_ANCHOR_SELECTOR)
    return _unique(
        soup.select(CARD_SELECTORS)
        + _anchor_containers(anchors)
        + soup.select(EXTRA_SELECTORS)
        + anchors
    )


def extract_extensions(raw_name: str, node: Tag, min_year: int, max_year: int) -> Tuple[str, ...]:
    """Years from the raw anchor text and from short chips inside ``node``."""
    found: List[str] = []
    match = TRAILING_YEAR.search(raw_name)
    if match:
        found.append(match.group(1))

    for element in node.find_all(["span", "div"]):
        text = node_text(element)
        if not text or len(text) > MAX_EXTENSION_CHARS:
            continue
        if YEAR_TOKEN.match(text) and min_year <= int(text) <= max_year:
            found.append(text)

    unique = list(dict.fromkeys(found))
    return tuple(unique[:MAX_EXTENSIONS])


def find_inline_image(node: Tag) -> Optional[str]:
    """Best inline image under ``node``: ``src``, then ``data-src``, then srcset."""
    for attr in ("src", "data-src"):
        img = node.select_one(f'img[{attr}^="data:image/"]')
        if img is not None and is_inline_image(img.get(attr)):
            return img[attr]

    for img in node.find_all("img"):
        srcset = img.get("srcset") or img.get("data-srcset")
        data_uri = first_srcset_data_uri(srcset)
        if data_uri:
            return data_uri
    return None


def build_candidate(node: Tag, index: int, config: ExtractorConfig) -> Optional[LenientCandidate]:
    anchor = node.select_one(SEARCH_ANCHOR_SELECTOR)
    if anchor is None:
        return None
    raw_name = node_text(anchor)
    if len(raw_name) < MIN_RAW_NAME_LENGTH:
        return None

    name = TRAILING_YEAR.sub("", raw_name).strip()
    if not name:
        return None

    return LenientCandidate(
        name=name,
        link=absolute_link(anchor["href"], config.origin, always=False),
        extensions=extract_extensions(raw_name, node, config.min_year, config.max_year),
        image=find_inline_image(node) or "",
        node=node,
        index=index,
    )


def dedupe(candidates: Iterable[LenientCandidate]) -> List[LenientCandidate]:
    """Collapse candidates sharing ``(name, link)``; the first one wins."""
    kept: Dict[Tuple[str, str], LenientCandidate] = {}
    for candidate in candidates:
        kept.setdefault((candidate.name, candidate.link), candidate)
    return list(kept.values())


def backfill_images(records: List[ArtworkRecord], markup: str) -> List[ArtworkRecord]:
    """Hand unused inline images from the raw markup to records that lack one."""
    used = {record.image for record in records if record.image}
    pool = iter(find_data_uris(markup))
    filled: List[ArtworkRecord] = []
    for record in records:
        if not record.image:
            image = next((uri for uri in pool if uri not in used), None)
            if image:
                used.add(image)
                record = replace(record, image=image)
        filled.append(record)
    return filled


def extract_artworks(
    soup: BeautifulSoup,
    config: ExtractorConfig,
    markup: Optional[str] = None,
) -> List[ArtworkRecord]:
    """Run lenient extraction; ``markup`` enables the inline-image backfill."""
    containers = candidate_containers(soup)
    candidates: List[LenientCandidate] = []
    for index, node in enumerate(containers):
        try:
            candidate = build_candidate(node, index, config)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Unexpected error inspecting container %d", index)
            continue
        if candidate is not None:
            candidates.append(candidate)

    unique = dedupe(candidates)
    accepted = [candidate for candidate in unique if filters.accept(candidate)]
    accepted.sort(key=lambda candidate: (candidate.name.lower(), candidate.index))
    records = [candidate.to_record() for candidate in accepted]
    logger.debug(
        "Lenient extraction: %d containers, %d candidates, %d unique, %d accepted",
        len(containers),
        len(candidates),
        len(unique),
        len(records),
    )

    if markup:
        records = backfill_images(records, markup)
    return records
