"""Strict extraction: exact anchor shape and validated search links."""

from __future__ import annotations

import json
import logging
from typing import List, Optional, Set, Tuple

from bs4 import BeautifulSoup, Tag

from .config import STRICT_ANCHOR_PREFIX, ExtractorConfig
from .links import absolute_link, is_valid_search_link, locate_anchors
from .models import ArtworkRecord
from .nodes import (
    NodeKind,
    children_of_kind,
    classify_node,
    element_children,
    node_text,
    raw_text,
)

logger = logging.getLogger("serp_artworks.strict")

LAZY_SOURCE_ATTR = "data-src"
PRIMARY_SOURCE_ATTR = "src"


class AnchorShapeError(ValueError):
    """Raised when an anchor does not look like a result card."""


def _split_card(anchor: Tag) -> Tuple[Tag, Tag]:
    children = element_children(anchor)
    if len(children) != 2:
        raise AnchorShapeError(f"expected 2 element children, found {len(children)}")

    images = [child for child in children if classify_node(child) is NodeKind.IMAGE]
    containers = [child for child in children if classify_node(child) is NodeKind.CONTAINER]
    if len(images) != 1 or len(containers) != 1:
        raise AnchorShapeError(
            f"expected one image and one container, found {len(images)} and {len(containers)}"
        )
    return images[0], containers[0]


def image_source(image: Tag) -> str:
    """Lazy-load source when present, else the primary source, else ``""``."""
    lazy = (image.get(LAZY_SOURCE_ATTR) or "").strip()
    if lazy:
        return lazy
    return (image.get(PRIMARY_SOURCE_ATTR) or "").strip()


def parse_extensions(text: str) -> Tuple[str, ...]:
    """Turn the second text block of a card into extension strings.

    JSON-looking arrays are decoded; anything else becomes a single entry.
    """
    text = text.strip()
    if not text:
        return ()
    if text.startswith("[") and text.endswith("]"):
        try:
            parsed = json.loads(text)
        except (ValueError, RecursionError):
            logger.debug("Keeping unparsable extension text as-is: %r", text)
            return (text,)
        if isinstance(parsed, list):
            return tuple(item if isinstance(item, str) else json.dumps(item) for item in parsed)
    return (text,)


def extract_record(anchor: Tag, origin: str) -> ArtworkRecord:
    """Build a record from one validated anchor or raise ``AnchorShapeError``."""
    image, container = _split_card(anchor)
    blocks = children_of_kind(container, NodeKind.CONTAINER)
    if not blocks:
        raise AnchorShapeError("container holds no name block")

    name = node_text(blocks[0])
    if not name:
        raise AnchorShapeError("empty name")

    extensions: Optional[Tuple[str, ...]] = None
    if len(blocks) > 1:
        extensions = parse_extensions(raw_text(blocks[1])) or None

    return ArtworkRecord(
        name=name,
        link=absolute_link(anchor["href"], origin),
        image=image_source(image),
        extensions=extensions,
    )


def extract_artworks(soup: BeautifulSoup, config: ExtractorConfig) -> List[ArtworkRecord]:
    """Run strict extraction over a parsed document, keeping anchor order."""
    anchors = locate_anchors(soup, STRICT_ANCHOR_PREFIX, config.scope_selector)
    records: List[ArtworkRecord] = []
    seen: Set[Tuple[str, str]] = set()

    for position, anchor in enumerate(anchors):
        href = anchor.get("href")
        if not is_valid_search_link(href):
            logger.debug("Skipping anchor %d: invalid link %r", position, href)
            continue
        try:
            record = extract_record(anchor, config.origin)
        except AnchorShapeError as exc:
            logger.debug("Skipping anchor %d: %s", position, exc)
            continue
        except Exception:  # pylint: disable=broad-except
            logger.exception("Unexpected error extracting anchor %d", position)
            continue

        if config.dedupe:
            key = (record.name, record.link)
            if key in seen:
                continue
            seen.add(key)
        records.append(record)

    logger.debug("Strict extraction kept %d of %d anchors", len(records), len(anchors))
    return records
