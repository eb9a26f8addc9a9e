"""Anchor discovery and search-link validation."""

from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import parse_qs

from bs4 import BeautifulSoup, Tag

from .config import MAIN_SCOPE_SELECTOR, SEARCH_PATH

logger = logging.getLogger("serp_artworks.links")

SCA_ESV_PARAM = "sca_esv"
LENIENT_LINK_MARKER = "/search?"


def search_scope(root: BeautifulSoup | Tag, scope_selector: Optional[str]) -> BeautifulSoup | Tag:
    """Return the main-content subtree when the page marks one, else ``root``."""
    if scope_selector:
        scope = root.select_one(scope_selector)
        if scope is not None:
            return scope
        logger.debug("No element matches %s; scanning the whole document", scope_selector)
    return root


def locate_anchors(
    root: BeautifulSoup | Tag,
    prefix: str = SEARCH_PATH,
    scope_selector: Optional[str] = MAIN_SCOPE_SELECTOR,
) -> List[Tag]:
    """Anchors whose ``href`` starts with ``prefix``, in document order."""
    scope = search_scope(root, scope_selector)
    return [
        anchor
        for anchor in scope.find_all("a", href=True)
        if anchor["href"].startswith(prefix)
    ]


def is_valid_search_link(href: object) -> bool:
    """Strict check: ``/search`` path with a non-empty ``sca_esv`` parameter."""
    if not isinstance(href, str) or not href.startswith(SEARCH_PATH):
        return False
    _, sep, query = href.partition("?")
    if not sep or not query:
        return False
    try:
        params = parse_qs(query, keep_blank_values=True, strict_parsing=True)
    except ValueError:
        return False
    values = params.get(SCA_ESV_PARAM)
    return bool(values and values[0].strip())


def is_lenient_search_link(href: object) -> bool:
    return isinstance(href, str) and LENIENT_LINK_MARKER in href


def absolute_link(href: str, origin: str, always: bool = True) -> str:
    """Prefix the site origin onto a relative search path.

    With ``always=False`` only ``/search?`` paths are prefixed and anything
    else is returned unchanged.
    """
    if always or href.startswith(LENIENT_LINK_MARKER):
        return origin.rstrip("/") + href
    return href
