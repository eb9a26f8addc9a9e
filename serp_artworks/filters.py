"""Plausibility rules used by lenient extraction to drop non-artwork labels.

Each rule is independent and carries the reason it rejects a name, so a
rejected candidate can always be traced back to exactly one rule.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .links import is_lenient_search_link
from .models import LenientCandidate

logger = logging.getLogger("serp_artworks.filters")

YEAR_PATTERN = re.compile(r"^\d{4}$")


@dataclass(frozen=True)
class NameRule:
    """Rejects a candidate name when ``pattern`` matches it."""

    code: str
    reason: str
    pattern: re.Pattern[str]

    def rejects(self, name: str) -> bool:
        return bool(self.pattern.search(name))


def _rule(code: str, reason: str, pattern: str) -> NameRule:
    return NameRule(code, reason, re.compile(pattern, re.IGNORECASE))


NAME_RULES: Tuple[NameRule, ...] = (
    _rule("too_short", "name is shorter than three characters", r"^.{0,2}$"),
    _rule(
        "search_tab",
        "search vertical tab label",
        r"^(All|Images|Shopping|Videos|News|Web|More)$",
    ),
    _rule("all_tab", "'All ...' tab label", r"^(All images|All Videos|All News)$"),
    _rule("numeric", "pure number, usually a year or page index", r"^[0-9]+$"),
    _rule(
        "navigation",
        "pagination or shopping phrase",
        r"^(Next|See more|Forums|for sale|price|Original.*paintings)$",
    ),
    _rule(
        "related_entity",
        "related artist, movement or place chip",
        r"(Claude Monet|Post-Impressionism|Auvers-sur-Oise|France)$",
    ),
    _rule("ranking", "ranking list heading", r"^(Top \d+|Top\d+)"),
    _rule("listing", "listing or call-to-action suffix", r"(for sale|in order|View all|here)$"),
    _rule(
        "biography",
        "biographical entity rather than a work",
        r"^(Theo van Gogh|Zundert|Netherlands|Zundert, Netherlands)$",
    ),
)


def name_rejection(name: Optional[str]) -> Optional[NameRule]:
    """First rule that rejects ``name``, or ``None`` if the name is plausible."""
    value = name or ""
    for rule in NAME_RULES:
        if rule.rejects(value):
            return rule
    return None


def has_year(candidate: LenientCandidate) -> bool:
    return any(YEAR_PATTERN.match(ext) for ext in candidate.extensions)


def accept(candidate: LenientCandidate) -> bool:
    """Keep search links whose name is plausible or that carry a year."""
    if not is_lenient_search_link(candidate.link):
        logger.debug("Rejecting %r: link %r is not a search link", candidate.name, candidate.link)
        return False
    rejection = name_rejection(candidate.name)
    if rejection is None or has_year(candidate):
        return True
    logger.debug("Rejecting %r: %s", candidate.name, rejection.reason)
    return False
