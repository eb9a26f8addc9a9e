"""Structural helpers for classifying DOM nodes."""

from __future__ import annotations

from enum import Enum
from typing import List

from bs4 import Tag

from .utils import clean_text


class NodeKind(Enum):
    IMAGE = "image"
    CONTAINER = "container"
    OTHER = "other"


IMAGE_TAGS = frozenset({"img"})
CONTAINER_TAGS = frozenset({"div"})


def classify_node(node: Tag) -> NodeKind:
    """Map an element onto the closed set of kinds the extractors care about."""
    name = (node.name or "").lower()
    if name in IMAGE_TAGS:
        return NodeKind.IMAGE
    if name in CONTAINER_TAGS:
        return NodeKind.CONTAINER
    return NodeKind.OTHER


def element_children(node: Tag) -> List[Tag]:
    """Direct element children, skipping text and comment nodes."""
    return [child for child in node.children if isinstance(child, Tag)]


def children_of_kind(node: Tag, kind: NodeKind) -> List[Tag]:
    return [child for child in element_children(node) if classify_node(child) is kind]


def node_text(node: Tag) -> str:
    return clean_text(node.get_text())


def raw_text(node: Tag) -> str:
    """Inner text trimmed at the ends only, inner spacing untouched."""
    return node.get_text().strip()
