"""Inline image discovery and image persistence utilities."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import requests
from filetype import guess

from .models import ArtworkRecord, ImageAsset
from .utils import slugify

logger = logging.getLogger("serp_artworks.images")

DATA_URI_PREFIX = "data:image/"
DATA_URI_PATTERN = re.compile(r"data:image/[a-zA-Z]+;base64,[A-Za-z0-9+/=]+")
MIN_INLINE_IMAGE_CHARS = 100

MAX_IMAGE_BYTES = 10 * 1024 * 1024
MIN_IMAGE_BYTES = 32
ALLOWED_IMAGE_TYPES = {"png", "jpg", "jpeg", "gif", "webp", "bmp", "tiff"}


def is_inline_image(value: Optional[str]) -> bool:
    """True for data URIs long enough not to be a placeholder pixel."""
    return bool(
        value
        and value.startswith(DATA_URI_PREFIX)
        and len(value) > MIN_INLINE_IMAGE_CHARS
    )


def find_data_uris(markup: str) -> List[str]:
    """All base64 image literals in raw markup, script blobs included."""
    return DATA_URI_PATTERN.findall(markup)


def first_srcset_data_uri(srcset: Optional[str]) -> Optional[str]:
    """First inline image candidate of a ``srcset`` value.

    Data URIs contain commas, so candidates are matched rather than split.
    """
    if not srcset:
        return None
    for match in DATA_URI_PATTERN.finditer(srcset):
        if is_inline_image(match.group(0)):
            return match.group(0)
    return None


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    return None


def decode_data_uri(uri: str) -> bytes:
    _, _, payload = uri.partition(",")
    return base64.b64decode(payload, validate=True)


def _fetch(session: requests.Session, source: str) -> Optional[bytes]:
    if source.startswith(DATA_URI_PREFIX):
        try:
            return decode_data_uri(source)
        except (binascii.Error, ValueError) as exc:
            logger.warning("Failed to decode inline image: %s", exc)
            return None
    try:
        resp = session.get(source, timeout=15)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Failed to fetch image %s: %s", source, exc)
        return None
    return resp.content


def save_images(records: Sequence[ArtworkRecord], output_dir: Path) -> List[ImageAsset]:
    """Persist the image of every record that has one under ``output_dir/images``."""
    candidates = [record for record in records if record.image]
    if not candidates:
        return []
    image_dir = output_dir / "images"
    image_dir.mkdir(parents=True, exist_ok=True)

    session = requests.Session()
    saved: Dict[str, ImageAsset] = {}
    assets: List[ImageAsset] = []

    for index, record in enumerate(candidates, start=1):
        if record.image in saved:
            assets.append(saved[record.image])
            continue
        label = record.image[:40] + "..." if len(record.image) > 40 else record.image

        data = _fetch(session, record.image)
        if data is None:
            continue
        if len(data) < MIN_IMAGE_BYTES:
            logger.warning("Skipping image of %r: payload too small", record.name)
            continue
        if len(data) > MAX_IMAGE_BYTES:
            logger.warning(
                "Skipping image of %r: larger than %s bytes",
                record.name,
                MAX_IMAGE_BYTES,
            )
            continue

        extension = detect_image_format(data)
        if not extension or extension not in ALLOWED_IMAGE_TYPES:
            logger.warning("Skipping %s: unsupported image type", label)
            continue

        filename = f"{index:02d}-{slugify(record.name)}"[:80] + f".{extension}"
        destination = image_dir / filename
        try:
            destination.write_bytes(data)
        except OSError as exc:
            logger.warning("Failed to write image %s: %s", destination, exc)
            continue

        asset = ImageAsset(
            name=record.name,
            source=label,
            filename=filename,
            relative_path=str(Path("images") / filename),
        )
        saved[record.image] = asset
        assets.append(asset)
    logger.info("Saved %d images to %s", len(saved), image_dir)
    return assets
