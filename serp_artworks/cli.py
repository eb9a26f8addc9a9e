"""Command-line entry point for artwork extraction."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Sequence

from playwright.async_api import Error as PlaywrightError

from .config import (
    DEFAULT_MAX_YEAR,
    DEFAULT_MIN_YEAR,
    GOOGLE_ORIGIN,
    BrowserKind,
    ExtractionMode,
    ExtractorConfig,
)
from .extractor import GoogleSearchExtractor, summarize, to_document
from .images import save_images

logger = logging.getLogger("serp_artworks.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract artwork records from a saved Google search results page.",
    )
    parser.add_argument("path", type=Path, help="Saved HTML file to process")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in ExtractionMode],
        default=ExtractionMode.STRICT.value,
        help="strict: exact result-card shape; lenient: broad heuristic search",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON here instead of standard output",
    )
    parser.add_argument(
        "--wait",
        type=float,
        default=5.0,
        help="Seconds to wait for the page to become ready",
    )
    parser.add_argument(
        "--browser",
        choices=[kind.value for kind in BrowserKind],
        default=BrowserKind.CHROMIUM.value,
        help="Playwright browser engine used for rendering",
    )
    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Show the browser window while rendering",
    )
    parser.add_argument(
        "--no-render",
        action="store_true",
        help="Parse the file as saved without executing its scripts",
    )
    parser.add_argument(
        "--screenshot",
        type=Path,
        default=None,
        help="Save a full-page screenshot of the rendered page",
    )
    parser.add_argument(
        "--dedupe",
        action="store_true",
        help="Drop strict-mode records repeating an earlier name and link",
    )
    parser.add_argument(
        "--min-year",
        type=int,
        default=DEFAULT_MIN_YEAR,
        help="Earliest year accepted as a lenient-mode extension",
    )
    parser.add_argument(
        "--max-year",
        type=int,
        default=DEFAULT_MAX_YEAR,
        help="Latest year accepted as a lenient-mode extension",
    )
    parser.add_argument(
        "--origin",
        default=GOOGLE_ORIGIN,
        help="Origin prefixed onto relative result links",
    )
    parser.add_argument(
        "--images-dir",
        type=Path,
        default=None,
        help="Also save each artwork image under this directory",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ExtractorConfig:
    return ExtractorConfig(
        mode=ExtractionMode(args.mode),
        origin=args.origin,
        wait_timeout=args.wait,
        headless=not args.no_headless,
        browser=BrowserKind(args.browser),
        render=not args.no_render,
        screenshot_path=args.screenshot,
        dedupe=args.dedupe,
        min_year=args.min_year,
        max_year=args.max_year,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = build_config(args)
    overall_start = time.perf_counter()
    try:
        records = GoogleSearchExtractor(args.path, config).process()
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    except PlaywrightError as exc:
        logger.error("Failed to render %s: %s", args.path, exc)
        return 1
    total_elapsed = time.perf_counter() - overall_start

    payload = json.dumps(to_document(records), indent=2, ensure_ascii=False)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload + "\n", encoding="utf-8")
        logger.info("Saved JSON to %s", args.output)
    else:
        sys.stdout.write(payload + "\n")
        sys.stdout.flush()

    if args.images_dir:
        save_images(records, args.images_dir.resolve())

    summary = summarize(records)
    logger.info(
        "Finished in %.2fs: %d artworks (%d with images, %d with extensions)",
        total_elapsed,
        summary.total,
        summary.with_images,
        summary.with_extensions,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
