"""Configuration objects and constants for artwork extraction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

GOOGLE_ORIGIN = "https://www.google.com"
SEARCH_PATH = "/search"
STRICT_ANCHOR_PREFIX = "/search?sca_esv="
MAIN_SCOPE_SELECTOR = '[role="main"]'
DEFAULT_MIN_YEAR = 1800
DEFAULT_MAX_YEAR = 1950


class ExtractionMode(str, Enum):
    """Which extraction heuristic to run."""

    STRICT = "strict"
    LENIENT = "lenient"


class BrowserKind(str, Enum):
    """Playwright browser engines that can render a page."""

    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


@dataclass
class ExtractorConfig:
    """Top-level settings that control rendering and extraction behaviour."""

    mode: ExtractionMode = ExtractionMode.STRICT
    origin: str = GOOGLE_ORIGIN
    wait_timeout: float = 5.0
    headless: bool = True
    browser: BrowserKind = BrowserKind.CHROMIUM
    render: bool = True
    screenshot_path: Optional[Path] = None
    dedupe: bool = False
    min_year: int = DEFAULT_MIN_YEAR
    max_year: int = DEFAULT_MAX_YEAR
    scope_selector: str = MAIN_SCOPE_SELECTOR
    ready_selector: str = f'a[href^="{STRICT_ANCHOR_PREFIX}"]'
