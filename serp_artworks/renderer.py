"""Turn a saved results page into final HTML, optionally via a real browser."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import (
    BrowserType,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import BrowserKind, ExtractorConfig

logger = logging.getLogger("serp_artworks.renderer")

READY_STATE_SCRIPT = "document.readyState === 'complete'"
NAVIGATION_TIMEOUT_SECONDS = 30.0


def resolve_source(path: Path) -> Path:
    """Absolute path of an existing input file."""
    source = Path(path).expanduser().resolve()
    if not source.is_file():
        raise FileNotFoundError(f"HTML file does not exist: {source}")
    return source


def read_static(path: Path) -> str:
    """Read the page as saved, without executing any script."""
    return resolve_source(path).read_text(encoding="utf-8", errors="replace")


def browser_type(playwright: Playwright, kind: BrowserKind) -> BrowserType:
    return getattr(playwright, BrowserKind(kind).value)


async def _wait_until_ready(page, config: ExtractorConfig) -> None:
    timeout_ms = config.wait_timeout * 1000
    try:
        await page.wait_for_function(READY_STATE_SCRIPT, timeout=timeout_ms)
        if config.ready_selector:
            await page.wait_for_selector(
                config.ready_selector, state="attached", timeout=timeout_ms
            )
    except PlaywrightTimeoutError:
        logger.warning(
            "Page not ready after %.1fs (waiting for %s); extracting anyway",
            config.wait_timeout,
            config.ready_selector or "document ready state",
        )


async def render_page(
    playwright: Playwright,
    path: Path,
    config: ExtractorConfig,
) -> str:
    """Open a local file in a browser and return the HTML of the settled DOM."""
    source = resolve_source(path)
    launcher = browser_type(playwright, config.browser)
    browser = await launcher.launch(headless=config.headless)
    try:
        page = await browser.new_page()
        page.set_default_navigation_timeout(NAVIGATION_TIMEOUT_SECONDS * 1000)
        logger.info("Rendering %s with %s", source, BrowserKind(config.browser).value)
        await page.goto(source.as_uri(), wait_until="load")
        await _wait_until_ready(page, config)
        if config.screenshot_path:
            await page.screenshot(path=str(config.screenshot_path), full_page=True)
            logger.info("Saved screenshot to %s", config.screenshot_path)
        html = await page.content()
    finally:
        await browser.close()
    return html


async def load_document(path: Path, config: Optional[ExtractorConfig] = None) -> str:
    """Return final HTML for ``path``; rendering failures propagate to the caller."""
    config = config or ExtractorConfig()
    if not config.render:
        logger.info("Reading %s without rendering", path)
        return read_static(path)
    async with async_playwright() as playwright:
        return await render_page(playwright, path, config)
