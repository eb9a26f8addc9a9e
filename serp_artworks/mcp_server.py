"""MCP server exposing artwork extraction as a tool."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import ExtractionMode, ExtractorConfig
from .extractor import extract_artworks as run_extraction, to_document

logger = logging.getLogger("serp_artworks.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="serp-artworks")


@mcp.tool()
async def extract_artworks(
    path: str,
    mode: str = ExtractionMode.STRICT.value,
    render: bool = True,
) -> str:
    """Extract artwork records from a saved Google results page as JSON.

    Set ``render`` to false to parse the file as saved, without a browser.
    """

    source = Path(path).expanduser()
    if not source.exists():
        raise FileNotFoundError(f"HTML file does not exist: {source}")

    config = ExtractorConfig(mode=ExtractionMode(mode), render=render)
    records = await run_extraction(source, config)
    return json.dumps(to_document(records), indent=2, ensure_ascii=False)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
