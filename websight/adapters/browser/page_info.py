from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from websight.adapters.browser.scripts import PAGE_DIMENSIONS_SCRIPT, PAGE_METADATA_SCRIPT, PAGE_TEXT_SCRIPT


@dataclass(frozen=True)
class PageDimensions:
    width: int
    height: int
    viewport_width: int
    viewport_height: int


@dataclass(frozen=True)
class PageMetadata:
    title: str
    url: str
    dimensions: PageDimensions
    meta: dict[str, str | None] = field(default_factory=dict)


async def get_page_dimensions(page: Any) -> PageDimensions:
    raw = await page.evaluate(PAGE_DIMENSIONS_SCRIPT)
    return PageDimensions(
        width=int(raw.get("width") or 0),
        height=int(raw.get("height") or 0),
        viewport_width=int(raw.get("viewportWidth") or 0),
        viewport_height=int(raw.get("viewportHeight") or 0),
    )


async def get_page_metadata(page: Any) -> PageMetadata:
    raw = await page.evaluate(PAGE_METADATA_SCRIPT)
    dims = raw.get("dimensions") or {}
    meta = raw.get("meta") or {}
    return PageMetadata(
        title=str(raw.get("title") or ""),
        url=str(raw.get("url") or ""),
        dimensions=PageDimensions(
            width=int(dims.get("scrollWidth") or 0),
            height=int(dims.get("scrollHeight") or 0),
            viewport_width=int(dims.get("viewportWidth") or 0),
            viewport_height=int(dims.get("viewportHeight") or 0),
        ),
        meta={key: meta.get(key) or None for key in ("description", "keywords", "author", "viewport")},
    )


async def extract_page_text(page: Any, max_length: int = 0) -> str:
    """Visible text of the body, whitespace-collapsed; ``max_length`` 0 means no limit."""
    text = str(await page.evaluate(PAGE_TEXT_SCRIPT) or "")
    if max_length > 0 and len(text) > max_length:
        return text[:max_length] + "..."
    return text
