from __future__ import annotations

import base64
import logging
from typing import Any

import mcp.types as types

from websight.adapters.browser.page_info import extract_page_text, get_page_dimensions, get_page_metadata
from websight.adapters.browser.session import BrowserSession
from websight.adapters.config.schema import ScreenshotConfig
from websight.adapters.images.processing import ProcessedImage, process_screenshot
from websight.core.content import ContentPart, ToolResult
from websight.core.errors import NoPageLoadedError, WebsightError
from websight.tools.arg_utils import int_with_default, optional_bool, optional_str
from websight.tools.base import ToolBinding
from websight.tools.schema_utils import boolean_field, integer_field, provider_field, strict_object

_DEFAULT_MAX_TEXT_LENGTH = 10000


class ScreenshotTool:
    """Screenshot and page overview tools; both return a PNG sized for the requested provider."""

    def __init__(self, session: BrowserSession, config: ScreenshotConfig) -> None:
        self._session = session
        self._config = config
        self._logger = logging.getLogger("websight.tools.screenshot")

    def bindings(self) -> list[ToolBinding]:
        return [
            ToolBinding(tool=self._screenshot_schema(), handler=self._handle_screenshot),
            ToolBinding(tool=self._overview_schema(), handler=self._handle_overview),
        ]

    async def _handle_screenshot(self, payload: dict[str, Any]) -> ToolResult:
        full_page = optional_bool(payload.get("full_page"), default=False, error_message="full_page must be boolean")
        provider = self._coerce_provider(payload.get("provider"))
        page = await self._require_page()

        dimensions = await get_page_dimensions(page)
        self._logger.debug(
            "page dimensions",
            extra={
                "width": dimensions.width,
                "height": dimensions.height,
                "viewport_width": dimensions.viewport_width,
                "viewport_height": dimensions.viewport_height,
            },
        )
        processed = await self._capture(page, full_page=full_page, provider=provider)
        text = f"Screenshot captured ({'full page' if full_page else 'viewport'})"
        if processed.was_resized:
            text += "\n" + _resize_note(processed)
        return ToolResult(content=[_image_part(processed), ContentPart.of_text(text)])

    async def _handle_overview(self, payload: dict[str, Any]) -> ToolResult:
        include_text = optional_bool(
            payload.get("include_text"),
            default=True,
            error_message="include_text must be boolean",
        )
        include_metadata = optional_bool(
            payload.get("include_metadata"),
            default=True,
            error_message="include_metadata must be boolean",
        )
        max_text_length = int_with_default(
            payload.get("max_text_length"),
            default=_DEFAULT_MAX_TEXT_LENGTH,
            field="max_text_length",
            min_value=0,
        )
        provider = self._coerce_provider(payload.get("provider"))
        page = await self._require_page()

        metadata = await get_page_metadata(page) if include_metadata else None
        processed = await self._capture(page, full_page=True, provider=provider)

        lines = ["# Page Overview", ""]
        if metadata is not None:
            lines.extend(
                [
                    "## Metadata",
                    f"- **Title:** {metadata.title or 'N/A'}",
                    f"- **URL:** {metadata.url}",
                    f"- **Page Dimensions:** {metadata.dimensions.width}x{metadata.dimensions.height}px",
                    "- **Viewport:** "
                    f"{metadata.dimensions.viewport_width}x{metadata.dimensions.viewport_height}px",
                ]
            )
            if metadata.meta.get("description"):
                lines.append(f"- **Description:** {metadata.meta['description']}")
            if metadata.meta.get("author"):
                lines.append(f"- **Author:** {metadata.meta['author']}")
            lines.append("")
        if include_text:
            lines.extend(["## Page Content (Text)", "", await extract_page_text(page, max_text_length), ""])
        lines.extend(
            [
                "## Screenshot Information",
                "- Full page screenshot captured",
                f"- Provider: {processed.provider.name} (max dimension: {processed.provider.max_image_dimension}px)",
            ]
        )
        if processed.was_resized:
            width, height = processed.original_size
            lines.append(f"- Image resized from {width}x{height} to fit API limits")
        return ToolResult(content=[_image_part(processed), ContentPart.of_text("\n".join(lines) + "\n")])

    async def _require_page(self) -> Any:
        if not self._session.has_page():
            raise NoPageLoadedError()
        return await self._session.get_page()

    async def _capture(self, page: Any, *, full_page: bool, provider: str | None) -> ProcessedImage:
        raw_bytes = await page.screenshot(full_page=full_page, type="png")
        if len(raw_bytes) > self._config.max_screenshot_bytes:
            raise WebsightError(
                "screenshot exceeds configured size limit "
                f"({len(raw_bytes)} > {self._config.max_screenshot_bytes} bytes)"
            )
        processed = process_screenshot(raw_bytes, provider)
        self._logger.info(
            "screenshot captured",
            extra={
                "full_page": full_page,
                "provider": processed.provider.name,
                "byte_size": len(processed.data),
                "resized": processed.was_resized,
            },
        )
        return processed

    def _coerce_provider(self, value: Any) -> str | None:
        provider = optional_str(value, error_message="provider must be a string")
        return provider or self._config.default_provider

    def _screenshot_schema(self) -> types.Tool:
        return types.Tool(
            name="screenshot",
            description="Take a screenshot of the current page.",
            inputSchema=strict_object(
                properties={
                    "full_page": boolean_field(
                        "Capture the full scrollable page (true) or just the viewport (false).",
                        default=False,
                    ),
                    "provider": provider_field(),
                },
                required=[],
            ),
        )

    def _overview_schema(self) -> types.Tool:
        return types.Tool(
            name="page_overview",
            description=(
                "Get an overview of the current page: a full page screenshot, metadata and the visible text."
            ),
            inputSchema=strict_object(
                properties={
                    "include_text": boolean_field("Include extracted text content from the page.", default=True),
                    "include_metadata": boolean_field(
                        "Include page metadata (title, URL, dimensions).",
                        default=True,
                    ),
                    "max_text_length": integer_field(
                        minimum=0,
                        default=_DEFAULT_MAX_TEXT_LENGTH,
                        description="Maximum length of extracted text (0 for no limit).",
                    ),
                    "provider": provider_field(),
                },
                required=[],
            ),
        )


def _image_part(processed: ProcessedImage) -> ContentPart:
    return ContentPart.of_image(base64.b64encode(processed.data).decode("ascii"))


def _resize_note(processed: ProcessedImage) -> str:
    width, height = processed.original_size
    new_width, new_height = processed.size
    return (
        f"Image resized from {width}x{height} to {new_width}x{new_height} "
        f"for {processed.provider.name} (max dimension: {processed.provider.max_image_dimension}px)"
    )
