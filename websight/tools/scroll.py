from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from websight.adapters.browser.scripts import SCROLL_BY_SCRIPT, SCROLL_POSITION_SCRIPT, SCROLL_TO_SCRIPT
from websight.adapters.browser.session import BrowserSession
from websight.app.interaction import ElementInteractor
from websight.core.content import ToolResult
from websight.shared.utils import format_number, format_scroll_percentage
from websight.tools.arg_utils import int_with_default, optional_bool, require_number, require_text
from websight.tools.base import ToolBinding
from websight.tools.schema_utils import (
    boolean_field,
    integer_field,
    number_field,
    occurrence_field,
    string_field,
    strict_object,
)

SMOOTH_SCROLL_WAIT_MS = 500
INSTANT_SCROLL_WAIT_MS = 100
DEFAULT_SCROLL_AMOUNT = 500
_DIRECTIONS = ("up", "down", "top", "bottom")


class ScrollTool:
    def __init__(self, session: BrowserSession, interactor: ElementInteractor) -> None:
        self._session = session
        self._interactor = interactor
        self._logger = logging.getLogger("websight.tools.scroll")

    def bindings(self) -> list[ToolBinding]:
        return [
            ToolBinding(tool=self._position_schema(), handler=self._handle_position),
            ToolBinding(tool=self._direction_schema(), handler=self._handle_direction),
            ToolBinding(tool=self._text_schema(), handler=self._handle_text),
        ]

    async def _handle_position(self, payload: dict[str, Any]) -> ToolResult:
        y = require_number(payload.get("y"), field="y")
        smooth = _coerce_smooth(payload)
        page = await self._session.get_page()
        await page.evaluate(SCROLL_TO_SCRIPT, {"top": y, "smooth": smooth})
        position = await self._settle(page, smooth)
        return ToolResult.text(f"Scrolled to Y position: {format_number(y)}\nCurrent position: {position}")

    async def _handle_direction(self, payload: dict[str, Any]) -> ToolResult:
        direction = payload.get("direction")
        if not isinstance(direction, str) or direction.strip().lower() not in _DIRECTIONS:
            raise ValueError(f"direction must be one of {', '.join(_DIRECTIONS)}")
        direction = direction.strip().lower()
        amount = int_with_default(payload.get("amount"), default=DEFAULT_SCROLL_AMOUNT, field="amount", min_value=0)
        smooth = _coerce_smooth(payload)
        page = await self._session.get_page()

        if direction == "up":
            await page.evaluate(SCROLL_BY_SCRIPT, {"top": -amount, "smooth": smooth})
            summary = f"Scrolled up {amount}px"
        elif direction == "down":
            await page.evaluate(SCROLL_BY_SCRIPT, {"top": amount, "smooth": smooth})
            summary = f"Scrolled down {amount}px"
        elif direction == "top":
            await page.evaluate(SCROLL_TO_SCRIPT, {"top": 0, "smooth": smooth})
            summary = "Scrolled to top of page"
        else:
            await page.evaluate(SCROLL_TO_SCRIPT, {"top": None, "smooth": smooth})
            summary = "Scrolled to bottom of page"

        position = await self._settle(page, smooth)
        return ToolResult.text(f"{summary}\nCurrent position: {position}")

    async def _handle_text(self, payload: dict[str, Any]) -> ToolResult:
        text = require_text(payload, "text")
        occurrence = int_with_default(payload.get("occurrence"), default=1, field="occurrence", min_value=1)
        smooth = _coerce_smooth(payload)
        page = await self._session.get_page()

        match = await self._interactor.match_text(page, text, occurrence)
        descriptor = await self._interactor.scroll_into_view(page, match.candidate.node, smooth=smooth)
        position = await self._settle(page, smooth)
        return ToolResult.text(
            f'Scrolled to element containing: "{text}" '
            f"(occurrence {occurrence} of {match.matches.total})\n"
            f"Element: {descriptor.render_tag()}\n"
            f"Current position: {position}"
        )

    async def _settle(self, page: Any, smooth: bool) -> str:
        await page.wait_for_timeout(SMOOTH_SCROLL_WAIT_MS if smooth else INSTANT_SCROLL_WAIT_MS)
        raw = await page.evaluate(SCROLL_POSITION_SCRIPT)
        self._logger.debug("scroll settled", extra={"y": raw.get("y"), "height": raw.get("height")})
        return format_scroll_percentage(
            float(raw.get("y") or 0),
            float(raw.get("height") or 0),
            float(raw.get("viewportHeight") or 0),
        )

    def _position_schema(self) -> types.Tool:
        return types.Tool(
            name="scroll_to_position",
            description="Scroll to a specific Y coordinate on the page.",
            inputSchema=strict_object(
                properties={
                    "y": number_field("Y coordinate to scroll to."),
                    "smooth": _smooth_field(),
                },
                required=["y"],
            ),
        )

    def _direction_schema(self) -> types.Tool:
        return types.Tool(
            name="scroll_direction",
            description="Scroll up or down by an amount, or jump to the top or bottom of the page.",
            inputSchema=strict_object(
                properties={
                    "direction": string_field("Direction to scroll.", enum=list(_DIRECTIONS)),
                    "amount": integer_field(
                        minimum=0,
                        default=DEFAULT_SCROLL_AMOUNT,
                        description="Pixels to scroll for up/down.",
                    ),
                    "smooth": _smooth_field(),
                },
                required=["direction"],
            ),
        )

    def _text_schema(self) -> types.Tool:
        return types.Tool(
            name="scroll_to_text",
            description="Scroll until the element containing the given text is centred in the viewport.",
            inputSchema=strict_object(
                properties={
                    "text": string_field("Text to search for on the page."),
                    "occurrence": occurrence_field(),
                    "smooth": _smooth_field(),
                },
                required=["text"],
            ),
        )


def _coerce_smooth(payload: dict[str, Any]) -> bool:
    return optional_bool(payload.get("smooth"), default=True, error_message="smooth must be boolean")


def _smooth_field() -> dict[str, Any]:
    return boolean_field("Use smooth scrolling.", default=True)
