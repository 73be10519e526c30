from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

import mcp.types as types

from websight.adapters.browser.session import BrowserSession
from websight.app.interaction import ElementInteractor
from websight.core.content import ToolResult
from websight.core.elements import InteractionKind, InteractionOutcome, InteractionTarget
from websight.shared.utils import format_number
from websight.tools.arg_utils import int_with_default, require_non_empty_str, require_number, require_text
from websight.tools.base import ToolBinding
from websight.tools.schema_utils import (
    number_field,
    occurrence_field,
    string_field,
    strict_object,
    wait_after_field,
)


@dataclass(frozen=True)
class PointerWording:
    """Tool names and result phrasing for one pointer action."""

    noun: str
    on_element: str
    at_point: str
    verb: str


class PointerActionTool:
    """The text, selector and position variants of one pointer action.

    All three share the same path: locate the element, run the strategy chain
    through :class:`ElementInteractor`, wait, then describe what was hit.
    """

    kind: InteractionKind
    wording: PointerWording

    def __init__(self, session: BrowserSession, interactor: ElementInteractor, wait_after_ms: int) -> None:
        self._session = session
        self._interactor = interactor
        self._wait_after_ms = wait_after_ms
        self._logger = logging.getLogger(f"websight.tools.{self.kind.value}")

    def bindings(self) -> list[ToolBinding]:
        return [
            ToolBinding(tool=self._text_schema(), handler=self._handle_text),
            ToolBinding(tool=self._selector_schema(), handler=self._handle_selector),
            ToolBinding(tool=self._position_schema(), handler=self._handle_position),
        ]

    async def _handle_text(self, payload: dict[str, Any]) -> ToolResult:
        text = require_text(payload, "text")
        occurrence = int_with_default(payload.get("occurrence"), default=1, field="occurrence", min_value=1)
        wait_after = self._coerce_wait_after(payload)
        page = await self._session.get_page()

        resolved = await self._interactor.resolve_text(page, text, occurrence)
        outcome = await self._interactor.interact(page, InteractionTarget.for_node(resolved.target), self.kind)
        await page.wait_for_timeout(wait_after)
        lines = [
            f'{self.wording.on_element} element containing: "{text}" (occurrence {occurrence} of {resolved.total})',
            f"Element: {outcome.descriptor.render_tag()}",
        ]
        if resolved.resolution.fallback:
            lines.append("Note: no interactive element found around the text; the matching element itself was used")
        return ToolResult.text("\n".join(lines))

    async def _handle_selector(self, payload: dict[str, Any]) -> ToolResult:
        selector = require_non_empty_str(payload, "selector")
        wait_after = self._coerce_wait_after(payload)
        page = await self._session.get_page()

        probed = await self._interactor.resolve_by_selector(page, selector, kind=self.kind)
        if probed.attempt > 1:
            self._logger.info("selector appeared after retry", extra={"selector": selector, "attempt": probed.attempt})
        outcome = await self._interactor.interact(page, InteractionTarget.for_selector(selector), self.kind)
        await page.wait_for_timeout(wait_after)
        return ToolResult.text(
            f'{self.wording.on_element} element matching selector: "{selector}"\n'
            + outcome.descriptor.render(self._interactor.text_truncate_length)
        )

    async def _handle_position(self, payload: dict[str, Any]) -> ToolResult:
        x = require_number(payload.get("x"), field="x")
        y = require_number(payload.get("y"), field="y")
        wait_after = self._coerce_wait_after(payload)
        page = await self._session.get_page()

        outcome = await self._interactor.interact(page, InteractionTarget.at_point(x, y), self.kind)
        await page.wait_for_timeout(wait_after)
        return ToolResult.text(self._describe_point(x, y, outcome))

    def _describe_point(self, x: float, y: float, outcome: InteractionOutcome) -> str:
        header = f"{self.wording.at_point} at coordinates ({format_number(x)}, {format_number(y)})"
        return header + "\n" + outcome.descriptor.render(self._interactor.text_truncate_length)

    def _coerce_wait_after(self, payload: dict[str, Any]) -> int:
        return int_with_default(payload.get("wait_after"), default=self._wait_after_ms, field="wait_after", min_value=0)

    def _text_schema(self) -> types.Tool:
        return types.Tool(
            name=f"{self.kind.value}_text",
            description=(
                f"{self.wording.verb} the element containing the given text. When the text sits inside a "
                "non-interactive element, the nearest interactive element is used."
            ),
            inputSchema=strict_object(
                properties={
                    "text": string_field(f"Text content of the element to {self.wording.noun}."),
                    "occurrence": occurrence_field(),
                    "wait_after": wait_after_field(self._wait_after_ms, self.wording.verb.lower()),
                },
                required=["text"],
            ),
        )

    def _selector_schema(self) -> types.Tool:
        return types.Tool(
            name=f"{self.kind.value}_selector",
            description=(
                f"{self.wording.verb} the element matching a CSS selector, waiting briefly for it to appear."
            ),
            inputSchema=strict_object(
                properties={
                    "selector": string_field(f"CSS selector of the element to {self.wording.noun}."),
                    "wait_after": wait_after_field(self._wait_after_ms, self.wording.verb.lower()),
                },
                required=["selector"],
            ),
        )

    def _position_schema(self) -> types.Tool:
        return types.Tool(
            name=f"{self.kind.value}_position",
            description=f"{self.wording.verb} the topmost element at viewport coordinates.",
            inputSchema=strict_object(
                properties={
                    "x": number_field("X coordinate in the viewport."),
                    "y": number_field("Y coordinate in the viewport."),
                    "wait_after": wait_after_field(self._wait_after_ms, self.wording.verb.lower()),
                },
                required=["x", "y"],
            ),
        )
