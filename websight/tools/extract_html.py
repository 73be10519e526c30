from __future__ import annotations

from typing import Any

import mcp.types as types

from websight.adapters.browser.scripts import EXTRACT_HTML_SCRIPT
from websight.adapters.browser.session import BrowserSession
from websight.app.interaction import ElementInteractor
from websight.core.content import ToolResult
from websight.tools.arg_utils import int_with_default, optional_bool, optional_str
from websight.tools.base import ToolBinding
from websight.tools.schema_utils import boolean_field, occurrence_field, string_field, strict_object

DEFAULT_SELECTOR = "body"


class ExtractHTMLTool:
    def __init__(self, session: BrowserSession, interactor: ElementInteractor) -> None:
        self._session = session
        self._interactor = interactor

    def bindings(self) -> list[ToolBinding]:
        return [ToolBinding(tool=self._schema(), handler=self._handle)]

    async def _handle(self, payload: dict[str, Any]) -> ToolResult:
        selector = optional_str(payload.get("selector"), error_message="selector must be a string") or DEFAULT_SELECTOR
        clean = optional_bool(payload.get("clean"), default=True, error_message="clean must be boolean")
        viewport = optional_bool(payload.get("viewport"), default=False, error_message="viewport must be boolean")
        text = payload.get("text")
        if text is not None and (not isinstance(text, str) or not text.strip()):
            raise ValueError("text must be a non-empty string")
        page = await self._session.get_page()

        if text is not None:
            occurrence = int_with_default(payload.get("occurrence"), default=1, field="occurrence", min_value=1)
            match = await self._interactor.match_text(page, text, occurrence)
            html = await self._interactor.element_html(page, match.candidate.node, clean=clean)
            info = [
                f'Text: "{text}"',
                f"Occurrence: {occurrence} of {match.matches.total}",
                f"Element: <{match.candidate.node.tag.upper()}>",
                f"Clean mode: {_js_bool(clean)}",
                f"HTML length: {len(html)} characters",
            ]
            return ToolResult.text("\n".join(info) + "\n\n" + html)

        raw = await page.evaluate(EXTRACT_HTML_SCRIPT, {"selector": selector, "clean": clean, "viewport": viewport})
        html = str(raw.get("html") or "")
        info = [
            f"Selector: {selector}",
            f"Elements found: {int(raw.get('total') or 0)}",
            f"Clean mode: {_js_bool(clean)}",
            f"Viewport only: {_js_bool(viewport)}",
            f"HTML length: {len(html)} characters",
        ]
        return ToolResult.text("\n".join(info) + "\n\n" + html)

    def _schema(self) -> types.Tool:
        return types.Tool(
            name="extract_html",
            description=(
                "Extract HTML from the page or from specific elements. With text, returns the element that "
                "contains that text instead of using the selector."
            ),
            inputSchema=strict_object(
                properties={
                    "selector": string_field(f"CSS selector (default: {DEFAULT_SELECTOR})."),
                    "clean": boolean_field("Remove scripts, styles and hidden elements.", default=True),
                    "viewport": boolean_field("Only extract elements visible in the viewport.", default=False),
                    "text": string_field("Extract the element containing this text."),
                    "occurrence": occurrence_field(),
                },
                required=[],
            ),
        )


def _js_bool(value: bool) -> str:
    return "true" if value else "false"
