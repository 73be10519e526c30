from __future__ import annotations

import json
from typing import Any

import mcp.types as types

from websight.adapters.browser.scripts import EXECUTE_JAVASCRIPT_SCRIPT
from websight.adapters.browser.session import BrowserSession
from websight.core.content import ToolResult
from websight.core.errors import PageScriptError
from websight.tools.arg_utils import require_non_empty_str
from websight.tools.base import ToolBinding
from websight.tools.schema_utils import single_required_field_object, string_field


class ExecuteJavaScriptTool:
    def __init__(self, session: BrowserSession) -> None:
        self._session = session

    def bindings(self) -> list[ToolBinding]:
        return [ToolBinding(tool=self._schema(), handler=self._handle)]

    async def _handle(self, payload: dict[str, Any]) -> ToolResult:
        code = require_non_empty_str(payload, "code")
        page = await self._session.get_page()
        result = await page.evaluate(EXECUTE_JAVASCRIPT_SCRIPT, code)
        if not result or not result.get("success"):
            error = (result or {}).get("error") or "unknown error"
            raise PageScriptError(f"JavaScript execution failed: {error}")
        return ToolResult.text(format_script_result(result.get("result"), result.get("type")))

    def _schema(self) -> types.Tool:
        return types.Tool(
            name="execute_javascript",
            description=(
                "Execute JavaScript on the current page and return the result. The code may be an expression "
                "(e.g. document.title) or statements ending in a return."
            ),
            inputSchema=single_required_field_object(
                "code",
                string_field("JavaScript code to execute. Can be an expression or statement(s)."),
            ),
        )


def format_script_result(value: Any, value_type: str | None) -> str:
    if value is None:
        # undefined and null both arrive as None
        return "Result: undefined" if value_type == "undefined" else "Result: null"
    if isinstance(value, (dict, list)):
        try:
            return f"Result ({value_type}):\n{json.dumps(value, indent=2)}"
        except (TypeError, ValueError):
            return f"Result ({value_type}): [object - cannot stringify]"
    if isinstance(value, bool):
        return f"Result ({value_type}): {'true' if value else 'false'}"
    if isinstance(value, float) and value.is_integer():
        return f"Result ({value_type}): {int(value)}"
    return f"Result ({value_type}): {value}"
