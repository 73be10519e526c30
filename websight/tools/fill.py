from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

import mcp.types as types

from websight.adapters.browser.scripts import FILL_FIELDS_SCRIPT
from websight.adapters.browser.session import BrowserSession
from websight.core.content import ToolResult
from websight.core.errors import ElementNotFoundError, PageScriptError
from websight.tools.arg_utils import int_with_default, optional_bool, require_non_empty_str, require_str
from websight.tools.base import ToolBinding
from websight.tools.schema_utils import boolean_field, string_field, strict_object, wait_after_field


@dataclass(frozen=True)
class FieldSpec:
    selector: str
    value: str
    use_label: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {"selector": self.selector, "value": self.value, "useLabel": self.use_label}


@dataclass(frozen=True)
class FillReport:
    selector: str
    filled: bool
    tag_name: str = ""
    input_type: str = ""
    element_id: str = ""
    name: str = ""
    reason: str | None = None
    error: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> FillReport:
        return cls(
            selector=str(payload.get("selector") or ""),
            filled=bool(payload.get("filled")),
            tag_name=str(payload.get("tagName") or "").upper(),
            input_type=str(payload.get("type") or ""),
            element_id=str(payload.get("id") or ""),
            name=str(payload.get("name") or ""),
            reason=payload.get("reason"),
            error=payload.get("error"),
        )

    def render_element(self) -> str:
        rendered = f'<{self.tag_name} type="{self.input_type}"'
        if self.element_id:
            rendered += f' id="{self.element_id}"'
        if self.name:
            rendered += f' name="{self.name}"'
        return rendered + ">"

    def failure_text(self) -> str:
        if self.reason == "not_found":
            return "Input not found"
        if self.reason == "option_not_found":
            return "No matching option in select"
        return f"Error filling field: {self.error}"


class FillTool:
    def __init__(self, session: BrowserSession, wait_after_ms: int) -> None:
        self._session = session
        self._wait_after_ms = wait_after_ms
        self._logger = logging.getLogger("websight.tools.fill")

    def bindings(self) -> list[ToolBinding]:
        return [
            ToolBinding(tool=self._text_schema(), handler=self._handle_text),
            ToolBinding(tool=self._selector_schema(), handler=self._handle_selector),
            ToolBinding(tool=self._form_schema(), handler=self._handle_form),
        ]

    async def _handle_text(self, payload: dict[str, Any]) -> ToolResult:
        label_text = require_non_empty_str(payload, "label_text")
        value = require_str(payload, "value")
        report = await self._fill_one(FieldSpec(selector=label_text, value=value, use_label=True), payload)
        if not report.filled:
            if report.reason == "not_found":
                raise ElementNotFoundError(f'No input found for label: "{label_text}"', query=label_text)
            raise PageScriptError(report.failure_text())
        return ToolResult.text(
            f'Filled input for label "{label_text}" with value: "{value}"\nElement: {report.render_element()}'
        )

    async def _handle_selector(self, payload: dict[str, Any]) -> ToolResult:
        selector = require_non_empty_str(payload, "selector")
        value = require_str(payload, "value")
        report = await self._fill_one(FieldSpec(selector=selector, value=value), payload)
        if not report.filled:
            if report.reason == "not_found":
                raise ElementNotFoundError(f'No input found matching selector: "{selector}"', query=selector)
            raise PageScriptError(report.failure_text())
        return ToolResult.text(
            f'Filled input matching selector "{selector}" with value: "{value}"\nElement: {report.render_element()}'
        )

    async def _handle_form(self, payload: dict[str, Any]) -> ToolResult:
        fields = _coerce_fields(payload.get("fields"))
        reports = await self._fill(fields, payload)
        filled = [report for report in reports if report.filled]
        failed = [report for report in reports if not report.filled]

        text = f"Filled {len(filled)} out of {len(reports)} fields"
        if filled:
            text += "\n\nSuccess:"
            for report in filled:
                text += f"\n- {report.selector}: {report.render_element()}"
        if failed:
            text += "\n\nFailed:"
            for report in failed:
                text += f"\n- {report.selector}: {report.failure_text()}"
        return ToolResult.text(text)

    async def _fill_one(self, field: FieldSpec, payload: dict[str, Any]) -> FillReport:
        reports = await self._fill([field], payload)
        return reports[0]

    async def _fill(self, fields: list[FieldSpec], payload: dict[str, Any]) -> list[FillReport]:
        wait_after = int_with_default(
            payload.get("wait_after"),
            default=self._wait_after_ms,
            field="wait_after",
            min_value=0,
        )
        page = await self._session.get_page()
        raw = await page.evaluate(FILL_FIELDS_SCRIPT, {"fields": [field.to_payload() for field in fields]})
        reports = [FillReport.from_payload(item) for item in raw or []]
        if len(reports) != len(fields):
            raise PageScriptError("fill script returned an unexpected result")
        await page.wait_for_timeout(wait_after)
        self._logger.info(
            "fields filled",
            extra={"requested": len(fields), "filled": sum(1 for report in reports if report.filled)},
        )
        return reports

    def _text_schema(self) -> types.Tool:
        return types.Tool(
            name="fill_text",
            description=(
                "Fill a form input found by its label text, placeholder, aria-label or name (case-insensitive)."
            ),
            inputSchema=strict_object(
                properties={
                    "label_text": string_field("Label text used to find the input."),
                    "value": string_field("Value to fill in the input."),
                    "wait_after": wait_after_field(self._wait_after_ms, "filling"),
                },
                required=["label_text", "value"],
            ),
        )

    def _selector_schema(self) -> types.Tool:
        return types.Tool(
            name="fill_selector",
            description="Fill a form input found by CSS selector.",
            inputSchema=strict_object(
                properties={
                    "selector": string_field("CSS selector of the input to fill."),
                    "value": string_field("Value to fill in the input."),
                    "wait_after": wait_after_field(self._wait_after_ms, "filling"),
                },
                required=["selector", "value"],
            ),
        )

    def _form_schema(self) -> types.Tool:
        return types.Tool(
            name="fill_form",
            description=(
                "Fill several form fields at once. Selects take an option value or text; checkboxes and radios "
                "take true/false or 1/0."
            ),
            inputSchema=strict_object(
                properties={
                    "fields": {
                        "type": "array",
                        "description": "Fields to fill.",
                        "items": strict_object(
                            properties={
                                "selector": string_field("CSS selector, or label text when use_label is true."),
                                "value": string_field("Value to fill."),
                                "use_label": boolean_field(
                                    "Treat selector as label text instead of a CSS selector.",
                                    default=False,
                                ),
                            },
                            required=["selector", "value"],
                        ),
                        "minItems": 1,
                    },
                    "wait_after": wait_after_field(self._wait_after_ms, "filling all fields"),
                },
                required=["fields"],
            ),
        )


def _coerce_fields(value: Any) -> list[FieldSpec]:
    if not isinstance(value, list) or not value:
        raise ValueError("fields must be a non-empty array")
    fields: list[FieldSpec] = []
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise ValueError(f"fields[{index}] must be an object")
        fields.append(
            FieldSpec(
                selector=require_non_empty_str(item, "selector"),
                value=require_str(item, "value"),
                use_label=optional_bool(
                    item.get("use_label"),
                    default=False,
                    error_message=f"fields[{index}].use_label must be boolean",
                ),
            )
        )
    return fields
