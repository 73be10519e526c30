from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import Any

import mcp.types as types

from websight.adapters.browser.scripts import GET_ELEMENTS_SCRIPT
from websight.adapters.browser.session import BrowserSession
from websight.core.content import ToolResult
from websight.tools.arg_utils import enum_by_value, int_with_default
from websight.tools.base import ToolBinding
from websight.tools.schema_utils import integer_field, string_field, strict_object

ELEMENTS_PER_PAGE = 20
_LABEL_TRUNCATE_LENGTH = 50


class ElementType(str, Enum):
    ALL = "all"
    BUTTONS = "buttons"
    LINKS = "links"
    INPUTS = "inputs"
    CLICKABLE = "clickable"


class SearchScope(str, Enum):
    VIEWPORT = "viewport"
    ALL = "all"


ELEMENT_SELECTORS: dict[ElementType, str] = {
    ElementType.BUTTONS: (
        'button, input[type="button"], input[type="submit"], input[type="reset"], [role="button"]'
    ),
    ElementType.LINKS: 'a[href], [role="link"]',
    ElementType.INPUTS: 'input, textarea, select, [contenteditable="true"]',
    ElementType.CLICKABLE: (
        'button, a[href], input[type="button"], input[type="submit"], input[type="reset"], '
        '[role="button"], [role="link"], [onclick], [tabindex]:not([tabindex="-1"])'
    ),
    ElementType.ALL: "*",
}


@dataclass(frozen=True)
class ListedElement:
    tag_name: str
    input_type: str | None
    text: str
    aria_label: str | None
    value: str | None
    placeholder: str | None
    element_id: str | None
    class_name: str | None
    x: int
    y: int

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ListedElement:
        return cls(
            tag_name=str(payload.get("tagName") or ""),
            input_type=payload.get("type"),
            text=str(payload.get("text") or ""),
            aria_label=payload.get("ariaLabel"),
            value=payload.get("value"),
            placeholder=payload.get("placeholder"),
            element_id=payload.get("id"),
            class_name=payload.get("className"),
            x=int(payload.get("x") or 0),
            y=int(payload.get("y") or 0),
        )

    def label(self) -> str:
        label = ""
        if self.text.strip():
            suffix = "..." if len(self.text) >= _LABEL_TRUNCATE_LENGTH else ""
            label = f'"{self.text}{suffix}"'
        elif self.aria_label:
            label = f'"{self.aria_label}"'
        elif self.value:
            label = f'"{self.value}"'
        elif self.placeholder:
            label = f'"{self.placeholder}"'
        elif self.element_id:
            label = f"#{self.element_id}"
        elif self.class_name and self.class_name.strip():
            label = f".{self.class_name.split()[0]}"
        if self.tag_name == "input" and self.input_type:
            label += f" [{self.input_type}]"
        return label

    def render(self, index: int) -> str:
        return f"[{index}] <{self.tag_name}> {self.label()} ({self.x},{self.y})"


class GetElementsTool:
    def __init__(self, session: BrowserSession) -> None:
        self._session = session

    def bindings(self) -> list[ToolBinding]:
        return [ToolBinding(tool=self._schema(), handler=self._handle)]

    async def _handle(self, payload: dict[str, Any]) -> ToolResult:
        element_type = enum_by_value(
            payload.get("type"),
            enum_type=ElementType,
            field="type",
            default=ElementType.CLICKABLE,
        )
        scope = enum_by_value(payload.get("scope"), enum_type=SearchScope, field="scope", default=SearchScope.VIEWPORT)
        page_number = int_with_default(payload.get("page"), default=1, field="page", min_value=1)
        page = await self._session.get_page()

        raw = await page.evaluate(
            GET_ELEMENTS_SCRIPT,
            {
                "selector": ELEMENT_SELECTORS[element_type],
                "scope": scope.value,
                "textLimit": _LABEL_TRUNCATE_LENGTH,
            },
        )
        elements = [ListedElement.from_payload(item) for item in raw or []]
        return ToolResult.text(render_element_page(elements, element_type, scope, page_number))

    def _schema(self) -> types.Tool:
        return types.Tool(
            name="get_elements",
            description="List interactive elements with their centre coordinates, 20 per page.",
            inputSchema=strict_object(
                properties={
                    "type": string_field(
                        "Type of elements to find (default: clickable).",
                        enum=[item.value for item in ElementType],
                    ),
                    "scope": string_field(
                        "Search the viewport only or the entire page (default: viewport).",
                        enum=[item.value for item in SearchScope],
                    ),
                    "page": integer_field(
                        minimum=1,
                        default=1,
                        description=f"Page number for pagination ({ELEMENTS_PER_PAGE} elements per page).",
                    ),
                },
                required=[],
            ),
        )


def render_element_page(
    elements: list[ListedElement],
    element_type: ElementType,
    scope: SearchScope,
    page_number: int,
) -> str:
    total_pages = math.ceil(len(elements) / ELEMENTS_PER_PAGE)
    start = (page_number - 1) * ELEMENTS_PER_PAGE
    visible = elements[start : start + ELEMENTS_PER_PAGE]

    text = f"Found {len(elements)} {element_type.value} elements"
    if scope is SearchScope.VIEWPORT:
        text += " in viewport"
    if len(elements) > ELEMENTS_PER_PAGE:
        text += f" (showing page {page_number}/{total_pages})"
    text += ":\n\n"

    if not visible:
        if not elements:
            text += "No elements found."
        else:
            text += f"No elements on page {page_number}. Total pages: {total_pages}"
    else:
        text += "\n".join(element.render(start + offset) for offset, element in enumerate(visible))

    if page_number < total_pages:
        text += f"\n\nUse page: {page_number + 1} to see more elements."
    return text
