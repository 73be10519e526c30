from __future__ import annotations

import json
import logging
from typing import Any

import mcp.types as types

from websight.adapters.browser.scripts import COMPUTED_STYLES_SCRIPT
from websight.adapters.browser.session import BrowserSession
from websight.core.content import ToolResult
from websight.core.errors import ElementNotFoundError
from websight.tools.arg_utils import int_with_default, optional_bool, require_non_empty_str
from websight.tools.base import ToolBinding
from websight.tools.schema_utils import boolean_field, integer_field, string_field, strict_object

DEFAULT_MAX_ELEMENTS = 10

STYLE_CATEGORIES: dict[str, tuple[str, ...]] = {
    "layout": (
        "display",
        "position",
        "float",
        "clear",
        "overflow",
        "overflow-x",
        "overflow-y",
        "width",
        "height",
        "min-width",
        "min-height",
        "max-width",
        "max-height",
        "flex",
        "flex-direction",
        "flex-wrap",
        "justify-content",
        "align-items",
        "align-content",
        "grid-template-columns",
        "grid-template-rows",
        "gap",
        "grid-gap",
    ),
    "typography": (
        "font-family",
        "font-size",
        "font-weight",
        "font-style",
        "line-height",
        "text-align",
        "text-decoration",
        "text-transform",
        "letter-spacing",
        "word-spacing",
        "white-space",
        "text-overflow",
        "word-break",
        "text-shadow",
    ),
    "colors": (
        "color",
        "background-color",
        "background-image",
        "background",
        "border-color",
        "outline-color",
        "text-decoration-color",
    ),
    "spacing": (
        "margin",
        "margin-top",
        "margin-right",
        "margin-bottom",
        "margin-left",
        "padding",
        "padding-top",
        "padding-right",
        "padding-bottom",
        "padding-left",
    ),
    "borders": (
        "border",
        "border-width",
        "border-style",
        "border-color",
        "border-top",
        "border-right",
        "border-bottom",
        "border-left",
        "border-radius",
        "outline",
        "outline-width",
        "outline-style",
    ),
    "effects": (
        "opacity",
        "visibility",
        "box-shadow",
        "transform",
        "transition",
        "animation",
        "filter",
        "backdrop-filter",
        "z-index",
    ),
    "positioning": ("top", "right", "bottom", "left", "z-index"),
}


def style_properties(categories: list[str]) -> list[str]:
    """CSS properties for ``categories`` in table order, without duplicates.

    An empty list selects every category.
    """
    unknown = [name for name in categories if name not in STYLE_CATEGORIES]
    if unknown:
        raise ValueError(
            f"unknown style categories: {', '.join(unknown)}. Valid: {', '.join(STYLE_CATEGORIES)}"
        )
    selected = categories or list(STYLE_CATEGORIES)
    properties: list[str] = []
    for name in selected:
        for prop in STYLE_CATEGORIES[name]:
            if prop not in properties:
                properties.append(prop)
    return properties


def element_label(element: dict[str, Any]) -> str:
    label = str(element.get("tag") or "")
    if element.get("id"):
        label += f"#{element['id']}"
    class_names = str(element.get("className") or "").split()
    if class_names:
        label += "." + ".".join(class_names)
    return label


class ComputedStylesTool:
    def __init__(self, session: BrowserSession) -> None:
        self._session = session
        self._logger = logging.getLogger("websight.tools.computed_styles")

    def bindings(self) -> list[ToolBinding]:
        return [ToolBinding(tool=self._schema(), handler=self._handle)]

    async def _handle(self, payload: dict[str, Any]) -> ToolResult:
        selector = require_non_empty_str(payload, "selector")
        include_all = optional_bool(payload.get("include_all"), default=False, error_message="include_all must be boolean")
        include_inherited = optional_bool(
            payload.get("include_inherited"),
            default=False,
            error_message="include_inherited must be boolean",
        )
        max_elements = int_with_default(
            payload.get("max_elements"),
            default=DEFAULT_MAX_ELEMENTS,
            field="max_elements",
            min_value=1,
        )
        categories = payload.get("categories") or []
        if not isinstance(categories, list) or not all(isinstance(item, str) for item in categories):
            raise ValueError("categories must be a list of strings")
        properties = None if include_all else style_properties([item.strip().lower() for item in categories])
        page = await self._session.get_page()

        raw = await page.evaluate(
            COMPUTED_STYLES_SCRIPT,
            {
                "selector": selector,
                "properties": properties,
                "includeInherited": include_inherited,
                "maxElements": max_elements,
            },
        )
        found = int(raw.get("found") or 0)
        if found == 0:
            raise ElementNotFoundError(f"No elements found matching selector: {selector}", query=selector)

        elements = []
        for element in raw.get("elements") or []:
            entry: dict[str, Any] = {"selector": element_label(element), "tagName": element.get("tag")}
            if element.get("id"):
                entry["id"] = element["id"]
            if element.get("className"):
                entry["className"] = element["className"]
            if element.get("text"):
                entry["text"] = element["text"]
            entry["styles"] = element.get("styles") or []
            entry["boundingBox"] = element.get("boundingBox")
            elements.append(entry)
        report = {
            "elementsFound": found,
            "elementsProcessed": int(raw.get("processed") or 0),
            "elements": elements,
        }
        self._logger.info(
            "computed styles extracted",
            extra={"selector": selector, "found": found, "processed": report["elementsProcessed"]},
        )
        return ToolResult.text(json.dumps(report, indent=2))

    def _schema(self) -> types.Tool:
        return types.Tool(
            name="get_computed_styles",
            description=(
                "Extract computed CSS styles and bounding boxes of the elements matching a selector, to "
                "understand visual appearance, debug styling issues or replicate a design."
            ),
            inputSchema=strict_object(
                properties={
                    "selector": string_field('CSS selector of the element(s). Use "body" for the page body.'),
                    "include_all": boolean_field(
                        "Include every computed CSS property instead of the commonly used ones.",
                        default=False,
                    ),
                    "categories": {
                        "type": "array",
                        "items": string_field(enum=list(STYLE_CATEGORIES)),
                        "description": "Style categories to include. All categories when omitted.",
                    },
                    "include_inherited": boolean_field(
                        "Include values identical to the parent element's.",
                        default=False,
                    ),
                    "max_elements": integer_field(
                        minimum=1,
                        default=DEFAULT_MAX_ELEMENTS,
                        description=f"Maximum number of elements to process (default: {DEFAULT_MAX_ELEMENTS}).",
                    ),
                },
                required=["selector"],
            ),
        )
