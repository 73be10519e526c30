from __future__ import annotations

from typing import Any


def strict_object(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


def string_field(description: str | None = None, *, enum: list[str] | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "string"}
    if enum:
        schema["enum"] = enum
    if description:
        schema["description"] = description
    return schema


def integer_field(
    minimum: int | None = None,
    description: str | None = None,
    *,
    default: int | None = None,
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "integer"}
    if minimum is not None:
        schema["minimum"] = minimum
    if default is not None:
        schema["default"] = default
    if description:
        schema["description"] = description
    return schema


def number_field(description: str | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "number"}
    if description:
        schema["description"] = description
    return schema


def boolean_field(description: str | None = None, *, default: bool | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "boolean"}
    if default is not None:
        schema["default"] = default
    if description:
        schema["description"] = description
    return schema


def wait_after_field(default_ms: int, action: str) -> dict[str, Any]:
    return integer_field(
        minimum=0,
        default=default_ms,
        description=f"Milliseconds to wait after {action} (default: {default_ms}).",
    )


def occurrence_field() -> dict[str, Any]:
    return integer_field(
        minimum=1,
        default=1,
        description="Which match to use when several elements contain the text (1-based, default: 1).",
    )


def provider_field() -> dict[str, Any]:
    return string_field(
        "AI provider to size the image for (claude, gemini, openai, ...). "
        "Defaults to 2000x2000px when not specified."
    )


def single_required_field_object(field_name: str, field_schema: dict[str, Any]) -> dict[str, Any]:
    return strict_object(properties={field_name: field_schema}, required=[field_name])
