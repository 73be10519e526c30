from __future__ import annotations

import logging

import pytest

from browser_fakes import FakeSession
from websight.adapters.config.schema import InteractionConfig, Settings, ToolsConfig
from websight.app.interaction import ElementInteractor
from websight.tools.factory import build_enabled_tools

_ALL_TOOLS = [
    "navigate",
    "screenshot",
    "page_overview",
    "scroll_to_position",
    "scroll_direction",
    "scroll_to_text",
    "click_text",
    "click_selector",
    "click_position",
    "hover_text",
    "hover_selector",
    "hover_position",
    "fill_text",
    "fill_selector",
    "fill_form",
    "extract_html",
    "execute_javascript",
    "get_elements",
    "get_computed_styles",
]


def _build(settings: Settings) -> list:
    return build_enabled_tools(settings, FakeSession(), ElementInteractor(settings.interaction))  # type: ignore[arg-type]


def test_build_enabled_tools_registers_every_tool() -> None:
    tools = _build(Settings())

    assert [binding.name for binding in tools] == _ALL_TOOLS
    for binding in tools:
        schema = binding.tool.inputSchema
        assert schema["type"] == "object"
        assert schema["additionalProperties"] is False
        assert set(schema["required"]) <= set(schema["properties"])
        assert binding.tool.description


def test_wait_after_defaults_come_from_interaction_config() -> None:
    settings = Settings(interaction=InteractionConfig(wait_after_click_ms=250, wait_after_fill_ms=75))
    tools = {binding.name: binding for binding in _build(settings)}

    assert tools["click_text"].tool.inputSchema["properties"]["wait_after"]["default"] == 250
    assert tools["hover_text"].tool.inputSchema["properties"]["wait_after"]["default"] == 1000
    assert tools["fill_form"].tool.inputSchema["properties"]["wait_after"]["default"] == 75


def test_disabled_tools_are_skipped(caplog: pytest.LogCaptureFixture) -> None:
    settings = Settings(tools=ToolsConfig(disabled_tools=["execute_javascript", " fill_form ", "teleport"]))

    with caplog.at_level(logging.WARNING, logger="websight.tools.factory"):
        names = [binding.name for binding in _build(settings)]

    assert "execute_javascript" not in names
    assert "fill_form" not in names
    assert len(names) == len(_ALL_TOOLS) - 2
    assert any(record.message == "ignoring unknown disabled tools" for record in caplog.records)
