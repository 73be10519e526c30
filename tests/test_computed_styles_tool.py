from __future__ import annotations

import json

import pytest

from browser_fakes import FakePage, FakeSession, bindings_by_name
from websight.core.errors import ElementNotFoundError
from websight.tools.computed_styles import ComputedStylesTool, element_label, style_properties

_BUTTON = {
    "tag": "button",
    "id": "save",
    "className": "btn btn-primary",
    "text": "Save",
    "styles": [{"name": "color", "value": "rgb(255, 255, 255)"}],
    "boundingBox": {"x": 10, "y": 20, "width": 80, "height": 32},
}


def _binding(fake_page: FakePage):
    return bindings_by_name(ComputedStylesTool(FakeSession(fake_page)))["get_computed_styles"]


def test_style_properties_dedupes_across_categories() -> None:
    properties = style_properties(["effects", "positioning"])

    assert properties.count("z-index") == 1
    assert properties[:2] == ["opacity", "visibility"]
    assert properties[-4:] == ["top", "right", "bottom", "left"]


def test_style_properties_defaults_to_every_category() -> None:
    properties = style_properties([])

    assert properties[0] == "display"
    assert "font-size" in properties
    assert properties.count("border-color") == 1


def test_style_properties_rejects_unknown_category() -> None:
    with pytest.raises(ValueError, match="unknown style categories: motion"):
        style_properties(["layout", "motion"])


def test_element_label() -> None:
    assert element_label(_BUTTON) == "button#save.btn.btn-primary"
    assert element_label({"tag": "div", "id": "", "className": ""}) == "div"


@pytest.mark.asyncio
async def test_get_computed_styles_reports_elements_as_json() -> None:
    fake_page = FakePage({"computed_styles": {"found": 3, "processed": 1, "elements": [_BUTTON]}})

    result = await _binding(fake_page).handler(
        {"selector": "button", "categories": ["colors"], "max_elements": 1}
    )

    sent = fake_page.args_for("computed_styles")[0]
    assert sent["selector"] == "button"
    assert sent["properties"] == style_properties(["colors"])
    assert sent["includeInherited"] is False
    assert sent["maxElements"] == 1
    assert json.loads(result.texts[0]) == {
        "elementsFound": 3,
        "elementsProcessed": 1,
        "elements": [
            {
                "selector": "button#save.btn.btn-primary",
                "tagName": "button",
                "id": "save",
                "className": "btn btn-primary",
                "text": "Save",
                "styles": [{"name": "color", "value": "rgb(255, 255, 255)"}],
                "boundingBox": {"x": 10, "y": 20, "width": 80, "height": 32},
            }
        ],
    }


@pytest.mark.asyncio
async def test_get_computed_styles_include_all_sends_no_property_list() -> None:
    fake_page = FakePage({"computed_styles": {"found": 1, "processed": 1, "elements": [_BUTTON]}})

    await _binding(fake_page).handler({"selector": "#save", "include_all": True, "include_inherited": True})

    sent = fake_page.args_for("computed_styles")[0]
    assert sent["properties"] is None
    assert sent["includeInherited"] is True
    assert sent["maxElements"] == 10


@pytest.mark.asyncio
async def test_get_computed_styles_without_matches_is_not_found() -> None:
    fake_page = FakePage({"computed_styles": {"found": 0, "processed": 0, "elements": []}})

    with pytest.raises(ElementNotFoundError, match="No elements found matching selector: .missing"):
        await _binding(fake_page).handler({"selector": ".missing"})


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"selector": ""},
        {"selector": "div", "categories": "layout"},
        {"selector": "div", "max_elements": 0},
        {"selector": "div", "include_all": "maybe"},
    ],
)
async def test_get_computed_styles_rejects_bad_arguments(payload: dict) -> None:
    fake_page = FakePage({"computed_styles": {"found": 1, "processed": 1, "elements": []}})

    with pytest.raises(ValueError):
        await _binding(fake_page).handler(payload)

    assert fake_page.calls == []
