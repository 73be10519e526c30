from __future__ import annotations

from typing import Any

import pytest

from browser_fakes import FakePage, FakeSession, Responses, bindings_by_name
from dom_builders import VISIBLE, el, page, to_payload
from websight.adapters.config.schema import InteractionConfig
from websight.app.interaction import ElementInteractor
from websight.core.errors import (
    ElementNotFoundError,
    ElementNotInteractableError,
    OccurrenceOutOfRangeError,
)
from websight.shared.retries import AsyncRetriesService
from websight.tools.click import ClickTool
from websight.tools.hover import HoverTool


async def _no_sleep(_delay: float) -> None:
    return None


def _interactor() -> ElementInteractor:
    return ElementInteractor(InteractionConfig(), retries=AsyncRetriesService(sleep=_no_sleep))


def _interact_ok(tag: str = "BUTTON", **descriptor: Any) -> dict[str, Any]:
    return {
        "status": "ok",
        "strategy": "native",
        "attempts": [{"strategy": "native", "ok": True}],
        "descriptor": {"tagName": tag, "id": "", "className": "", "text": None, **descriptor},
        "x": 40,
        "y": 12,
    }


def _click_bindings(fake_page: FakePage) -> dict[str, Any]:
    return bindings_by_name(ClickTool(FakeSession(fake_page), _interactor(), 1000))


def _hover_bindings(fake_page: FakePage) -> dict[str, Any]:
    return bindings_by_name(HoverTool(FakeSession(fake_page), _interactor(), 1000))


def test_pointer_tools_expose_text_selector_and_position_variants() -> None:
    click = _click_bindings(FakePage())
    hover = _hover_bindings(FakePage())

    assert sorted(click) == ["click_position", "click_selector", "click_text"]
    assert sorted(hover) == ["hover_position", "hover_selector", "hover_text"]
    assert click["click_text"].tool.inputSchema["required"] == ["text"]
    assert hover["hover_position"].tool.inputSchema["required"] == ["x", "y"]


@pytest.mark.asyncio
async def test_click_text_targets_interactive_ancestor_of_matched_span() -> None:
    dom = page("Buy", el("div", el("span", "Buy"), role="button", element_id="card"))
    card = next(node for node in dom.iter_subtree() if node.element_id == "card")
    fake_page = FakePage(
        {"snapshot": to_payload(dom), "interact": _interact_ok("DIV", id="card")},
    )

    result = await _click_bindings(fake_page)["click_text"].handler({"text": "Buy"})

    sent = fake_page.args_for("interact")[0]
    assert sent["target"] == {"index": card.index, "tag": "div"}
    assert sent["kind"] == "click"
    assert result.texts == [
        'Clicked element containing: "Buy" (occurrence 1 of 4)\nElement: <DIV id="card">'
    ]
    assert fake_page.waits == [1000]


@pytest.mark.asyncio
async def test_click_text_on_button_uses_the_button_itself() -> None:
    dom = page("Buy", el("button", "Buy", element_id="buy"))
    button = next(node for node in dom.iter_subtree() if node.element_id == "buy")
    fake_page = FakePage({"snapshot": to_payload(dom), "interact": _interact_ok(id="buy")})

    await _click_bindings(fake_page)["click_text"].handler({"text": "Buy", "wait_after": 0})

    assert fake_page.args_for("interact")[0]["target"] == {"index": button.index, "tag": "button"}
    assert fake_page.waits == [0]


@pytest.mark.asyncio
async def test_click_text_inside_new_tab_link_targets_the_anchor() -> None:
    dom = page(
        "Docs",
        el("a", el("span", "Docs"), element_id="docs", has_href=True),
    )
    anchor = next(node for node in dom.iter_subtree() if node.element_id == "docs")
    fake_page = FakePage({"snapshot": to_payload(dom), "interact": _interact_ok("A", id="docs")})

    await _click_bindings(fake_page)["click_text"].handler({"text": "Docs"})

    # the in-page click script strips target="_blank" from the anchor it acts on
    assert fake_page.args_for("interact")[0]["target"] == {"index": anchor.index, "tag": "a"}


@pytest.mark.asyncio
async def test_click_text_reports_fallback_to_plain_match() -> None:
    dom = page("Note", el("p", "Note to self"))
    fake_page = FakePage({"snapshot": to_payload(dom), "interact": _interact_ok("P")})

    result = await _click_bindings(fake_page)["click_text"].handler({"text": "Note"})

    assert "Note: no interactive element found around the text" in result.texts[0]


@pytest.mark.asyncio
async def test_click_text_surfaces_not_found_and_out_of_range() -> None:
    dom = page("Buy", el("button", "Buy"))
    bindings = _click_bindings(FakePage({"snapshot": to_payload(dom)}))

    with pytest.raises(ElementNotFoundError, match='No element found containing text: "Sell"'):
        await bindings["click_text"].handler({"text": "Sell"})
    with pytest.raises(OccurrenceOutOfRangeError, match="Only 3 matches found"):
        await bindings["click_text"].handler({"text": "Buy", "occurrence": 4})


@pytest.mark.asyncio
async def test_click_text_rejects_bad_arguments() -> None:
    bindings = _click_bindings(FakePage())

    with pytest.raises(ValueError, match="text must be a non-empty string"):
        await bindings["click_text"].handler({"text": "   "})
    with pytest.raises(ValueError, match="occurrence must be >= 1"):
        await bindings["click_text"].handler({"text": "Buy", "occurrence": 0})


@pytest.mark.asyncio
async def test_click_selector_waits_for_element_then_clicks() -> None:
    probe = {
        "index": 9,
        "tag": "button",
        "text": "Submit",
        "id": "go",
        "className": "",
        "display": "inline-block",
        "visibility": "visible",
        "disabled": False,
        **VISIBLE,
    }
    fake_page = FakePage(
        {
            "probe_selector": Responses(None, probe),
            "interact": _interact_ok(id="go", text="Submit"),
        }
    )

    result = await _click_bindings(fake_page)["click_selector"].handler({"selector": "#go"})

    assert len(fake_page.args_for("probe_selector")) == 2
    assert fake_page.args_for("interact")[0]["target"] == {"selector": "#go"}
    assert result.texts == [
        'Clicked element matching selector: "#go"\nElement: <BUTTON id="go">\nText: "Submit"'
    ]


@pytest.mark.asyncio
async def test_click_selector_on_hidden_element_never_interacts() -> None:
    probe = {"index": 1, "tag": "button", "display": "none", "visibility": "visible", **VISIBLE}
    fake_page = FakePage({"probe_selector": probe})

    with pytest.raises(ElementNotInteractableError):
        await _click_bindings(fake_page)["click_selector"].handler({"selector": "#go"})

    assert fake_page.args_for("interact") == []


@pytest.mark.asyncio
async def test_click_position_describes_element_at_point() -> None:
    fake_page = FakePage({"interact": _interact_ok("A", className="nav", text="Home")})

    result = await _click_bindings(fake_page)["click_position"].handler({"x": 10, "y": "20.5"})

    assert fake_page.args_for("interact")[0]["target"] == {"x": 10.0, "y": 20.5}
    assert result.texts == ['Clicked at coordinates (10, 20.5)\nElement: <A class="nav">\nText: "Home"']


@pytest.mark.asyncio
async def test_hover_text_dispatches_hover_and_moves_mouse() -> None:
    dom = page("Menu", el("li", "Menu", role="menuitem", element_id="menu"))
    fake_page = FakePage({"snapshot": to_payload(dom), "interact": _interact_ok("LI", id="menu")})

    result = await _hover_bindings(fake_page)["hover_text"].handler({"text": "Menu"})

    assert fake_page.args_for("interact")[0]["kind"] == "hover"
    assert fake_page.mouse.moves == [(40.0, 12.0)]
    assert result.texts[0].startswith('Hovered over element containing: "Menu"')


@pytest.mark.asyncio
async def test_hover_selector_accepts_disabled_elements() -> None:
    probe = {
        "index": 3,
        "tag": "button",
        "display": "block",
        "visibility": "visible",
        "disabled": True,
        **VISIBLE,
    }
    fake_page = FakePage({"probe_selector": probe, "interact": _interact_ok()})

    result = await _hover_bindings(fake_page)["hover_selector"].handler({"selector": "button"})

    assert result.texts[0].startswith('Hovered over element matching selector: "button"')
