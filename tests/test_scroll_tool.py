from __future__ import annotations

import pytest

from browser_fakes import FakePage, FakeSession, bindings_by_name
from dom_builders import el, page, to_payload
from websight.adapters.config.schema import InteractionConfig
from websight.app.interaction import ElementInteractor
from websight.core.errors import ElementNotFoundError, StaleElementError
from websight.shared.utils import format_scroll_percentage
from websight.tools.scroll import ScrollTool

_POSITION = {"x": 0, "y": 1000, "height": 3000, "viewportHeight": 1000}


def _bindings(fake_page: FakePage) -> dict:
    return bindings_by_name(ScrollTool(FakeSession(fake_page), ElementInteractor(InteractionConfig())))


def _page(**responses) -> FakePage:
    return FakePage({"scroll_position": _POSITION, **responses})


@pytest.mark.parametrize(
    ("scroll_y", "total", "viewport", "expected"),
    [
        (1000, 3000, 1000, "Y=1000 (50% of page)"),
        (0, 3000, 1000, "Y=0 (0% of page)"),
        (250.5, 1001, 500, "Y=250.5 (50% of page)"),
        (300, 800, 800, "Y=0 (0% of page)"),
    ],
)
def test_format_scroll_percentage(scroll_y: float, total: float, viewport: float, expected: str) -> None:
    assert format_scroll_percentage(scroll_y, total, viewport) == expected


@pytest.mark.asyncio
async def test_scroll_to_position_waits_longer_when_smooth() -> None:
    fake_page = _page(scroll_to=None)
    bindings = _bindings(fake_page)

    result = await bindings["scroll_to_position"].handler({"y": 1000})
    await bindings["scroll_to_position"].handler({"y": 1000, "smooth": False})

    assert fake_page.args_for("scroll_to") == [{"top": 1000.0, "smooth": True}, {"top": 1000.0, "smooth": False}]
    assert fake_page.waits == [500, 100]
    assert result.texts == ["Scrolled to Y position: 1000\nCurrent position: Y=1000 (50% of page)"]


@pytest.mark.asyncio
async def test_scroll_direction_variants() -> None:
    fake_page = _page(scroll_to=None, scroll_by=None)
    bindings = _bindings(fake_page)

    up = await bindings["scroll_direction"].handler({"direction": "up", "amount": 200})
    down = await bindings["scroll_direction"].handler({"direction": "DOWN"})
    top = await bindings["scroll_direction"].handler({"direction": "top", "smooth": False})
    bottom = await bindings["scroll_direction"].handler({"direction": "bottom"})

    assert fake_page.args_for("scroll_by") == [{"top": -200, "smooth": True}, {"top": 500, "smooth": True}]
    assert fake_page.args_for("scroll_to") == [{"top": 0, "smooth": False}, {"top": None, "smooth": True}]
    assert up.texts[0].startswith("Scrolled up 200px\n")
    assert down.texts[0].startswith("Scrolled down 500px\n")
    assert top.texts[0].startswith("Scrolled to top of page\n")
    assert bottom.texts[0].startswith("Scrolled to bottom of page\n")


@pytest.mark.asyncio
async def test_scroll_direction_rejects_unknown_direction() -> None:
    with pytest.raises(ValueError, match="direction must be one of up, down, top, bottom"):
        await _bindings(_page())["scroll_direction"].handler({"direction": "left"})


@pytest.mark.asyncio
async def test_scroll_to_text_scrolls_deepest_match_into_view() -> None:
    dom = page("Pricing", el("section", el("h2", "Pricing", element_id="pricing")))
    heading = next(node for node in dom.iter_subtree() if node.element_id == "pricing")
    fake_page = _page(
        snapshot=to_payload(dom),
        scroll_into_view={"tagName": "H2", "id": "pricing", "className": ""},
    )

    result = await _bindings(fake_page)["scroll_to_text"].handler({"text": "Pricing", "smooth": False})

    assert fake_page.args_for("scroll_into_view") == [{"index": heading.index, "tag": "h2", "smooth": False}]
    assert result.texts == [
        'Scrolled to element containing: "Pricing" (occurrence 1 of 4)\n'
        'Element: <H2 id="pricing">\n'
        "Current position: Y=1000 (50% of page)"
    ]


@pytest.mark.asyncio
async def test_scroll_to_text_failures() -> None:
    dom = page("Pricing", el("h2", "Pricing"))
    fake_page = _page(snapshot=to_payload(dom), scroll_into_view=None)
    bindings = _bindings(fake_page)

    with pytest.raises(ElementNotFoundError):
        await bindings["scroll_to_text"].handler({"text": "Contact"})
    with pytest.raises(StaleElementError):
        await bindings["scroll_to_text"].handler({"text": "Pricing"})
