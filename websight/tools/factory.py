from __future__ import annotations

import logging

from websight.adapters.browser.session import BrowserSession
from websight.adapters.config.schema import Settings
from websight.app.interaction import ElementInteractor
from websight.tools.base import ToolBinding
from websight.tools.click import ClickTool
from websight.tools.computed_styles import ComputedStylesTool
from websight.tools.elements import GetElementsTool
from websight.tools.execute_javascript import ExecuteJavaScriptTool
from websight.tools.extract_html import ExtractHTMLTool
from websight.tools.fill import FillTool
from websight.tools.hover import HoverTool
from websight.tools.navigate import NavigateTool
from websight.tools.screenshot import ScreenshotTool
from websight.tools.scroll import ScrollTool


def build_enabled_tools(
    settings: Settings,
    session: BrowserSession,
    interactor: ElementInteractor,
) -> list[ToolBinding]:
    interaction = settings.interaction
    tools: list[ToolBinding] = []
    tools.extend(NavigateTool(session, settings.browser).bindings())
    tools.extend(ScreenshotTool(session, settings.screenshot).bindings())
    tools.extend(ScrollTool(session, interactor).bindings())
    tools.extend(ClickTool(session, interactor, interaction.wait_after_click_ms).bindings())
    tools.extend(HoverTool(session, interactor, interaction.wait_after_hover_ms).bindings())
    tools.extend(FillTool(session, interaction.wait_after_fill_ms).bindings())
    tools.extend(ExtractHTMLTool(session, interactor).bindings())
    tools.extend(ExecuteJavaScriptTool(session).bindings())
    tools.extend(GetElementsTool(session).bindings())
    tools.extend(ComputedStylesTool(session).bindings())

    disabled = {name.strip() for name in settings.tools.disabled_tools if name.strip()}
    if not disabled:
        return tools
    known = {binding.name for binding in tools}
    unknown = sorted(disabled - known)
    if unknown:
        logging.getLogger("websight.tools.factory").warning(
            "ignoring unknown disabled tools",
            extra={"tools": ",".join(unknown)},
        )
    return [binding for binding in tools if binding.name not in disabled]
