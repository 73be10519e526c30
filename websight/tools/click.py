from __future__ import annotations

from websight.core.elements import InteractionKind
from websight.tools.pointer import PointerActionTool, PointerWording


class ClickTool(PointerActionTool):
    kind = InteractionKind.CLICK
    wording = PointerWording(noun="click", on_element="Clicked", at_point="Clicked", verb="Click")
