from __future__ import annotations

from websight.core.elements import InteractionKind
from websight.tools.pointer import PointerActionTool, PointerWording


class HoverTool(PointerActionTool):
    kind = InteractionKind.HOVER
    wording = PointerWording(noun="hover over", on_element="Hovered over", at_point="Hovered", verb="Hover")
