from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import mcp.types as types

from websight.core.content import ToolResult

ToolPayload = dict[str, Any]

ToolHandler = Callable[[ToolPayload], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolBinding:
    tool: types.Tool
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.tool.name
