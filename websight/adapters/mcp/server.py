from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from websight.core.content import ContentPart, ToolResult
from websight.tools.base import ToolBinding

McpContent = types.TextContent | types.ImageContent


class WebsightServer:
    """Serves tool bindings over the MCP stdio transport.

    Calls run one at a time; every tool shares the single browser page.
    """

    def __init__(self, bindings: Sequence[ToolBinding], *, name: str, version: str) -> None:
        self._bindings: dict[str, ToolBinding] = {}
        for binding in bindings:
            if binding.name in self._bindings:
                raise ValueError(f"duplicate tool name: {binding.name}")
            self._bindings[binding.name] = binding
        self._lock = asyncio.Lock()
        self._logger = logging.getLogger("websight.server")
        self._server = Server(name, version=version)
        self._register_handlers()

    @property
    def tool_names(self) -> list[str]:
        return list(self._bindings)

    def list_tools(self) -> list[types.Tool]:
        return [binding.tool for binding in self._bindings.values()]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        binding = self._bindings.get(name)
        if binding is None:
            raise ValueError(f"Unknown tool: {name}")
        payload = dict(arguments or {})
        async with self._lock:
            self._logger.info("tool call started", extra={"tool": name, "arguments": _summarize(payload)})
            try:
                result = await binding.handler(payload)
            except Exception:
                self._logger.exception("tool call failed", extra={"tool": name})
                raise
            self._logger.info(
                "tool call completed",
                extra={"tool": name, "texts": len(result.texts), "images": len(result.images)},
            )
            return result

    async def serve_stdio(self) -> None:
        async with stdio_server() as (read_stream, write_stream):
            await self._server.run(read_stream, write_stream, self._server.create_initialization_options())

    def _register_handlers(self) -> None:
        @self._server.list_tools()
        async def _list_tools() -> list[types.Tool]:
            return self.list_tools()

        @self._server.call_tool(validate_input=False)
        async def _call_tool(name: str, arguments: dict[str, Any]) -> list[McpContent]:
            # raised errors are reported to the client as isError results
            result = await self.call_tool(name, arguments)
            return to_mcp_content(result)


def to_mcp_content(result: ToolResult) -> list[McpContent]:
    return [_convert_part(part) for part in result.content]


def _convert_part(part: ContentPart) -> McpContent:
    if part.type == "image":
        return types.ImageContent(type="image", data=part.data or "", mimeType=part.mime_type or "image/png")
    return types.TextContent(type="text", text=part.text or "")


def _summarize(payload: dict[str, Any], limit: int = 200) -> str:
    rendered = ", ".join(f"{key}={value!r}" for key, value in payload.items())
    if len(rendered) > limit:
        return rendered[:limit] + "..."
    return rendered
