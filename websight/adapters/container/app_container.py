from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from websight.adapters.browser.session import BrowserSession
from websight.adapters.config.loader import load_settings
from websight.adapters.config.schema import Settings
from websight.adapters.logging.setup import configure_logging
from websight.adapters.mcp.server import WebsightServer
from websight.app.interaction import ElementInteractor
from websight.tools.base import ToolBinding
from websight.tools.factory import build_enabled_tools


class AppContainer:
    _settings: Optional[Settings] = None
    _logger: Optional[logging.Logger] = None
    _session: Optional[BrowserSession] = None
    _interactor: Optional[ElementInteractor] = None
    _tools: Optional[list[ToolBinding]] = None
    _server: Optional[WebsightServer] = None

    @classmethod
    def configure(cls, config_path: Path | None = None, settings: Settings | None = None) -> None:
        cls._settings = settings or load_settings(config_path)
        cls._settings.logging.log_level = cls._settings.runtime.log_level
        cls._logger = configure_logging(cls._settings.logging)
        cls._session = BrowserSession(cls._settings.browser)
        cls._interactor = ElementInteractor(cls._settings.interaction)
        cls._tools = build_enabled_tools(cls._settings, cls._session, cls._interactor)
        cls._server = WebsightServer(
            cls._tools,
            name=cls._settings.server.name,
            version=cls._settings.server.version,
        )

    @classmethod
    def get_settings(cls) -> Settings:
        if cls._settings is None:
            raise RuntimeError("container not configured")
        return cls._settings

    @classmethod
    def get_logger(cls) -> logging.Logger:
        if cls._logger is None:
            raise RuntimeError("container not configured")
        return cls._logger

    @classmethod
    def get_browser_session(cls) -> BrowserSession:
        if cls._session is None:
            raise RuntimeError("browser session not configured")
        return cls._session

    @classmethod
    def get_interactor(cls) -> ElementInteractor:
        if cls._interactor is None:
            raise RuntimeError("interactor not configured")
        return cls._interactor

    @classmethod
    def get_tools(cls) -> list[ToolBinding]:
        if cls._tools is None:
            raise RuntimeError("tools not configured")
        return cls._tools

    @classmethod
    def get_server(cls) -> WebsightServer:
        if cls._server is None:
            raise RuntimeError("server not configured")
        return cls._server
