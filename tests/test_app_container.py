from __future__ import annotations

import logging

import pytest

from websight.adapters.config.schema import ServerConfig, Settings


def _reset_container(module) -> None:
    module.AppContainer._settings = None
    module.AppContainer._logger = None
    module.AppContainer._session = None
    module.AppContainer._interactor = None
    module.AppContainer._tools = None
    module.AppContainer._server = None


def test_app_container_getters_fail_when_not_configured() -> None:
    from websight.adapters.container import app_container

    _reset_container(app_container)

    with pytest.raises(RuntimeError):
        app_container.AppContainer.get_settings()
    with pytest.raises(RuntimeError):
        app_container.AppContainer.get_logger()
    with pytest.raises(RuntimeError):
        app_container.AppContainer.get_browser_session()
    with pytest.raises(RuntimeError):
        app_container.AppContainer.get_interactor()
    with pytest.raises(RuntimeError):
        app_container.AppContainer.get_tools()
    with pytest.raises(RuntimeError):
        app_container.AppContainer.get_server()


def test_app_container_configures_services(monkeypatch: pytest.MonkeyPatch) -> None:
    from websight.adapters.container import app_container

    _reset_container(app_container)
    settings = Settings(server=ServerConfig(name="websight-test", version="9.9.9"))
    settings.runtime.log_level = "DEBUG"
    configured_levels: list[str] = []

    def _fake_configure_logging(config) -> logging.Logger:
        configured_levels.append(config.log_level)
        return logging.getLogger("test.container")

    monkeypatch.setattr(app_container, "load_settings", lambda *_: settings)
    monkeypatch.setattr(app_container, "configure_logging", _fake_configure_logging)

    app_container.AppContainer.configure()

    assert app_container.AppContainer.get_settings() is settings
    assert app_container.AppContainer.get_logger().name == "test.container"
    assert configured_levels == ["DEBUG"]
    assert app_container.AppContainer.get_browser_session().has_page() is False
    assert app_container.AppContainer.get_interactor().text_truncate_length == 50
    tool_names = [binding.name for binding in app_container.AppContainer.get_tools()]
    assert app_container.AppContainer.get_server().tool_names == tool_names
    assert "click_text" in tool_names

    _reset_container(app_container)


def test_app_container_accepts_explicit_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from websight.adapters.container import app_container

    _reset_container(app_container)
    settings = Settings()
    settings.tools.disabled_tools = ["get_elements"]

    def _unexpected_load(*_args):
        raise AssertionError("settings should not be loaded from disk")

    monkeypatch.setattr(app_container, "load_settings", _unexpected_load)
    monkeypatch.setattr(app_container, "configure_logging", lambda *_: logging.getLogger("test.container"))

    app_container.AppContainer.configure(settings=settings)

    assert "get_elements" not in app_container.AppContainer.get_server().tool_names

    _reset_container(app_container)
