from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Callable

from websight.adapters.config.schema import BrowserConfig


@dataclass
class _LiveBrowser:
    playwright: Any
    browser: Any
    context: Any
    headless: bool
    page: Any | None = None


def _load_playwright() -> Callable[[], Any]:
    try:
        from playwright.async_api import async_playwright
    except ModuleNotFoundError as exc:
        raise RuntimeError("Playwright dependency is not installed. Install with: pip install playwright") from exc

    return async_playwright


class BrowserSession:
    """Owns the single browser process and page the tools act on.

    The browser is launched lazily by the first ``get_page`` call and relaunched
    when a different headless mode is requested.
    """

    def __init__(self, config: BrowserConfig) -> None:
        self._config = config
        self._logger = logging.getLogger("websight.session")
        self._live: _LiveBrowser | None = None
        self._lock = asyncio.Lock()

    @property
    def headless(self) -> bool:
        if self._live is None:
            return self._config.headless
        return self._live.headless

    def has_page(self) -> bool:
        return self._live is not None and self._live.page is not None

    async def get_page(self, headless: bool | None = None) -> Any:
        async with self._lock:
            use_headless = self.headless if headless is None else headless
            live = self._live
            if live is not None and live.headless != use_headless:
                self._logger.info(
                    "relaunching browser for headless mode change",
                    extra={"headless": use_headless},
                )
                await self._shutdown(live)
                self._live = live = None
            if live is None:
                live = await self._launch(use_headless)
                self._live = live
            if live.page is None:
                live.page = await live.context.new_page()
            return live.page

    async def close(self) -> None:
        async with self._lock:
            live = self._live
            self._live = None
            if live is not None:
                await self._shutdown(live)
                self._logger.info("browser closed")

    async def _launch(self, headless: bool) -> _LiveBrowser:
        playwright_factory = _load_playwright()
        manager = playwright_factory()
        playwright = await manager.start()
        browser_name = self._config.browser
        launcher = getattr(playwright, browser_name)
        launch_kwargs: dict[str, Any] = {
            "headless": headless,
            "args": list(self._config.launch_args),
        }
        if browser_name == "chromium" and self._config.launch_channel:
            launch_kwargs["channel"] = self._config.launch_channel
        try:
            browser = await self._launch_browser(launcher, browser_name, launch_kwargs)
        except Exception:
            await playwright.stop()
            raise
        context_kwargs: dict[str, Any] = {
            "viewport": {"width": self._config.viewport_width, "height": self._config.viewport_height},
        }
        if self._config.user_agent:
            context_kwargs["user_agent"] = self._config.user_agent
        if self._config.locale:
            context_kwargs["locale"] = self._config.locale
        try:
            context = await browser.new_context(**context_kwargs)
        except Exception:
            await browser.close()
            await playwright.stop()
            raise
        self._logger.info("browser launched", extra={"browser": browser_name, "headless": headless})
        return _LiveBrowser(playwright=playwright, browser=browser, context=context, headless=headless)

    async def _launch_browser(self, launcher: Any, browser_name: str, launch_kwargs: dict[str, Any]) -> Any:
        try:
            return await launcher.launch(**launch_kwargs)
        except Exception as first_exc:  # noqa: BLE001
            if browser_name != "chromium":
                raise
            retries: list[dict[str, Any]] = []
            without_channel = dict(launch_kwargs)
            had_channel = without_channel.pop("channel", None) is not None
            if had_channel:
                retries.append(without_channel)
            for executable_path in self._chromium_executable_candidates():
                with_executable = dict(without_channel)
                with_executable["executable_path"] = executable_path
                retries.append(with_executable)

            last_exc: Exception = first_exc
            for retry_kwargs in retries:
                try:
                    self._logger.warning(
                        "chromium launch retry",
                        extra={
                            "channel": retry_kwargs.get("channel"),
                            "executable_path": retry_kwargs.get("executable_path"),
                        },
                    )
                    return await launcher.launch(**retry_kwargs)
                except Exception as retry_exc:  # noqa: BLE001
                    last_exc = retry_exc
            raise RuntimeError(
                "failed to launch chromium. Run `playwright install chromium`, or set "
                "browser.chromium_executable_path to a local chromium binary."
            ) from last_exc

    def _chromium_executable_candidates(self) -> list[str]:
        candidates: list[str] = []
        configured = (self._config.chromium_executable_path or "").strip()
        if configured and Path(configured).exists():
            candidates.append(configured)
        for path in [
            "/usr/bin/chromium",
            "/usr/bin/chromium-browser",
            "/snap/bin/chromium",
            "/usr/bin/google-chrome",
            "/usr/bin/google-chrome-stable",
        ]:
            if Path(path).exists():
                candidates.append(path)
        return list(dict.fromkeys(candidates))

    async def _shutdown(self, live: _LiveBrowser) -> None:
        for closer in (live.context.close, live.browser.close, live.playwright.stop):
            try:
                await closer()
            except Exception as exc:  # noqa: BLE001
                self._logger.debug("browser shutdown step failed", extra={"error": str(exc)})
