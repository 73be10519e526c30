from __future__ import annotations

import asyncio
import ipaddress
import logging
from typing import Any
from urllib.parse import urlparse

import mcp.types as types

from websight.adapters.browser.session import BrowserSession
from websight.adapters.config.schema import BrowserConfig
from websight.core.content import ToolResult
from websight.tools.arg_utils import int_with_default, optional_bool, optional_str, require_non_empty_str
from websight.tools.base import ToolBinding
from websight.tools.schema_utils import boolean_field, integer_field, string_field, strict_object

_WAIT_UNTIL_VALUES = ("load", "domcontentloaded", "networkidle", "commit")
_MAX_GOTO_TIMEOUT_SECONDS = 120
_WAIT_FOR_SELECTOR_TIMEOUT_MS = 5000


class NavigateTool:
    def __init__(self, session: BrowserSession, config: BrowserConfig) -> None:
        self._session = session
        self._config = config
        self._logger = logging.getLogger("websight.tools.navigate")

    def bindings(self) -> list[ToolBinding]:
        return [ToolBinding(tool=self._schema(), handler=self._handle)]

    async def _handle(self, payload: dict[str, Any]) -> ToolResult:
        url = require_non_empty_str(payload, "url")
        wait_until = self._coerce_wait_until(payload.get("wait_until"))
        timeout_seconds = int_with_default(
            payload.get("timeout_seconds"),
            default=self._config.navigation_timeout_seconds,
            field="timeout_seconds",
            min_value=1,
            max_value=_MAX_GOTO_TIMEOUT_SECONDS,
            clamp_max=True,
        )
        wait_for_selector = optional_str(
            payload.get("wait_for_selector"),
            error_message="wait_for_selector must be a string",
        )
        headless = payload.get("headless")
        if headless is not None:
            headless = optional_bool(headless, default=self._config.headless, error_message="headless must be boolean")
        await self._validate_url(url)

        page = await self._session.get_page(headless)
        fallback = await self._goto_with_timeout_fallback(
            page,
            url=url,
            wait_until=wait_until,
            timeout_seconds=timeout_seconds,
        )
        if wait_for_selector:
            try:
                await page.wait_for_selector(wait_for_selector, timeout=_WAIT_FOR_SELECTOR_TIMEOUT_MS)
            except Exception as exc:  # noqa: BLE001
                self._logger.warning(
                    "wait_for_selector did not resolve; continuing",
                    extra={"selector": wait_for_selector, "error": str(exc)},
                )

        title = await page.title()
        lines = [f"Navigated to {page.url}", f"Page title: {title}"]
        if fallback:
            lines.append(f"Note: {wait_until} timed out; page loaded with {fallback}")
        return ToolResult.text("\n".join(lines))

    async def _goto_with_timeout_fallback(
        self,
        page: Any,
        *,
        url: str,
        wait_until: str,
        timeout_seconds: int,
    ) -> str | None:
        timeout_ms = timeout_seconds * 1000
        try:
            await page.goto(url, wait_until=wait_until, timeout=timeout_ms)
            return None
        except Exception as exc:
            if wait_until != "networkidle" or not _is_timeout_error(exc):
                raise
            self._logger.warning(
                "goto timeout on networkidle; retrying with domcontentloaded",
                extra={"url": url, "timeout_seconds": timeout_seconds},
            )
        fallback_wait_until = "domcontentloaded"
        await page.goto(url, wait_until=fallback_wait_until, timeout=timeout_ms)
        return fallback_wait_until

    async def _validate_url(self, url: str) -> None:
        parsed = urlparse(url)
        scheme = parsed.scheme.lower()
        allowed_schemes = {item.strip().lower() for item in self._config.allowed_schemes}
        if not scheme:
            raise ValueError("url must be absolute and include a scheme")
        if scheme not in allowed_schemes:
            raise ValueError(f"url scheme must be one of {', '.join(sorted(allowed_schemes))}")
        if scheme not in {"http", "https"}:
            return
        host = parsed.hostname
        if not host:
            raise ValueError("url must include a hostname")
        if self._config.allowed_domains and not _is_allowed_domain(host, self._config.allowed_domains):
            raise ValueError("url host is not in allowed_domains")
        if not self._config.block_private_networks:
            return
        addresses = await _resolve_ip_addresses(host)
        for address in addresses:
            if _is_private_like_ip(address):
                raise ValueError("private or local network targets are blocked")

    def _coerce_wait_until(self, value: Any) -> str:
        if value is None:
            return "domcontentloaded"
        if not isinstance(value, str):
            raise ValueError("wait_until must be a string")
        normalized = value.strip().lower()
        if normalized not in _WAIT_UNTIL_VALUES:
            raise ValueError(f"wait_until must be one of {', '.join(_WAIT_UNTIL_VALUES)}")
        return normalized

    def _schema(self) -> types.Tool:
        return types.Tool(
            name="navigate",
            description="Navigate to a URL and report the resulting page URL and title.",
            inputSchema=strict_object(
                properties={
                    "url": string_field("The absolute URL to navigate to."),
                    "wait_until": string_field(
                        "Navigation readiness: load, domcontentloaded (default), networkidle or commit.",
                        enum=list(_WAIT_UNTIL_VALUES),
                    ),
                    "timeout_seconds": integer_field(
                        minimum=1,
                        default=self._config.navigation_timeout_seconds,
                        description="Navigation timeout in seconds.",
                    ),
                    "wait_for_selector": string_field(
                        "Optional CSS selector to wait for after navigation. Not finding it is not an error."
                    ),
                    "headless": boolean_field(
                        "Run the browser headless. Changing the mode relaunches the browser."
                    ),
                },
                required=["url"],
            ),
        )


def _is_allowed_domain(hostname: str, allowed_domains: list[str]) -> bool:
    normalized_host = hostname.strip().lower().rstrip(".")
    for domain in allowed_domains:
        candidate = domain.strip().lower().rstrip(".")
        if not candidate:
            continue
        if normalized_host == candidate or normalized_host.endswith(f".{candidate}"):
            return True
    return False


def _is_private_like_ip(ip_text: str) -> bool:
    addr = ipaddress.ip_address(ip_text)
    return (
        addr.is_private
        or addr.is_loopback
        or addr.is_link_local
        or addr.is_multicast
        or addr.is_reserved
        or addr.is_unspecified
    )


def _is_timeout_error(exc: Exception) -> bool:
    return "timeout" in exc.__class__.__name__.lower()


async def _resolve_ip_addresses(hostname: str) -> list[str]:
    try:
        loop = asyncio.get_running_loop()
        infos = await loop.getaddrinfo(hostname, None, proto=0)
    except OSError:
        return []
    addresses: list[str] = []
    for info in infos:
        sockaddr = info[4]
        if not sockaddr:
            continue
        ip_text = sockaddr[0]
        if isinstance(ip_text, str):
            addresses.append(ip_text)
    return list(dict.fromkeys(addresses))
