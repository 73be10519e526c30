from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal

from pydantic import BaseModel, BeforeValidator, ByteSize, ConfigDict, Field, PositiveInt, TypeAdapter


_BYTE_SIZE_ADAPTER = TypeAdapter(ByteSize)


def _coerce_byte_size(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("byte size must be a positive integer or size string")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValueError("byte size numeric values must be whole numbers")
    try:
        return int(_BYTE_SIZE_ADAPTER.validate_python(value))
    except (TypeError, ValueError) as exc:
        raise ValueError("invalid byte size value") from exc


ByteSizeValue = Annotated[int, BeforeValidator(_coerce_byte_size), Field(gt=0)]


class RuntimeConfig(BaseModel):
    log_level: str = "INFO"


class ServerConfig(BaseModel):
    name: str = "websight"
    version: str = "0.1.0"


class BrowserConfig(BaseModel):
    browser: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = True
    launch_channel: str = ""
    chromium_executable_path: str | None = None
    launch_args: List[str] = Field(default_factory=list)
    viewport_width: PositiveInt = 1280
    viewport_height: PositiveInt = 720
    user_agent: str | None = None
    locale: str | None = None
    navigation_timeout_seconds: PositiveInt = 10
    allowed_schemes: List[str] = Field(default_factory=lambda: ["http", "https", "file", "about", "data"])
    allowed_domains: List[str] = Field(default_factory=list)
    block_private_networks: bool = False


class InteractionConfig(BaseModel):
    wait_after_click_ms: int = Field(default=1000, ge=0)
    wait_after_hover_ms: int = Field(default=1000, ge=0)
    wait_after_fill_ms: int = Field(default=500, ge=0)
    selector_max_attempts: PositiveInt = 3
    selector_attempt_delay_ms: PositiveInt = 1000
    text_truncate_length: PositiveInt = 50


class ScreenshotConfig(BaseModel):
    default_provider: str | None = None
    max_screenshot_bytes: ByteSizeValue = 20_000_000


class ToolsConfig(BaseModel):
    disabled_tools: List[str] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    logfmt_enabled: bool = True
    log_level: str = "INFO"
    log_dir: str = "logs"


class Settings(BaseModel):
    runtime: RuntimeConfig = RuntimeConfig()
    server: ServerConfig = ServerConfig()
    browser: BrowserConfig = BrowserConfig()
    interaction: InteractionConfig = InteractionConfig()
    screenshot: ScreenshotConfig = ScreenshotConfig()
    tools: ToolsConfig = ToolsConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: Path | None = None) -> "Settings":
        if path is None:
            raise ValueError("config file path is required")
        with path.open("rb") as fp:
            data = tomllib.load(fp)
        return cls.from_dict(data)
