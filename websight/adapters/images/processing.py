from __future__ import annotations

from dataclasses import dataclass
import io
import logging

from PIL import Image

from websight.core.providers import ProviderConfig, get_provider_config
from websight.shared.utils import round_half_up

_logger = logging.getLogger("websight.images")


@dataclass(frozen=True)
class ProcessedImage:
    data: bytes
    original_size: tuple[int, int]
    size: tuple[int, int]
    was_resized: bool
    provider: ProviderConfig


def fit_within(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Largest size with the same aspect ratio whose longer side is ``max_dimension``.

    Images already within the limit are returned unchanged.
    """
    if width <= max_dimension and height <= max_dimension:
        return width, height
    aspect_ratio = width / height
    if width > height:
        return max_dimension, max(1, round_half_up(max_dimension / aspect_ratio))
    return max(1, round_half_up(max_dimension * aspect_ratio)), max_dimension


def process_screenshot(screenshot: bytes, provider: str | None = None) -> ProcessedImage:
    config = get_provider_config(provider)
    with Image.open(io.BytesIO(screenshot)) as image:
        original_size = (image.width, image.height)
        target_size = fit_within(image.width, image.height, config.max_image_dimension)
        if target_size == original_size:
            return ProcessedImage(
                data=screenshot,
                original_size=original_size,
                size=original_size,
                was_resized=False,
                provider=config,
            )
        resized = image.resize(target_size, Image.Resampling.LANCZOS)
    buffer = io.BytesIO()
    resized.save(buffer, format="PNG")
    _logger.info(
        "screenshot resized",
        extra={
            "provider": config.name,
            "original": f"{original_size[0]}x{original_size[1]}",
            "resized": f"{target_size[0]}x{target_size[1]}",
        },
    )
    return ProcessedImage(
        data=buffer.getvalue(),
        original_size=original_size,
        size=target_size,
        was_resized=True,
        provider=config,
    )
