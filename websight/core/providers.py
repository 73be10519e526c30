from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderConfig:
    name: str
    max_image_dimension: int


PROVIDER_CONFIGS: dict[str, ProviderConfig] = {
    "claude": ProviderConfig(name="Claude", max_image_dimension=8000),
    "anthropic": ProviderConfig(name="Anthropic", max_image_dimension=8000),
    "gemini": ProviderConfig(name="Gemini", max_image_dimension=3072),
    "google": ProviderConfig(name="Google", max_image_dimension=3072),
    "openai": ProviderConfig(name="OpenAI", max_image_dimension=2048),
    "gpt4": ProviderConfig(name="GPT-4", max_image_dimension=2048),
    "default": ProviderConfig(name="Default", max_image_dimension=2000),
}

_FUZZY_ALIASES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("claude", "anthropic"), "claude"),
    (("gemini", "google"), "gemini"),
    (("openai", "gpt"), "openai"),
)


def get_provider_config(provider: str | None) -> ProviderConfig:
    if not provider:
        return PROVIDER_CONFIGS["default"]
    normalized = provider.strip().lower()
    direct = PROVIDER_CONFIGS.get(normalized)
    if direct is not None:
        return direct
    for needles, key in _FUZZY_ALIASES:
        if any(needle in normalized for needle in needles):
            return PROVIDER_CONFIGS[key]
    return PROVIDER_CONFIGS["default"]
