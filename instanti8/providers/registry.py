"""Configured LLM providers, keyed by name in registration order."""

import logging
from collections.abc import Mapping

from instanti8.providers.base import LLMProvider
from instanti8.providers.groq import GroqProvider
from instanti8.providers.openai import OpenAIProvider

logger = logging.getLogger(__name__)

# Registration order is also the assistant's preference order
PREFERENCE = ("groq", "openai")

_providers: dict[str, LLMProvider] = {}


def register_provider(provider: LLMProvider) -> None:
    _providers[provider.name] = provider


def register_from_env(environ: Mapping[str, str]) -> list[str]:
    """Register every provider whose API key is set. Returns their names."""
    if environ.get("GROQ_API_KEY"):
        register_provider(
            GroqProvider(api_key=environ["GROQ_API_KEY"], model=environ.get("GROQ_MODEL"))
        )
    if environ.get("OPENAI_API_KEY"):
        register_provider(OpenAIProvider(api_key=environ["OPENAI_API_KEY"]))

    names = [name for name in PREFERENCE if name in _providers]
    logger.info("LLM providers configured: %s", ", ".join(names) or "none")
    return names


def get_provider(name: str) -> LLMProvider:
    try:
        return _providers[name]
    except KeyError:
        available = ", ".join(_providers) or "(none)"
        raise ProviderNotFoundError(
            f"Provider '{name}' not registered. Available: {available}"
        ) from None


def get_preferred_provider(*names: str) -> LLMProvider | None:
    """First registered provider among `names` (default PREFERENCE), or None."""
    for name in names or PREFERENCE:
        if name in _providers:
            return _providers[name]
    return None


def get_all_providers() -> list[LLMProvider]:
    return list(_providers.values())


def clear_providers() -> None:
    _providers.clear()


class ProviderNotFoundError(Exception):
    pass
