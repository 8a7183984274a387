"""Contract tests for the provider registry."""

import pytest

from instanti8.providers.base import ChatCompletion, LLMProvider
from instanti8.providers.groq import GroqProvider
from instanti8.providers.openai import OpenAIProvider
from instanti8.providers.registry import (
    ProviderNotFoundError,
    get_all_providers,
    get_preferred_provider,
    get_provider,
    register_from_env,
    register_provider,
)


class FakeProvider(LLMProvider):
    """Minimal provider for testing the registry."""

    def __init__(self, name: str = "fake") -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    async def chat(self, messages, *, system_prompt=None, params=None, model=None) -> ChatCompletion:
        return ChatCompletion(content="fake", model="fake-model")


class TestProviderRegistry:
    def test_register_and_get(self):
        provider = FakeProvider()
        register_provider(provider)
        assert get_provider("fake") is provider

    def test_get_unknown_raises(self):
        register_provider(FakeProvider("groq"))
        with pytest.raises(ProviderNotFoundError, match="Available: groq"):
            get_provider("nonexistent")

    def test_get_all_providers_in_registration_order(self):
        groq, openai = FakeProvider("groq"), FakeProvider("openai")
        register_provider(groq)
        register_provider(openai)
        assert get_all_providers() == [groq, openai]

    def test_preferred_provider(self):
        openai = FakeProvider("openai")
        register_provider(openai)
        assert get_preferred_provider() is openai

        groq = FakeProvider("groq")
        register_provider(groq)
        assert get_preferred_provider() is groq
        assert get_preferred_provider("openai") is openai

    def test_preferred_provider_when_none_registered(self):
        assert get_preferred_provider() is None


class TestRegisterFromEnv:
    def test_no_keys(self):
        assert register_from_env({}) == []
        assert get_all_providers() == []

    def test_both_keys(self):
        names = register_from_env(
            {"GROQ_API_KEY": "gsk-test", "GROQ_MODEL": "llama3-70b-8192", "OPENAI_API_KEY": "sk-test"}
        )
        assert names == ["groq", "openai"]
        assert isinstance(get_provider("groq"), GroqProvider)
        assert get_provider("groq").default_model == "llama3-70b-8192"
        assert isinstance(get_provider("openai"), OpenAIProvider)

    def test_empty_key_is_ignored(self):
        assert register_from_env({"GROQ_API_KEY": "", "OPENAI_API_KEY": "sk-test"}) == ["openai"]
