"""Contract tests for the Groq and OpenAI providers with mocked AsyncOpenAI clients."""

import httpx
import openai
import pytest

from instanti8.providers.base import ChatParams, ProviderError
from instanti8.providers.groq import GROQ_BASE_URL, GroqProvider
from instanti8.providers.openai import OpenAIProvider
from tests.fixtures import make_completion, make_openai_client

HELLO = [{"role": "user", "content": "Hello"}]


class TestProviderIdentity:
    def test_names(self):
        assert GroqProvider(client=make_openai_client()).name == "groq"
        assert OpenAIProvider(client=make_openai_client()).name == "openai"

    def test_default_models(self):
        assert GroqProvider(client=make_openai_client()).default_model == "llama3-8b-8192"
        assert OpenAIProvider(client=make_openai_client()).default_model == "gpt-4o-mini"

    def test_groq_model_override(self):
        provider = GroqProvider(client=make_openai_client(), model="llama3-70b-8192")
        assert provider.default_model == "llama3-70b-8192"
        assert GroqProvider.default_model == "llama3-8b-8192"

    def test_groq_client_points_at_groq(self):
        provider = GroqProvider(api_key="gsk-test")
        assert str(provider._client.base_url).startswith(GROQ_BASE_URL)


class TestChat:
    async def test_returns_content_and_usage(self):
        provider = GroqProvider(client=make_openai_client(make_completion("Hi there!")))
        result = await provider.chat(HELLO)
        assert result.content == "Hi there!"
        assert result.model == "llama3-8b-8192"
        assert result.finish_reason == "stop"
        assert (result.input_tokens, result.output_tokens) == (12, 34)
        assert result.latency_ms is not None

    async def test_none_content_becomes_empty_string(self):
        provider = OpenAIProvider(client=make_openai_client(make_completion(None)))
        result = await provider.chat(HELLO)
        assert result.content == ""

    async def test_system_prompt_is_prepended(self):
        client = make_openai_client(make_completion("ok"))
        await GroqProvider(client=client).chat(HELLO, system_prompt="Be terse.")

        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": "Be terse."},
            {"role": "user", "content": "Hello"},
        ]

    async def test_params_and_default_model(self):
        client = make_openai_client(make_completion("ok"))
        await OpenAIProvider(client=client).chat(
            HELLO, params=ChatParams(temperature=0.3, max_tokens=1500)
        )

        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 1500

    async def test_temperature_omitted_when_unset(self):
        client = make_openai_client(make_completion("ok"))
        await GroqProvider(client=client).chat(HELLO, model="mixtral-8x7b-32768")

        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "mixtral-8x7b-32768"
        assert "temperature" not in kwargs
        assert kwargs["max_tokens"] == 1000

    async def test_api_error_is_wrapped(self):
        client = make_openai_client()
        client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=httpx.Request("POST", GROQ_BASE_URL)
        )
        with pytest.raises(ProviderError, match="groq request failed") as exc_info:
            await GroqProvider(client=client).chat(HELLO)
        assert exc_info.value.provider == "groq"
