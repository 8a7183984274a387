"""Chat completions over the OpenAI wire protocol.

Groq and OpenAI both speak it, so a subclass only declares its name, its
base URL and its models.
"""

import logging
import time
from collections.abc import Sequence
from typing import Any

import openai
from openai import AsyncOpenAI

from instanti8.providers.base import ChatCompletion, ChatParams, LLMProvider, ProviderError

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider(LLMProvider):
    base_url: str | None = None

    def __init__(
        self,
        *,
        client: AsyncOpenAI | None = None,
        api_key: str | None = None,
        model: str | None = None,
    ) -> None:
        self._client = client or AsyncOpenAI(api_key=api_key, base_url=self.base_url)
        if model:
            self.default_model = model

    async def chat(
        self,
        messages: Sequence[dict[str, str]],
        *,
        system_prompt: str | None = None,
        params: ChatParams | None = None,
        model: str | None = None,
    ) -> ChatCompletion:
        kwargs = self._completion_kwargs(
            messages, system_prompt, params or ChatParams(), model or self.default_model
        )
        start = time.monotonic()
        try:
            response = await self._client.chat.completions.create(**kwargs)
        except openai.APIError as e:
            logger.warning("%s chat completion failed: %s", self.name, e)
            raise ProviderError(self.name, str(e)) from e
        latency_ms = int((time.monotonic() - start) * 1000)

        choice = response.choices[0]
        usage = response.usage
        return ChatCompletion(
            content=choice.message.content or "",
            model=response.model,
            finish_reason=choice.finish_reason,
            input_tokens=usage.prompt_tokens if usage is not None else None,
            output_tokens=usage.completion_tokens if usage is not None else None,
            latency_ms=latency_ms,
        )

    @staticmethod
    def _completion_kwargs(
        messages: Sequence[dict[str, str]],
        system_prompt: str | None,
        params: ChatParams,
        model: str,
    ) -> dict[str, Any]:
        wire_messages = [{"role": "system", "content": system_prompt}] if system_prompt else []
        wire_messages.extend({"role": m["role"], "content": m["content"]} for m in messages)

        kwargs: dict[str, Any] = {
            "model": model,
            "messages": wire_messages,
            "max_tokens": params.max_tokens,
        }
        if params.temperature is not None:
            kwargs["temperature"] = params.temperature
        return kwargs
