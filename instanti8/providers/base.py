"""LLM provider interface used by the assistant."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pydantic import BaseModel


class ChatParams(BaseModel):
    temperature: float | None = None
    max_tokens: int = 1000


class ChatCompletion(BaseModel):
    """A finished chat completion, reduced to what the assistant consumes."""

    content: str
    model: str
    finish_reason: str | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None
    latency_ms: int | None = None


class ProviderError(Exception):
    """The upstream LLM API rejected the request or could not be reached."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"{provider} request failed: {message}")


class LLMProvider(ABC):
    suggested_models: list[str] = []
    default_model: str = ""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, e.g. 'groq'."""
        ...

    @abstractmethod
    async def chat(
        self,
        messages: Sequence[dict[str, str]],
        *,
        system_prompt: str | None = None,
        params: ChatParams | None = None,
        model: str | None = None,
    ) -> ChatCompletion:
        """Run one non-streaming chat completion. Raises ProviderError."""
        ...
