"""OpenAI chat completions, used when no Groq key is configured."""

from instanti8.providers.openai_compat import OpenAICompatibleProvider


class OpenAIProvider(OpenAICompatibleProvider):
    suggested_models = ["gpt-4o-mini", "gpt-4o"]
    default_model = "gpt-4o-mini"

    @property
    def name(self) -> str:
        return "openai"
