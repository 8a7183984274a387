"""Groq-hosted open-weight models behind an OpenAI-compatible endpoint."""

from instanti8.providers.openai_compat import OpenAICompatibleProvider

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class GroqProvider(OpenAICompatibleProvider):
    base_url = GROQ_BASE_URL
    suggested_models = ["llama3-8b-8192", "llama3-70b-8192", "mixtral-8x7b-32768"]
    default_model = "llama3-8b-8192"

    @property
    def name(self) -> str:
        return "groq"
