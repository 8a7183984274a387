"""Endpoint tests for /api/ai."""

from instanti8.assistant.router import get_assistant_service
from instanti8.assistant.service import AssistantService
from instanti8.main import app
from instanti8.providers.groq import GroqProvider
from tests.fixtures import make_completion, make_openai_client


class TestChatEndpoint:
    async def test_fallback_chat(self, client):
        resp = await client.post(
            "/api/ai/chat",
            json={"context": {"userQuery": "How do I add a VPC?", "provider": "aws"}},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert "How do I add a VPC?" in body["message"]
        assert body["nextSteps"] == []
        assert body["codeSnippet"] is None

    async def test_chat_with_provider(self, client):
        openai_client = make_openai_client(make_completion("Use a module.\n- aws_vpc module"))
        service = AssistantService(GroqProvider(client=openai_client))
        app.dependency_overrides[get_assistant_service] = lambda: service

        resp = await client.post(
            "/api/ai/chat",
            json={
                "context": {"userQuery": "VPC?"},
                "history": [{"role": "assistant", "content": "Hi"}],
            },
        )

        assert resp.json()["suggestions"] == ["aws_vpc module"]
        messages = openai_client.chat.completions.create.await_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["system", "assistant", "user"]

    async def test_missing_query_is_rejected(self, client):
        resp = await client.post("/api/ai/chat", json={"context": {}})
        assert resp.status_code == 422


class TestGenerateCodeEndpoint:
    async def test_generate_code(self, client):
        resp = await client.post(
            "/api/ai/generate-code", json={"prompt": "a storage account", "codeType": "terraform"}
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["detectedProvider"] == "azure"
        assert "azurerm" in body["code"]

    async def test_empty_prompt_is_rejected(self, client):
        resp = await client.post("/api/ai/generate-code", json={"prompt": ""})
        assert resp.status_code == 422
