"""Shared pytest fixtures for instanti8 tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from instanti8.assistant.router import get_assistant_service
from instanti8.assistant.service import AssistantService
from instanti8.db.connection import Database
from instanti8.deployments.router import get_deployment_service
from instanti8.deployments.service import DeploymentService
from instanti8.importer.router import get_import_service
from instanti8.importer.service import InfrastructureImportService
from instanti8.main import app
from instanti8.namecheap.router import get_namecheap_client
from instanti8.providers.registry import clear_providers


@pytest.fixture
async def db():
    """In-memory database for tests."""
    database = await Database.connect(":memory:")
    yield database
    await database.close()


@pytest.fixture
async def deployment_service(db):
    return DeploymentService(db)


@pytest.fixture
async def client(deployment_service):
    """Async test client with in-memory services wired into the app.

    Tests that need a Terraform executor, an LLM provider or a registrar
    client set their own entry in app.dependency_overrides before requesting.
    """
    import_service = InfrastructureImportService()
    assistant = AssistantService(None)
    app.dependency_overrides[get_deployment_service] = lambda: deployment_service
    app.dependency_overrides[get_import_service] = lambda: import_service
    app.dependency_overrides[get_assistant_service] = lambda: assistant
    app.dependency_overrides[get_namecheap_client] = lambda: None
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _clean_provider_registry():
    clear_providers()
    yield
    clear_providers()
