"""Endpoint tests for /api/terraform."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from instanti8.main import app
from instanti8.terraform.router import get_terraform_executor
from instanti8.terraform.schemas import TerraformExecutionResult

CONFIG = {"code": "terraform {}", "provider": "gcp", "region": "europe-west1"}


@pytest.fixture
def executor(client):
    executor = MagicMock()
    executor.execute = AsyncMock()
    executor.get_deployment_status = AsyncMock()
    executor.destroy_deployment = AsyncMock()
    executor.cleanup_workspace = MagicMock(return_value=["old-1"])
    app.dependency_overrides[get_terraform_executor] = lambda: executor
    return executor


class TestExecuteEndpoint:
    async def test_successful_plan_is_recorded(self, client, executor, deployment_service):
        executor.execute.return_value = TerraformExecutionResult(
            success=True,
            deployment_id="6f1c1c1e-8d1b-4a5e-9a57-0f5f3e1c2b11",
            resources=[{"name": "google_storage_bucket.b", "status": "planned"}],
            outputs={},
            logs=["[t] done"],
        )

        resp = await client.post("/api/terraform/execute", json=CONFIG)

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["deploymentId"] == "6f1c1c1e-8d1b-4a5e-9a57-0f5f3e1c2b11"
        record = await deployment_service.get_deployment(body["deploymentId"])
        assert record is not None
        assert record.status == "planned"
        assert record.provider == "gcp"

    async def test_failed_plan_is_not_recorded(self, client, executor, deployment_service):
        executor.execute.return_value = TerraformExecutionResult(
            success=False, error="Terraform code validation failed"
        )

        resp = await client.post("/api/terraform/execute", json=CONFIG)

        assert resp.status_code == 200
        assert resp.json()["error"] == "Terraform code validation failed"
        assert await deployment_service.list_deployments() == []

    async def test_unknown_provider_is_rejected(self, client, executor):
        resp = await client.post(
            "/api/terraform/execute", json={**CONFIG, "provider": "digitalocean"}
        )
        assert resp.status_code == 422
        executor.execute.assert_not_awaited()


class TestDeploymentEndpoints:
    async def test_status(self, client, executor):
        executor.get_deployment_status.return_value = TerraformExecutionResult(
            success=True, deployment_id="abc", resources=[]
        )
        resp = await client.get("/api/terraform/abc/status")
        assert resp.status_code == 200
        executor.get_deployment_status.assert_awaited_once_with("abc")

    async def test_destroy(self, client, executor):
        executor.destroy_deployment.return_value = TerraformExecutionResult(
            success=False, error="invalid deployment id 'abc'"
        )
        resp = await client.post("/api/terraform/abc/destroy")
        assert resp.json()["success"] is False

    async def test_cleanup(self, client, executor):
        resp = await client.post("/api/terraform/cleanup")
        assert resp.json() == {"removed": ["old-1"]}
