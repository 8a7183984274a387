"""Terraform execution API routes."""

import logging

from fastapi import APIRouter, Depends

from instanti8.deployments.router import get_deployment_service
from instanti8.deployments.service import DeploymentService
from instanti8.terraform.executor import TerraformExecutor
from instanti8.terraform.schemas import CleanupResponse, TerraformConfig, TerraformExecutionResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/terraform", tags=["terraform"])


def get_terraform_executor() -> TerraformExecutor:
    """Dependency placeholder, overridden at startup."""
    raise RuntimeError("TerraformExecutor not configured")


@router.post("/execute")
async def execute_terraform(
    config: TerraformConfig,
    executor: TerraformExecutor = Depends(get_terraform_executor),
    deployments: DeploymentService = Depends(get_deployment_service),
) -> TerraformExecutionResult:
    """Write a new workspace and plan it. Successful plans are recorded as `planned`."""
    result = await executor.execute(config)
    if result.success and result.deployment_id:
        await deployments.record_deployment(result.deployment_id, config.provider, "planned")
    return result


@router.get("/{deployment_id}/status")
async def deployment_status(
    deployment_id: str,
    executor: TerraformExecutor = Depends(get_terraform_executor),
) -> TerraformExecutionResult:
    return await executor.get_deployment_status(deployment_id)


@router.post("/{deployment_id}/destroy")
async def destroy_deployment(
    deployment_id: str,
    executor: TerraformExecutor = Depends(get_terraform_executor),
) -> TerraformExecutionResult:
    """Plan the destruction of a deployment (the plan is not applied)."""
    return await executor.destroy_deployment(deployment_id)


@router.post("/cleanup")
async def cleanup_workspace(
    executor: TerraformExecutor = Depends(get_terraform_executor),
) -> CleanupResponse:
    return CleanupResponse(removed=executor.cleanup_workspace())
