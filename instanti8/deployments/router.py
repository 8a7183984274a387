"""Deployment registry API routes."""

from fastapi import APIRouter, Depends, HTTPException

from instanti8.deployments.schemas import (
    DeploymentRecord,
    DeploymentStats,
    ResolveStuckResponse,
    UpdateStatusRequest,
)
from instanti8.deployments.service import DeploymentNotFoundError, DeploymentService

router = APIRouter(prefix="/api/deployments", tags=["deployments"])


def get_deployment_service() -> DeploymentService:
    """Dependency placeholder, overridden at startup."""
    raise RuntimeError("DeploymentService not configured")


@router.get("")
async def list_deployments(
    service: DeploymentService = Depends(get_deployment_service),
) -> list[DeploymentRecord]:
    return await service.list_deployments()


@router.get("/stats")
async def deployment_stats(
    service: DeploymentService = Depends(get_deployment_service),
) -> DeploymentStats:
    return await service.get_stats()


@router.post("/resolve-stuck")
async def resolve_stuck(
    service: DeploymentService = Depends(get_deployment_service),
) -> ResolveStuckResponse:
    return ResolveStuckResponse(resolved=await service.resolve_stuck_deployments())


@router.get("/{deployment_id}")
async def get_deployment(
    deployment_id: str,
    service: DeploymentService = Depends(get_deployment_service),
) -> DeploymentRecord:
    record = await service.get_deployment(deployment_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Deployment not found: {deployment_id}")
    return record


@router.patch("/{deployment_id}")
async def update_deployment_status(
    deployment_id: str,
    request: UpdateStatusRequest,
    service: DeploymentService = Depends(get_deployment_service),
) -> DeploymentRecord:
    try:
        return await service.update_status(deployment_id, request.status, request.url)
    except DeploymentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
