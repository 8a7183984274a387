"""Deployment registry request/response schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DeploymentStatus = Literal["uploading", "processing", "planned", "ready", "error", "deployed"]


class DeploymentRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    provider: str
    status: DeploymentStatus
    url: str | None = None
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class UpdateStatusRequest(BaseModel):
    status: DeploymentStatus
    url: str | None = None


class DeploymentStats(BaseModel):
    total: int
    ready: int
    processing: int
    errors: int


class ResolveStuckResponse(BaseModel):
    resolved: int
