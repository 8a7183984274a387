"""Pydantic schemas for Terraform execution."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class TerraformConfig(BaseModel):
    code: str
    provider: Literal["aws", "azure", "gcp"]
    region: str
    credentials: dict[str, Any] | None = None


class TerraformExecutionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    deployment_id: str | None = Field(default=None, alias="deploymentId")
    resources: list[dict[str, Any]] | None = None
    outputs: dict[str, Any] | None = None
    error: str | None = None
    logs: list[str] = Field(default_factory=list)


class CleanupResponse(BaseModel):
    removed: list[str]
