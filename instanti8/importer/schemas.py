"""Pydantic schemas for the infrastructure import API.

Field names are snake_case in Python and camelCase on the wire, matching
what the dashboard client sends and expects.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ImportOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    workspace: str | None = None
    region: str | None = None
    subscription: str | None = None
    namespace: str | None = None
    resource_group: str | None = Field(default=None, alias="resourceGroup")


class ImportConfiguration(BaseModel):
    """One import request. `type` is free-form so unknown dialects are
    reported in the result rather than rejected by validation."""

    model_config = ConfigDict(frozen=True)

    type: str
    source: str
    action: Literal["import", "convert", "deploy"] = "import"
    options: ImportOptions | None = None


class ImportResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    resource_count: int = Field(alias="resourceCount")
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    converted_config: str | None = Field(default=None, alias="convertedConfig")
    deployment_id: str | None = Field(default=None, alias="deploymentId")


class DetectRequest(BaseModel):
    source: str


class DetectionResult(BaseModel):
    type: str
