"""Assistant API request/response schemas (camelCase on the wire)."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

CloudProvider = Literal["azure", "aws", "gcp", "kubernetes"]


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class DeploymentContext(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_query: str = Field(alias="userQuery")
    provider: Literal["azure", "aws", "gcp"] | None = None
    resource_type: str | None = Field(default=None, alias="resourceType")
    error_logs: str | None = Field(default=None, alias="errorLogs")
    deployment_id: str | None = Field(default=None, alias="deploymentId")


class ChatRequest(BaseModel):
    context: DeploymentContext
    history: list[ChatMessage] = Field(default_factory=list)


class CodeSnippet(BaseModel):
    language: str
    code: str
    description: str = "Generated code snippet"


class AIResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    suggestions: list[str] | None = None
    code_snippet: CodeSnippet | None = Field(default=None, alias="codeSnippet")
    next_steps: list[str] = Field(default_factory=list, alias="nextSteps")


class GenerateCodeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(min_length=1)
    provider: CloudProvider | None = None
    code_type: Literal["terraform", "pulumi"] = Field(default="terraform", alias="codeType")


class GeneratedCode(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str
    explanation: str
    detected_provider: str = Field(alias="detectedProvider")
