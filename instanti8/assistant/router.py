"""AI assistant API routes."""

from fastapi import APIRouter, Depends

from instanti8.assistant.schemas import AIResponse, ChatRequest, GenerateCodeRequest, GeneratedCode
from instanti8.assistant.service import AssistantService

router = APIRouter(prefix="/api/ai", tags=["assistant"])


def get_assistant_service() -> AssistantService:
    """Dependency placeholder, overridden at startup."""
    raise RuntimeError("AssistantService not configured")


@router.post("/chat")
async def chat(
    request: ChatRequest,
    service: AssistantService = Depends(get_assistant_service),
) -> AIResponse:
    return await service.generate_response(request.context, request.history)


@router.post("/generate-code")
async def generate_code(
    request: GenerateCodeRequest,
    service: AssistantService = Depends(get_assistant_service),
) -> GeneratedCode:
    """Generate Terraform or Pulumi code from a natural-language prompt."""
    return await service.generate_infrastructure_code(
        request.prompt, request.provider, request.code_type
    )
