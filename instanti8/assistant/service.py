"""AssistantService: deployment troubleshooting chat and IaC code generation.

Both operations degrade to canned responses when no LLM provider is
configured or the provider call fails, so the chat UI always gets an answer.
"""

import logging
import re
from collections.abc import Sequence

from instanti8.assistant.prompts import (
    CODE_PROMPT,
    FALLBACK_SUGGESTIONS,
    SYSTEM_PROMPT,
    fallback_code,
)
from instanti8.assistant.schemas import (
    AIResponse,
    ChatMessage,
    CodeSnippet,
    DeploymentContext,
    GeneratedCode,
)
from instanti8.providers.base import ChatParams, LLMProvider

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 5
MAX_SUGGESTIONS = 5
MAX_NEXT_STEPS = 3
MIN_CODE_LENGTH = 50
DEFAULT_CLOUD = "azure"

CHAT_PARAMS = ChatParams(temperature=0.7, max_tokens=1000)
CODE_PARAMS = ChatParams(temperature=0.3, max_tokens=1500)

# Order matters: on a tied score the earlier provider wins.
PROVIDER_KEYWORDS: dict[str, tuple[str, ...]] = {
    "kubernetes": (
        "kubernetes", "k8s", "gke", "eks", "aks", "cluster", "pod", "deployment",
        "service mesh", "ingress", "helm", "kubectl", "container orchestration",
        "namespace", "configmap",
    ),
    "aws": (
        "aws", "amazon", "s3", "ec2", "lambda", "rds", "vpc", "cloudformation", "iam",
        "elastic", "dynamo", "sqs", "sns", "cloudwatch", "route53", "elb", "alb", "ecs",
        "fargate",
    ),
    "gcp": (
        "gcp", "google cloud", "gce", "cloud storage", "compute engine", "cloud sql",
        "cloud functions", "bigquery", "cloud run", "firebase", "app engine", "gke",
        "firestore",
    ),
    "azure": (
        "azure", "microsoft", "blob", "cosmos", "app service", "sql database",
        "resource group", "virtual machine", "storage account", "function app",
        "key vault", "aks",
    ),
}
_PROVIDER_NAME_BONUS = 2

_BULLET = re.compile(r"^- (.+)$", re.MULTILINE)
_CODE_BLOCK = re.compile(r"```(\w+)\n([\s\S]*?)\n```")
_ANY_CODE_BLOCK = re.compile(r"```\w*\n[\s\S]*?\n```")
_NEXT_STEPS = re.compile(
    r"(?:next steps?|recommendations?):?\s*\n((?:(?:\d+\.|-)\s*.+\n?)+)", re.IGNORECASE
)
_STEP_MARKER = re.compile(r"^(?:\d+\.|-)\s*")
_CODE_SECTION = re.compile(r"CODE:\s*([\s\S]*?)\s*EXPLANATION:")
_EXPLANATION_SECTION = re.compile(r"EXPLANATION:\s*([\s\S]*?)$")
_FENCED = re.compile(r"```(?:\w+)?\n?([\s\S]*?)```")


def detect_cloud_provider(prompt: str) -> str:
    """Score the prompt against provider keywords; exact provider names weigh more."""
    lowered = prompt.lower()
    scores = dict.fromkeys(PROVIDER_KEYWORDS, 0)
    for provider, keywords in PROVIDER_KEYWORDS.items():
        for keyword in keywords:
            if keyword in lowered:
                scores[provider] += 1
                if keyword in PROVIDER_KEYWORDS:
                    scores[provider] += _PROVIDER_NAME_BONUS

    best = max(scores.values())
    if best == 0:
        logger.debug("No specific provider detected, defaulting to %s", DEFAULT_CLOUD)
        return DEFAULT_CLOUD
    detected = next(p for p, score in scores.items() if score == best)
    logger.debug("Detected cloud provider: %s (score: %d)", detected, best)
    return detected


def build_contextual_prompt(context: DeploymentContext) -> str:
    lines = [f"User query: {context.user_query}"]
    if context.provider:
        lines.append(f"Target provider: {context.provider}")
    if context.resource_type:
        lines.append(f"Resource type: {context.resource_type}")
    if context.error_logs:
        lines.append(f"Error logs: {context.error_logs}")
    if context.deployment_id:
        lines.append(f"Deployment ID: {context.deployment_id}")
    return "\n".join(lines)


def extract_next_steps(response: str) -> list[str]:
    match = _NEXT_STEPS.search(response)
    if not match:
        return []
    steps = [
        _STEP_MARKER.sub("", line.strip()).strip()
        for line in match.group(1).splitlines()
        if line.strip()
    ]
    return steps[:MAX_NEXT_STEPS]


def parse_chat_response(response: str) -> AIResponse:
    suggestions = _BULLET.findall(response)
    code_snippet = None
    block = _CODE_BLOCK.search(response)
    if block:
        code_snippet = CodeSnippet(language=block.group(1), code=block.group(2))

    return AIResponse(
        message=_ANY_CODE_BLOCK.sub("", response).strip(),
        suggestions=suggestions[:MAX_SUGGESTIONS] or None,
        code_snippet=code_snippet,
        next_steps=extract_next_steps(response),
    )


def extract_code(response: str) -> tuple[str | None, str | None]:
    """Return (code, explanation) from a CODE:/EXPLANATION: reply or a fenced block."""
    explanation_match = _EXPLANATION_SECTION.search(response)
    explanation = explanation_match.group(1).strip() if explanation_match else None

    code_match = _CODE_SECTION.search(response)
    if code_match:
        code = code_match.group(1).strip()
        # The CODE: section itself may still be fenced
        fenced = _FENCED.search(code)
        return (fenced.group(1).strip() if fenced else code), explanation

    fenced = _FENCED.search(response)
    if fenced:
        return fenced.group(1).strip(), explanation
    return None, explanation


class AssistantService:
    def __init__(self, provider: LLMProvider | None, *, model: str | None = None) -> None:
        self._provider = provider
        self._model = model or (provider.default_model if provider else None)

    @property
    def provider_name(self) -> str | None:
        return self._provider.name if self._provider else None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate_response(
        self, context: DeploymentContext, history: Sequence[ChatMessage] = ()
    ) -> AIResponse:
        """Answer a deployment question, with suggestions and next steps parsed out."""
        if self._provider is None:
            return self._fallback_response(context)

        messages = [
            {"role": m.role, "content": m.content} for m in list(history)[-HISTORY_WINDOW:]
        ]
        messages.append({"role": "user", "content": build_contextual_prompt(context)})

        try:
            result = await self._provider.chat(
                messages, system_prompt=SYSTEM_PROMPT, params=CHAT_PARAMS, model=self._model
            )
        except Exception:
            logger.exception("Assistant chat generation failed (provider=%s)", self.provider_name)
            return self._fallback_response(context)

        return parse_chat_response(result.content)

    async def generate_infrastructure_code(
        self,
        prompt: str,
        provider: str | None = None,
        code_type: str = "terraform",
    ) -> GeneratedCode:
        """Generate IaC for a prompt; detects the target cloud when not given."""
        target = provider or detect_cloud_provider(prompt)
        logger.info("Generating %s code for %s", code_type, target)

        if self._provider is None:
            return self._fallback_code(prompt, target, code_type)

        try:
            result = await self._provider.chat(
                [
                    {
                        "role": "user",
                        "content": CODE_PROMPT.format(
                            code_type=code_type, provider=target, prompt=prompt
                        ),
                    }
                ],
                system_prompt=SYSTEM_PROMPT,
                params=CODE_PARAMS,
                model=self._model,
            )
        except Exception:
            logger.exception("Infrastructure code generation failed (provider=%s)", self.provider_name)
            return self._fallback_code(prompt, target, code_type)

        code, explanation = extract_code(result.content)
        if not code or len(code) < MIN_CODE_LENGTH:
            logger.info("Generated code missing or too short, using fallback template")
            return self._fallback_code(prompt, target, code_type)

        return GeneratedCode(
            code=code,
            explanation=explanation or f"Generated {code_type} code for {target} based on: {prompt}",
            detected_provider=target,
        )

    # ------------------------------------------------------------------
    # Fallbacks
    # ------------------------------------------------------------------

    def _fallback_response(self, context: DeploymentContext) -> AIResponse:
        return AIResponse(
            message=(
                f"I can help you with {context.provider or 'cloud'} infrastructure deployment. "
                "Configure an AI provider API key for enhanced responses. For now, I can "
                f'provide basic guidance based on your query: "{context.user_query}"'
            ),
            suggestions=list(FALLBACK_SUGGESTIONS),
        )

    def _fallback_code(self, prompt: str, provider: str, code_type: str) -> GeneratedCode:
        return GeneratedCode(
            code=fallback_code(prompt, provider, code_type),
            explanation=(
                f'Generated {code_type} template for {provider} based on: "{prompt}". '
                "This is a basic template; configure an AI provider API key for "
                "enhanced code generation."
            ),
            detected_provider=provider,
        )
