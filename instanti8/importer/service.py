"""InfrastructureImportService: parses IaC sources, validates, converts, deploys."""

import logging
from collections.abc import Callable, Sequence

from instanti8.importer.converter import convert_to_universal
from instanti8.importer.models import RawResource
from instanti8.importer.parsers.arm import parse_arm
from instanti8.importer.parsers.cloudformation import parse_cloudformation
from instanti8.importer.parsers.detection import detect_dialect
from instanti8.importer.parsers.kubernetes import parse_kubernetes
from instanti8.importer.parsers.terraform import parse_terraform
from instanti8.importer.schemas import DetectionResult, ImportConfiguration, ImportResult
from instanti8.importer.validation import validate_resources
from instanti8.terraform.executor import TerraformExecutor
from instanti8.terraform.schemas import TerraformConfig

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"
DEPLOY_UNSUPPORTED_WARNING = "Deploy action is only supported for Terraform sources"

Parser = Callable[[str], Sequence[RawResource]]

# dialect -> (parser, label used in "<label> import failed: ..." errors)
_HANDLERS: dict[str, tuple[Parser, str]] = {
    "terraform": (parse_terraform, "Terraform"),
    "cloudformation": (parse_cloudformation, "CloudFormation"),
    "arm": (parse_arm, "ARM template"),
    "kubernetes": (parse_kubernetes, "Kubernetes"),
}

_PROVIDER_PREFIXES = (("aws_", "aws"), ("azurerm_", "azure"), ("google_", "gcp"))


def infer_provider(resources: Sequence[RawResource]) -> str:
    """Cloud provider of the first resource with a known type prefix, else aws."""
    for resource in resources:
        for prefix, provider in _PROVIDER_PREFIXES:
            if resource.resource_type.startswith(prefix):
                return provider
    return "aws"


class InfrastructureImportService:
    def __init__(self, executor: TerraformExecutor | None = None) -> None:
        self._executor = executor

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def import_configuration(self, config: ImportConfiguration) -> ImportResult:
        """Run one import request. Failures are reported in the result, never raised."""
        handler = _HANDLERS.get(config.type)
        if handler is None:
            return ImportResult(
                success=False,
                resource_count=0,
                errors=[f"Unsupported import type: {config.type}"],
            )

        parse, label = handler
        try:
            resources = parse(config.source)
            report = validate_resources(resources)
            warnings = list(report.warnings)
            errors = list(report.errors)

            converted_config = None
            if config.action == "convert":
                converted_config = convert_to_universal(resources, config.type)

            deployment_id = None
            if config.action == "deploy":
                deployment_id = await self._deploy(config, resources, warnings, errors)
        except Exception as e:
            logger.warning("%s import failed: %s", label, e)
            return ImportResult(
                success=False,
                resource_count=0,
                errors=[f"{label} import failed: {e}"],
            )

        return ImportResult(
            success=not errors,
            resource_count=len(resources),
            warnings=warnings,
            errors=errors,
            converted_config=converted_config,
            deployment_id=deployment_id,
        )

    async def detect(self, source: str) -> DetectionResult:
        """Guess the dialect of a source. Raises ImportFormatError when unrecognized."""
        return DetectionResult(type=detect_dialect(source))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _deploy(
        self,
        config: ImportConfiguration,
        resources: Sequence[RawResource],
        warnings: list[str],
        errors: list[str],
    ) -> str | None:
        if config.type != "terraform" or self._executor is None:
            warnings.append(DEPLOY_UNSUPPORTED_WARNING)
            return None

        region = (config.options.region if config.options else None) or DEFAULT_REGION
        result = await self._executor.execute(
            TerraformConfig(
                code=config.source,
                provider=infer_provider(resources),
                region=region,
            )
        )
        if not result.success:
            errors.append(f"Deployment failed: {result.error}")
            return None
        return result.deployment_id
