"""Per-dialect advisory checks on parsed resources.

All findings are warnings: an unsupported resource still imports, it just
needs attention before deployment. `errors` exists on the report so a
blocking rule can be added without changing callers.
"""

from collections.abc import Sequence

from instanti8.importer.models import RawResource, TerraformResource, ValidationReport

UNSUPPORTED_TYPES: dict[str, frozenset[str]] = {
    "terraform": frozenset({"aws_api_gateway_rest_api_policy", "aws_lambda_permission"}),
    "cloudformation": frozenset({"AWS::ApiGateway::RestApi", "AWS::Lambda::Permission"}),
    "arm": frozenset({"Microsoft.Web/sites/config"}),
    "kubernetes": frozenset({"CustomResourceDefinition"}),
}


def _has_deprecated_config(resource: TerraformResource) -> bool:
    return bool(resource.config.get("deprecated_attribute"))


def validate_resources(resources: Sequence[RawResource]) -> ValidationReport:
    """Collect warnings for unsupported types and deprecated configuration."""
    report = ValidationReport()

    for resource in resources:
        unsupported = UNSUPPORTED_TYPES.get(resource.dialect, frozenset())
        if resource.resource_type in unsupported:
            if resource.dialect == "kubernetes":
                report.warnings.append(
                    f"Kubernetes resource {resource.resource_type} may require manual configuration"
                )
            else:
                report.warnings.append(
                    f"Resource type {resource.resource_type} may require manual configuration"
                )

        if isinstance(resource, TerraformResource) and _has_deprecated_config(resource):
            report.warnings.append(f"Resource {resource.name} uses deprecated configuration")

    return report
