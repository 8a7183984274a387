"""Conversion of parsed resources into the universal JSON envelope."""

import hashlib
import json
from collections.abc import Sequence
from dataclasses import asdict
from datetime import UTC, datetime

from instanti8.importer.models import (
    ArmResource,
    CloudFormationResource,
    KubernetesResource,
    RawResource,
    TerraformResource,
    UniversalResource,
)

UNIVERSAL_FORMAT_VERSION = "1.0"
UNNAMED_RESOURCE = "unnamed-resource"

TYPE_MAPPINGS: dict[str, dict[str, str]] = {
    "terraform": {
        "aws_instance": "compute.instance",
        "aws_s3_bucket": "storage.bucket",
        "aws_rds_instance": "database.instance",
    },
    "cloudformation": {
        "AWS::EC2::Instance": "compute.instance",
        "AWS::S3::Bucket": "storage.bucket",
        "AWS::RDS::DBInstance": "database.instance",
    },
    "arm": {
        "Microsoft.Compute/virtualMachines": "compute.instance",
        "Microsoft.Storage/storageAccounts": "storage.account",
        "Microsoft.Sql/servers": "database.server",
    },
    "kubernetes": {
        "Deployment": "workload.deployment",
        "Service": "network.service",
        "ConfigMap": "configuration.map",
    },
}


def map_universal_type(resource_type: str, source_type: str) -> str:
    """Map a dialect type to its universal type, else "<source>.<type>"."""
    mapped = TYPE_MAPPINGS.get(source_type, {}).get(resource_type)
    return mapped or f"{source_type}.{resource_type}"


def resource_id(resource: RawResource, source_type: str, position: int) -> str:
    """Build "<type>_<name>".

    Without a name the suffix is a short hash of (source, type, position), so
    converting the same source twice yields the same IDs.
    """
    name = resource.resource_name
    if name is None:
        digest = hashlib.sha1(
            f"{source_type}:{resource.resource_type}:{position}".encode()
        ).hexdigest()
        name = digest[:9]
    return f"{resource.resource_type}_{name}"


def _properties(resource: RawResource) -> dict:
    match resource:
        case TerraformResource(config=config):
            return dict(config)
        case CloudFormationResource(properties=props) | ArmResource(properties=props):
            return dict(props)
        case KubernetesResource(spec=spec):
            return dict(spec)
    return {}


def _dependencies(resource: RawResource) -> list[str]:
    match resource:
        case TerraformResource(depends_on=deps) | CloudFormationResource(depends_on=deps) | ArmResource(
            depends_on=deps
        ):
            return list(deps)
        case KubernetesResource():
            return []
    return []


def to_universal(resource: RawResource, source_type: str, position: int) -> UniversalResource:
    return UniversalResource(
        id=resource_id(resource, source_type, position),
        type=map_universal_type(resource.resource_type, source_type),
        name=resource.resource_name or UNNAMED_RESOURCE,
        properties=_properties(resource),
        dependencies=_dependencies(resource),
    )


def convert_to_universal(
    resources: Sequence[RawResource],
    source_type: str,
    *,
    now: datetime | None = None,
) -> str:
    """Serialize resources as the pretty-printed universal envelope."""
    timestamp = (now or datetime.now(UTC)).isoformat()
    envelope = {
        "version": UNIVERSAL_FORMAT_VERSION,
        "source": source_type,
        "timestamp": timestamp,
        "resources": [
            asdict(to_universal(resource, source_type, i))
            for i, resource in enumerate(resources)
        ],
    }
    return json.dumps(envelope, indent=2, default=str)
