"""Parser for AWS CloudFormation templates (JSON or YAML).

JSON is tried first; on failure the source is read as YAML. Short-form
intrinsic tags are expanded to their long form (`!Ref X` becomes
`{"Ref": "X"}`, `!GetAtt A.B` becomes `{"Fn::GetAtt": ["A", "B"]}`).
"""

import json
from typing import Any

import yaml

from instanti8.importer.models import CloudFormationResource
from instanti8.importer.parsers.detection import ImportFormatError


class _CloudFormationLoader(yaml.SafeLoader):
    """SafeLoader that understands CloudFormation short-form intrinsic tags."""


def _construct_intrinsic(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> dict:
    name = "Ref" if tag_suffix == "Ref" else f"Fn::{tag_suffix}"
    value: Any
    if isinstance(node, yaml.ScalarNode):
        value = loader.construct_scalar(node)
        if tag_suffix == "GetAtt":
            value = str(value).split(".", 1)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)
    return {name: value}


_CloudFormationLoader.add_multi_constructor("!", _construct_intrinsic)


def load_template(source: str) -> dict:
    """Load a CloudFormation template from JSON or YAML text."""
    try:
        template = json.loads(source)
    except json.JSONDecodeError:
        try:
            template = yaml.load(source, Loader=_CloudFormationLoader)
        except yaml.YAMLError as e:
            raise ImportFormatError(f"Invalid JSON or YAML: {e}") from e

    if not isinstance(template, dict):
        raise ImportFormatError("Template must be a JSON or YAML object")
    return template


def _depends_on(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def parse_cloudformation(source: str) -> list[CloudFormationResource]:
    """Parse a template and return one resource per `Resources` entry."""
    template = load_template(source)
    resources = template.get("Resources") or {}
    if not isinstance(resources, dict):
        raise ImportFormatError("Resources must be a mapping of logical IDs")

    parsed: list[CloudFormationResource] = []
    for logical_id, definition in resources.items():
        if not isinstance(definition, dict):
            raise ImportFormatError(f"Resource {logical_id} must be a mapping")
        parsed.append(CloudFormationResource(
            logical_id=str(logical_id),
            type=str(definition.get("Type", "")),
            properties=definition.get("Properties") or {},
            depends_on=_depends_on(definition.get("DependsOn")),
        ))
    return parsed
