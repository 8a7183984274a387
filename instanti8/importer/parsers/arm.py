"""Parser for Azure Resource Manager (ARM) templates. JSON only."""

import json

from instanti8.importer.models import ArmResource
from instanti8.importer.parsers.detection import ImportFormatError


def parse_arm(source: str) -> list[ArmResource]:
    """Parse an ARM template and return its top-level `resources` array.

    Malformed JSON propagates as json.JSONDecodeError; there is no YAML fallback.
    """
    template = json.loads(source)
    if not isinstance(template, dict):
        raise ImportFormatError("ARM template must be a JSON object")

    resources = template.get("resources") or []
    if not isinstance(resources, list):
        raise ImportFormatError("ARM template resources must be an array")

    parsed: list[ArmResource] = []
    for entry in resources:
        if not isinstance(entry, dict):
            raise ImportFormatError("ARM template resources must be objects")
        parsed.append(ArmResource(
            type=str(entry.get("type", "")),
            name=entry.get("name"),
            properties=entry.get("properties") or {},
            depends_on=[str(d) for d in entry.get("dependsOn") or []],
        ))
    return parsed
