"""Auto-detect the infrastructure dialect of a raw configuration source."""

import json
import re
from typing import Any

import yaml

_TERRAFORM_BLOCK = re.compile(
    r'^\s*(resource|provider|terraform|module|variable)\b[^\n]*\{', re.MULTILINE
)


class ImportFormatError(Exception):
    """Raised when a source cannot be parsed or its dialect cannot be detected."""


class _TolerantLoader(yaml.SafeLoader):
    """SafeLoader that accepts any local tag (CloudFormation's !Ref, !Sub, ...)."""


def _construct_untagged(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> Any:
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_mapping(node, deep=True)


_TolerantLoader.add_multi_constructor("!", _construct_untagged)


def _load_structured(source: str) -> list[Any]:
    """Parse source as JSON, else as a (possibly multi-document) YAML stream."""
    try:
        return [json.loads(source)]
    except json.JSONDecodeError:
        pass
    try:
        return [doc for doc in yaml.load_all(source, Loader=_TolerantLoader) if doc is not None]
    except yaml.YAMLError:
        return []


def detect_dialect(source: str) -> str:
    """Detect the dialect of a configuration source.

    Returns "terraform", "cloudformation", "arm" or "kubernetes".
    Raises ImportFormatError for unrecognized sources.
    """
    if not source.strip():
        raise ImportFormatError("Empty source, nothing to import")

    if _TERRAFORM_BLOCK.search(source):
        return "terraform"

    docs = _load_structured(source)
    if not docs:
        raise ImportFormatError("Unrecognized format")

    first = docs[0]
    if isinstance(first, dict):
        if "AWSTemplateFormatVersion" in first or "Resources" in first:
            return "cloudformation"

        if "deploymentTemplate" in str(first.get("$schema", "")):
            return "arm"
        resources = first.get("resources")
        if isinstance(resources, list) and any(
            isinstance(r, dict) and str(r.get("type", "")).lower().startswith("microsoft.")
            for r in resources
        ):
            return "arm"

    if all(isinstance(d, dict) and "apiVersion" in d and "kind" in d for d in docs):
        return "kubernetes"

    raise ImportFormatError("Unrecognized format")
