"""Parser for Kubernetes manifests (multi-document YAML streams).

Documents without a `kind` are dropped. `kind: List` documents are expanded
into their `items`.
"""

from typing import Any

import yaml

from instanti8.importer.models import KubernetesResource


def _expand(doc: Any) -> list[dict]:
    if not isinstance(doc, dict) or not doc.get("kind"):
        return []
    if doc["kind"] == "List":
        return [item for item in doc.get("items") or [] if isinstance(item, dict) and item.get("kind")]
    return [doc]


def parse_kubernetes(source: str) -> list[KubernetesResource]:
    """Load every YAML document in source and return the manifests with a kind."""
    manifests: list[dict] = []
    for doc in yaml.safe_load_all(source):
        manifests.extend(_expand(doc))

    resources: list[KubernetesResource] = []
    for manifest in manifests:
        metadata = manifest.get("metadata") or {}
        resources.append(KubernetesResource(
            kind=str(manifest["kind"]),
            name=metadata.get("name"),
            namespace=metadata.get("namespace"),
            spec=manifest.get("spec") or {},
        ))
    return resources
