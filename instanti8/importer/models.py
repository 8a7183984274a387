"""Intermediate representation for imported infrastructure configurations.

Every dialect parser produces its own resource dataclass. Validators and the
universal converter only go through the shared accessors (dialect,
resource_type, resource_name), so dialect-specific field names stay inside
the parsers.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

Dialect = Literal["terraform", "cloudformation", "arm", "kubernetes"]

DIALECTS: tuple[str, ...] = ("terraform", "cloudformation", "arm", "kubernetes")


@dataclass
class TerraformResource:
    """A `resource "<type>" "<name>" { ... }` block."""

    type: str
    name: str
    config: dict[str, Any] = field(default_factory=dict)
    depends_on: list[str] = field(default_factory=list)

    dialect: Dialect = field(default="terraform", init=False)

    @property
    def resource_type(self) -> str:
        return self.type

    @property
    def resource_name(self) -> str | None:
        return self.name or None


@dataclass
class CloudFormationResource:
    """An entry of a template's `Resources` mapping, keyed by logical ID."""

    logical_id: str
    type: str
    properties: dict[str, Any] = field(default_factory=dict)
    depends_on: list[str] = field(default_factory=list)

    dialect: Dialect = field(default="cloudformation", init=False)

    @property
    def resource_type(self) -> str:
        return self.type

    @property
    def resource_name(self) -> str | None:
        return self.logical_id or None


@dataclass
class ArmResource:
    """An element of an ARM template's `resources` array."""

    type: str
    name: str | None
    properties: dict[str, Any] = field(default_factory=dict)
    depends_on: list[str] = field(default_factory=list)

    dialect: Dialect = field(default="arm", init=False)

    @property
    def resource_type(self) -> str:
        return self.type

    @property
    def resource_name(self) -> str | None:
        return self.name or None


@dataclass
class KubernetesResource:
    """A single manifest document with a `kind`."""

    kind: str
    name: str | None
    namespace: str | None = None
    spec: dict[str, Any] = field(default_factory=dict)

    dialect: Dialect = field(default="kubernetes", init=False)

    @property
    def resource_type(self) -> str:
        return self.kind

    @property
    def resource_name(self) -> str | None:
        return self.name or None


RawResource = TerraformResource | CloudFormationResource | ArmResource | KubernetesResource


@dataclass
class UniversalResource:
    """One resource in the dialect-independent envelope."""

    id: str
    type: str  # dot-namespaced, e.g. "compute.instance"
    name: str
    properties: dict[str, Any] = field(default_factory=dict)
    dependencies: list[str] = field(default_factory=list)


@dataclass
class ValidationReport:
    """Advisory findings for a parsed resource list."""

    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
