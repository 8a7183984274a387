"""Parser for Terraform HCL sources.

This is a line scanner, not an HCL grammar. It recognizes
`resource "<TYPE>" "<NAME>"` headers and tracks brace depth (braces inside
string literals and after `#` comments are ignored) to find where each
resource block ends. Simple `key = value` attributes directly inside the
resource body are captured into `config`; nested blocks are skipped.
A resource still open at end of input is discarded.
"""

import re
from typing import Any

from instanti8.importer.models import TerraformResource

_RESOURCE_HEADER = re.compile(r'^resource\s+"([^"]+)"\s+"([^"]+)"')
_ATTRIBUTE = re.compile(r"^([A-Za-z_][\w-]*)\s*=\s*(.+)$")
_QUOTED = re.compile(r'^"((?:[^"\\]|\\.)*)"')


def _count_braces(text: str) -> tuple[int, int]:
    """Count (opening, closing) braces outside string literals and comments."""
    opens = closes = 0
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "#":
            break
        elif ch == "{":
            opens += 1
        elif ch == "}":
            closes += 1
    return opens, closes


def _parse_value(raw: str) -> Any:
    """Convert a single-line HCL expression into a Python value where obvious."""
    raw = raw.strip()
    quoted = _QUOTED.match(raw)
    if quoted:
        return quoted.group(1)
    raw = raw.split("#", 1)[0].strip()
    if raw in ("true", "false"):
        return raw == "true"
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    if raw.startswith("[") and raw.endswith("]"):
        items = raw[1:-1].split(",")
        return [item.strip().strip('"') for item in items if item.strip()]
    # References and function calls stay as expression text
    return raw


def parse_terraform(source: str) -> list[TerraformResource]:
    """Scan HCL source and return one TerraformResource per resource block."""
    resources: list[TerraformResource] = []
    current: TerraformResource | None = None
    depth = 0
    opened = False

    for line in source.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(("#", "//")):
            continue

        if current is None:
            header = _RESOURCE_HEADER.match(stripped)
            if not header:
                continue
            current = TerraformResource(type=header.group(1), name=header.group(2))
            depth = 0
            opened = False
            brace_text = stripped[header.end():]
        else:
            brace_text = stripped
            if depth == 1:
                _capture_attribute(current, stripped)

        opens, closes = _count_braces(brace_text)
        if opens:
            opened = True
        depth += opens - closes

        if opened and depth <= 0:
            resources.append(current)
            current = None
            depth = 0

    return resources


def _capture_attribute(resource: TerraformResource, line: str) -> None:
    """Record a top-level `key = value` line of a resource body."""
    if "{" in line or "}" in line:
        opens, closes = _count_braces(line)
        if opens or closes:
            return
    match = _ATTRIBUTE.match(line)
    if not match:
        return
    raw = match.group(2).strip()
    # Multi-line lists, calls and heredocs are not captured
    if raw.endswith(("[", "(")) or raw.startswith("<<"):
        return
    key, value = match.group(1), _parse_value(raw)
    if key == "depends_on":
        resource.depends_on = value if isinstance(value, list) else [str(value)]
    else:
        resource.config[key] = value
