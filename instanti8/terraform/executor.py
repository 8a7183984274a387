"""Terraform executor: one workspace directory per deployment, init/validate/plan.

Execution stops at `terraform plan`. Nothing in this module runs
`terraform apply`, so neither `execute` nor `destroy_deployment` changes real
infrastructure; they produce plan files only.
"""

import asyncio
import json
import logging
import os
import re
import shutil
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

from instanti8.terraform.schemas import TerraformConfig, TerraformExecutionResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 300.0
WORKSPACE_MAX_AGE = timedelta(hours=24)

# Dashboard provider names -> Terraform registry provider names
REGISTRY_PROVIDERS = {"aws": "aws", "azure": "azurerm", "gcp": "google"}

_REQUIRED_BLOCKS = (
    (re.compile(r"terraform\s*\{"), "terraform block"),
    (re.compile(r'provider\s+"\w+"'), "provider block"),
    (re.compile(r'resource\s+"\w+"'), "resource block"),
)
_INLINE_SECRETS = (
    re.compile(r'password\s*=\s*"[^"]*"', re.IGNORECASE),
    re.compile(r'secret\s*=\s*"[^"]*"', re.IGNORECASE),
    re.compile(r'key\s*=\s*"[^"]*"', re.IGNORECASE),
)
_PLANNED_CHANGE = re.compile(r"# (\S+) will be (created|destroyed|updated in-place)")
_PLAN_STATUSES = {
    "created": "planned",
    "destroyed": "planned-destroy",
    "updated in-place": "planned-update",
}
_OUTPUT_LINE = re.compile(r"^[+~-]?\s*(\w+)\s*=\s*(.+)$")


class TerraformCommandError(Exception):
    """A terraform command could not be started, failed, or timed out."""


@dataclass
class CodeValidation:
    valid: bool
    reason: str | None = None


@dataclass
class ExecutionLog:
    """Per-call log buffer returned to the caller; also mirrored to the logger."""

    lines: list[str] = field(default_factory=list)

    def write(self, message: str) -> None:
        self.lines.append(f"[{datetime.now(UTC).isoformat()}] {message}")
        logger.info("%s", message)


def parse_plan_output(stdout: str) -> tuple[list[dict[str, Any]], dict[str, Any]]:
    """Extract planned resource changes and output values from `terraform plan` text."""
    resources = [
        {"name": match.group(1), "status": _PLAN_STATUSES[match.group(2)]}
        for match in _PLANNED_CHANGE.finditer(stdout)
    ]

    outputs: dict[str, Any] = {}
    in_outputs = False
    for line in stdout.splitlines():
        stripped = line.strip()
        if stripped.startswith("Changes to Outputs:"):
            in_outputs = True
            continue
        if not in_outputs:
            continue
        if not stripped:
            # A blank line ends the outputs section
            if outputs:
                break
            continue
        match = _OUTPUT_LINE.match(stripped)
        if match:
            outputs[match.group(1)] = match.group(2).replace('"', "").strip()

    return resources, outputs


def render_versions_tf(provider: str) -> str:
    registry_name = REGISTRY_PROVIDERS.get(provider, provider)
    return f"""
terraform {{
  required_version = ">= 1.0"
  required_providers {{
    {registry_name} = {{
      source  = "hashicorp/{registry_name}"
      version = "~> 5.0"
    }}
  }}
}}
"""


class TerraformExecutor:
    """Runs terraform in an isolated directory per generated deployment ID.

    Commands within one deployment run strictly in sequence. Each command is
    bounded by `timeout` seconds; there is no retry.
    """

    def __init__(
        self,
        workspace_root: Path,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        terraform_bin: str = "terraform",
    ) -> None:
        self._root = Path(workspace_root)
        self._timeout = timeout
        self._terraform_bin = terraform_bin

    @property
    def workspace_root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @staticmethod
    def validate_code(code: str) -> CodeValidation:
        """Pattern check: required blocks present, no inline credential literals.

        This is a textual check, not semantic validation; `terraform validate`
        runs afterwards.
        """
        missing = [label for pattern, label in _REQUIRED_BLOCKS if not pattern.search(code)]
        if missing:
            return CodeValidation(False, f"missing required blocks: {', '.join(missing)}")
        if any(pattern.search(code) for pattern in _INLINE_SECRETS):
            return CodeValidation(False, "potential security issues detected")
        return CodeValidation(True)

    async def execute(self, config: TerraformConfig) -> TerraformExecutionResult:
        """Validate, write, init, validate and plan a new deployment."""
        deployment_id = str(uuid4())
        log = ExecutionLog()

        try:
            log.write(f"Starting Terraform execution for deployment {deployment_id}")

            validation = self.validate_code(config.code)
            if not validation.valid:
                log.write(f"Terraform code validation failed: {validation.reason}")
                return TerraformExecutionResult(
                    success=False,
                    error="Terraform code validation failed",
                    logs=log.lines,
                )
            log.write("Terraform code validation passed")

            self._ensure_workspace(log)
            deployment_dir = self._write_files(config, deployment_id, log)

            log.write("Initializing Terraform...")
            await self._run(["init", "-no-color"], deployment_dir, log)

            log.write("Validating Terraform configuration...")
            await self._run(["validate", "-no-color"], deployment_dir, log)

            log.write("Planning Terraform deployment...")
            stdout, _ = await self._run(["plan", "-no-color", "-out=tfplan"], deployment_dir, log)

            resources, outputs = parse_plan_output(stdout)
            log.write(f"Parsed {len(resources)} resources and {len(outputs)} outputs")
            log.write(f"Terraform execution completed successfully for deployment {deployment_id}")

            return TerraformExecutionResult(
                success=True,
                deployment_id=deployment_id,
                resources=resources,
                outputs=outputs,
                logs=log.lines,
            )
        except (TerraformCommandError, OSError) as e:
            log.write(f"Terraform execution failed: {e}")
            return TerraformExecutionResult(success=False, error=str(e), logs=log.lines)

    async def get_deployment_status(self, deployment_id: str) -> TerraformExecutionResult:
        """Read the current state of a deployment with `terraform show -json`."""
        log = ExecutionLog()
        try:
            deployment_dir = self._existing_deployment_dir(deployment_id)
            stdout, _ = await self._run(["show", "-json"], deployment_dir, log)

            resources: list[dict[str, Any]] = []
            try:
                state = json.loads(stdout)
                values = state.get("values") or {}
                resources = (values.get("root_module") or {}).get("resources") or []
            except (json.JSONDecodeError, AttributeError):
                log.write("Could not parse Terraform state JSON")

            return TerraformExecutionResult(
                success=True,
                deployment_id=deployment_id,
                resources=resources,
                logs=log.lines,
            )
        except (TerraformCommandError, OSError, ValueError) as e:
            return TerraformExecutionResult(
                success=False,
                error=f"Deployment {deployment_id} not found or inaccessible: {e}",
                logs=log.lines,
            )

    async def destroy_deployment(self, deployment_id: str) -> TerraformExecutionResult:
        """Plan the destruction of a deployment. The destroy plan is never applied."""
        log = ExecutionLog()
        try:
            deployment_dir = self._existing_deployment_dir(deployment_id)
            log.write(f"Destroying Terraform deployment {deployment_id}")
            await self._run(
                ["plan", "-destroy", "-no-color", "-out=destroy.tfplan"], deployment_dir, log
            )
            log.write(f"Terraform destroy completed for deployment {deployment_id}")
            return TerraformExecutionResult(
                success=True, deployment_id=deployment_id, logs=log.lines
            )
        except (TerraformCommandError, OSError, ValueError) as e:
            log.write(f"Terraform destroy failed: {e}")
            return TerraformExecutionResult(success=False, error=str(e), logs=log.lines)

    def cleanup_workspace(self, max_age: timedelta = WORKSPACE_MAX_AGE) -> list[str]:
        """Remove deployment directories not modified within max_age.

        Returns the removed deployment IDs. Errors are logged, not raised.
        """
        removed: list[str] = []
        if not self._root.is_dir():
            return removed

        cutoff = time.time() - max_age.total_seconds()
        try:
            for entry in self._root.iterdir():
                if entry.is_dir() and entry.stat().st_mtime < cutoff:
                    shutil.rmtree(entry)
                    logger.info("Cleaned up old deployment directory: %s", entry.name)
                    removed.append(entry.name)
        except OSError:
            logger.exception("Workspace cleanup error")
        return removed

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _ensure_workspace(self, log: ExecutionLog) -> None:
        if not self._root.is_dir():
            self._root.mkdir(parents=True, exist_ok=True)
            log.write(f"Created Terraform working directory: {self._root}")

    def _existing_deployment_dir(self, deployment_id: str) -> Path:
        """Resolve a deployment directory. IDs must be UUIDs so paths stay under the root."""
        try:
            canonical = str(UUID(deployment_id))
        except ValueError as e:
            raise ValueError(f"invalid deployment id {deployment_id!r}") from e
        deployment_dir = self._root / canonical
        if not deployment_dir.is_dir():
            raise FileNotFoundError(f"no workspace directory {deployment_dir}")
        return deployment_dir

    def _write_files(self, config: TerraformConfig, deployment_id: str, log: ExecutionLog) -> Path:
        deployment_dir = self._root / deployment_id
        deployment_dir.mkdir(parents=True, exist_ok=True)

        main_tf = deployment_dir / "main.tf"
        main_tf.write_text(config.code, encoding="utf-8")
        log.write(f"Written main.tf to {main_tf}")

        if config.credentials:
            tfvars = "\n".join(f'{key} = "{value}"' for key, value in config.credentials.items())
            tfvars_path = deployment_dir / "terraform.tfvars"
            tfvars_path.write_text(tfvars, encoding="utf-8")
            log.write(f"Written terraform.tfvars to {tfvars_path}")

        versions_tf = deployment_dir / "versions.tf"
        versions_tf.write_text(render_versions_tf(config.provider), encoding="utf-8")
        log.write(f"Written versions.tf to {versions_tf}")

        return deployment_dir

    async def _run(self, args: list[str], cwd: Path, log: ExecutionLog) -> tuple[str, str]:
        """Run one terraform command and return (stdout, stderr).

        Raises TerraformCommandError on spawn failure, timeout or non-zero exit.
        """
        cmd = [self._terraform_bin, *args]
        command_line = " ".join(cmd)
        log.write(f"Executing: {command_line} in {cwd}")
        env = {**os.environ, "TF_IN_AUTOMATION": "true", "TF_INPUT": "false"}

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=cwd,
                env=env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            log.write(f"Command failed: {e}")
            raise TerraformCommandError(f"Failed to start {command_line}: {e}") from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(), timeout=self._timeout
            )
        except TimeoutError:
            process.kill()
            await process.wait()
            message = f"{command_line} timed out after {self._timeout:g}s"
            log.write(f"Command failed: {message}")
            raise TerraformCommandError(message) from None

        stdout = stdout_bytes.decode("utf-8", errors="replace") if stdout_bytes else ""
        stderr = stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else ""
        if stdout:
            log.write(f"STDOUT: {stdout}")
        if stderr:
            log.write(f"STDERR: {stderr}")

        if process.returncode != 0:
            detail = stderr.strip() or stdout.strip()
            message = f"{command_line} exited with code {process.returncode}: {detail}"
            log.write(f"Command failed: {message}")
            raise TerraformCommandError(message)

        return stdout, stderr
