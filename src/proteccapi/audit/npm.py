"""npm audit integration.

The audit tool is reached through a small runner interface so that callers
and tests can supply canned output instead of spawning npm.
"""

from __future__ import annotations

import json
import logging
import subprocess  # nosec B404
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from proteccapi.audit.models import AuditResult, normalize_audit

logger = logging.getLogger(__name__)


class AuditToolError(Exception):
    """The audit tool could not be run at all."""

    pass


class AuditRunner(Protocol):
    """Anything that returns raw audit output."""

    def run(self) -> str: ...


class NpmAuditRunner:
    """Runs ``npm audit --json`` in a project directory."""

    def __init__(
        self,
        cwd: Path | None = None,
        executable: str = "npm",
        timeout: int = 300,
    ) -> None:
        self.cwd = cwd or Path.cwd()
        self.executable = executable
        self.timeout = timeout

    def run(self) -> str:
        """Run the audit and return its stdout.

        npm exits non-zero whenever vulnerabilities are found, so the exit
        status alone is not treated as a failure.

        Raises:
            AuditToolError: If the binary is missing or the command times out.
        """
        try:
            result = subprocess.run(  # nosec B603
                [self.executable, "audit", "--json"],
                cwd=str(self.cwd),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise AuditToolError(
                f"{self.executable} not found. Install Node.js to run the dependency audit."
            ) from e
        except subprocess.TimeoutExpired as e:
            raise AuditToolError(f"{self.executable} audit timed out") from e

        if result.returncode != 0 and not result.stdout.strip():
            logger.warning(
                "%s audit exited with %d: %s",
                self.executable,
                result.returncode,
                result.stderr.strip(),
            )
        return result.stdout


def parse_audit_output(output: str) -> AuditResult | None:
    """Decode and normalize raw audit output.

    Returns:
        AuditResult, or None if there is no output or it cannot be parsed.
    """
    output = output.strip()
    if not output:
        logger.warning("No audit output found (possibly no vulnerabilities, or an error occurred).")
        return None

    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        logger.warning("Could not parse audit JSON output: %s", e)
        return None

    try:
        return normalize_audit(data)
    except ValidationError as e:
        logger.warning("Unrecognized audit entries: %s", e)
        return None


def run_audit(runner: AuditRunner | None = None) -> AuditResult | None:
    """Run the dependency audit and normalize its result.

    Args:
        runner: Audit runner. Defaults to npm in the current directory.

    Returns:
        AuditResult, or None when the tool produced no usable data.

    Raises:
        AuditToolError: If the tool cannot run at all.
    """
    runner = runner or NpmAuditRunner()
    return parse_audit_output(runner.run())
