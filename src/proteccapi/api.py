"""High-level API functions for proteccapi.

Both entry points return structured results instead of exiting; the CLI maps
them to process exit codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from proteccapi.audit.models import AuditResult
from proteccapi.audit.npm import AuditRunner, NpmAuditRunner, run_audit
from proteccapi.config import ScanConfig, SecureCheckConfig
from proteccapi.remediation import PromptSession, RemediationResult, remediate
from proteccapi.scanner.base import ScanReport
from proteccapi.scanner.engine import SecretScanner
from proteccapi.scanner.files import ScanMode
from proteccapi.scoring import score
from proteccapi.supply_chain.heuristics import InspectionReport, inspect
from proteccapi.utils.git import GitError


class ScanStatus(Enum):
    """Terminal state of a scan."""

    CLEAN = "clean"  # no findings
    REMEDIATED = "remediated"  # findings migrated into the store, commit still blocked
    BLOCKED = "blocked"  # findings left in place
    ERROR = "error"  # the scan could not run


@dataclass
class ScanOutcome:
    """Structured result of the scan command.

    Attributes:
        status: Terminal state.
        report: Scan report, absent when the scan could not run.
        remediation: Remediation result when remediation was attempted.
        error: User-facing error message for ERROR.
    """

    status: ScanStatus
    report: ScanReport | None = None
    remediation: RemediationResult | None = None
    error: str | None = None

    @property
    def exit_code(self) -> int:
        """0 only when nothing was found; any finding blocks the commit."""
        return 0 if self.status is ScanStatus.CLEAN else 1


def scan(
    root: Path,
    config: ScanConfig | None = None,
    mode: ScanMode = ScanMode.STAGED,
    fix: bool = False,
    session: PromptSession | None = None,
) -> ScanOutcome:
    """Scan for hard-coded secrets and optionally migrate them to the store.

    Args:
        root: Project root; also where the store and ignore file are resolved.
        config: Scan configuration.
        mode: Full tree or staged files.
        fix: Offer to move findings into the configuration store.
        session: Prompt session, required when fix is True.

    Returns:
        ScanOutcome.

    Raises:
        OSError: If writing the configuration store fails.
    """
    config = config or ScanConfig()
    scanner = SecretScanner(config)

    try:
        report = scanner.scan(mode, root)
    except GitError as e:
        return ScanOutcome(status=ScanStatus.ERROR, error=f"Error getting files: {e}")

    if not report.has_findings:
        return ScanOutcome(status=ScanStatus.CLEAN, report=report)

    if not fix:
        return ScanOutcome(status=ScanStatus.BLOCKED, report=report)

    if session is None:
        raise ValueError("A prompt session is required for remediation")

    try:
        result = remediate(
            report.findings,
            scanner.signatures,
            root / config.env_path,
            session,
            gitignore_path=root / config.gitignore_path,
        )
    finally:
        session.close()

    status = ScanStatus.REMEDIATED if result.changed else ScanStatus.BLOCKED
    return ScanOutcome(status=status, report=report, remediation=result)


@dataclass
class SecureCheckResult:
    """Result of the audit path."""

    audit: AuditResult | None
    inspection: InspectionReport = field(default_factory=InspectionReport)
    score: float = 10.0
    fail_on_vulnerabilities: bool = False

    @property
    def vulnerability_count(self) -> int:
        return self.audit.vulnerability_count if self.audit else 0

    @property
    def exit_code(self) -> int:
        if self.inspection.has_issues:
            return 1
        if self.fail_on_vulnerabilities and self.vulnerability_count > 0:
            return 1
        return 0


def secure_check(
    root: Path,
    config: SecureCheckConfig | None = None,
    runner: AuditRunner | None = None,
) -> SecureCheckResult:
    """Run the dependency audit and supply-chain heuristics, then score.

    Raises:
        AuditToolError: If the audit tool cannot run at all.
    """
    config = config or SecureCheckConfig()
    audit = run_audit(runner or NpmAuditRunner(cwd=root))
    inspection = inspect(root / config.modules_dir, config)
    vulns = audit.vulnerability_count if audit else 0

    return SecureCheckResult(
        audit=audit,
        inspection=inspection,
        score=score(vulns, len(inspection.suspicion_records)),
        fail_on_vulnerabilities=config.fail_on_vulnerabilities,
    )
