"""Models for package-manager audit output.

Two response shapes are understood:

- Modern (npm 7+): ``{"vulnerabilities": {"<pkg>": {"severity": ..., "via": [...]}}}``
  where ``via`` may be a list or a single value.
- Legacy (npm 6): ``{"advisories": {"<id>": {"module_name": ..., "overview": ...,
  "severity": ...}}}`` with one vulnerability per advisory.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class VulnerabilityInfo(BaseModel):
    """Per-package entry of the modern shape."""

    model_config = ConfigDict(extra="ignore")

    severity: str = "unknown"
    via: Any = None

    @property
    def count(self) -> int:
        """Flattened length of ``via``; a non-list value counts as one."""
        if isinstance(self.via, list):
            return len(self.via)
        return 1


class ModernAuditReport(BaseModel):
    model_config = ConfigDict(extra="ignore")

    vulnerabilities: dict[str, VulnerabilityInfo]


class Advisory(BaseModel):
    """Single advisory of the legacy shape."""

    model_config = ConfigDict(extra="ignore")

    module_name: str
    overview: str = ""
    severity: str = "unknown"


class LegacyAuditReport(BaseModel):
    model_config = ConfigDict(extra="ignore")

    advisories: dict[str, Advisory]


class PackageAudit(BaseModel):
    """Normalized per-package audit result."""

    severity: str
    count: int


class AuditResult(BaseModel):
    """Audit data normalized from either response shape.

    Attributes:
        packages: Package name to severity and vulnerability count.
        advisories: Legacy advisories, kept for reporting.
        source_format: Which shape the data came from.
    """

    packages: dict[str, PackageAudit] = Field(default_factory=dict)
    advisories: list[Advisory] = Field(default_factory=list)
    source_format: Literal["vulnerabilities", "advisories", "unknown"] = "unknown"

    @property
    def vulnerability_count(self) -> int:
        return sum(pkg.count for pkg in self.packages.values())

    @property
    def has_vulnerabilities(self) -> bool:
        return self.vulnerability_count > 0


_SEVERITY_ORDER = ("unknown", "info", "low", "moderate", "high", "critical")


def _worse(a: str, b: str) -> str:
    rank = {name: i for i, name in enumerate(_SEVERITY_ORDER)}
    return a if rank.get(a.lower(), 0) >= rank.get(b.lower(), 0) else b


def normalize_audit(data: Any) -> AuditResult:
    """Normalize a decoded audit document.

    Raises:
        pydantic.ValidationError: If a recognized shape has malformed entries.
    """
    if isinstance(data, dict) and isinstance(data.get("vulnerabilities"), dict):
        report = ModernAuditReport.model_validate(data)
        return AuditResult(
            packages={
                name: PackageAudit(severity=info.severity, count=info.count)
                for name, info in report.vulnerabilities.items()
            },
            source_format="vulnerabilities",
        )

    if isinstance(data, dict) and isinstance(data.get("advisories"), dict):
        legacy = LegacyAuditReport.model_validate(data)
        packages: dict[str, PackageAudit] = {}
        for advisory in legacy.advisories.values():
            existing = packages.get(advisory.module_name)
            if existing is None:
                packages[advisory.module_name] = PackageAudit(
                    severity=advisory.severity, count=1
                )
            else:
                existing.count += 1
                existing.severity = _worse(existing.severity, advisory.severity)
        return AuditResult(
            packages=packages,
            advisories=list(legacy.advisories.values()),
            source_format="advisories",
        )

    return AuditResult()
