"""Dependency vulnerability audit."""

from proteccapi.audit.models import (
    Advisory,
    AuditResult,
    PackageAudit,
    normalize_audit,
)
from proteccapi.audit.npm import (
    AuditRunner,
    AuditToolError,
    NpmAuditRunner,
    parse_audit_output,
    run_audit,
)

__all__ = [
    "Advisory",
    "AuditResult",
    "AuditRunner",
    "AuditToolError",
    "NpmAuditRunner",
    "PackageAudit",
    "normalize_audit",
    "parse_audit_output",
    "run_audit",
]
