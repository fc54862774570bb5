"""Secret scanning module for proteccapi.

This module provides pattern-based secret detection:
- File selection (full tree or git staged set)
- A single signature registry with optional strict validation
- Shannon-entropy confidence filtering
- Deduplication by (signature, file, line)
"""

from proteccapi.scanner.base import (
    Finding,
    RawMatch,
    ScanReport,
    Signature,
    SignatureKind,
)
from proteccapi.scanner.engine import SecretScanner, dedupe, scan_content
from proteccapi.scanner.files import ScanMode, is_eligible, select_files
from proteccapi.scanner.patterns import (
    SIGNATURES,
    calculate_entropy,
    get_signatures,
    is_high_confidence,
    redact_secret,
)

__all__ = [
    "SIGNATURES",
    "Finding",
    "RawMatch",
    "ScanMode",
    "ScanReport",
    "SecretScanner",
    "Signature",
    "SignatureKind",
    "calculate_entropy",
    "dedupe",
    "get_signatures",
    "is_eligible",
    "is_high_confidence",
    "redact_secret",
    "scan_content",
    "select_files",
]
