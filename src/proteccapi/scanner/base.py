"""Core data model for secret scanning.

Signatures are immutable and defined once at import time. Raw matches are
produced per occurrence by the pattern engine; findings are the matches that
survive confidence filtering and deduplication.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class SignatureKind(Enum):
    """Closed set of secret signature kinds."""

    AWS_ACCESS_KEY = "AWS Access Key"
    AWS_SECRET_KEY = "AWS Secret Key"
    GITHUB_TOKEN = "GitHub Token"
    OPENAI_API_KEY = "OpenAI API Key"
    GOOGLE_CLOUD_API_KEY = "Google Cloud API Key"
    STRIPE_API_KEY = "Stripe API Key"


@dataclass(frozen=True)
class Signature:
    """A named secret-detection rule.

    Attributes:
        kind: Which kind of secret this signature detects.
        rule: Compiled regex. If it has a capture group, group 1 is the secret.
        validator: Optional structural re-check applied in strict mode.
        env_key: Canonical configuration-store key for remediation.
    """

    kind: SignatureKind
    rule: re.Pattern[str]
    validator: Callable[[str], bool] | None = None
    env_key: str | None = None

    @property
    def name(self) -> str:
        """Human-readable signature name."""
        return self.kind.value


@dataclass(frozen=True)
class RawMatch:
    """A single signature occurrence in a file."""

    signature: str
    file_path: Path
    line_number: int
    matched_text: str
    offset: int


@dataclass(frozen=True)
class Finding:
    """A confidence-passed match. Identity ignores the matched text."""

    signature: str
    file_path: Path
    line_number: int
    snippet: str

    @classmethod
    def from_match(cls, match: RawMatch) -> Finding:
        return cls(
            signature=match.signature,
            file_path=match.file_path,
            line_number=match.line_number,
            snippet=match.matched_text,
        )

    @property
    def key(self) -> tuple[str, str, int]:
        """Deduplication key: (signature, file, line)."""
        return (self.signature, str(self.file_path), self.line_number)


@dataclass
class ScanReport:
    """Result of scanning a set of files.

    Attributes:
        findings: Deduplicated findings in discovery order.
        files_scanned: Number of files whose content was read.
        total_matches: Number of matches before deduplication.
        skipped_files: Files that could not be read.
    """

    findings: list[Finding]
    files_scanned: int = 0
    total_matches: int = 0
    skipped_files: list[Path] = field(default_factory=list)

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)
