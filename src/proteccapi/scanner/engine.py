"""Scan engine - runs signatures over files and collects findings.

The SecretScanner is responsible for:
- Selecting candidate files (full tree or staged set)
- Matching every signature against each file's full text
- Dropping low-confidence matches in strict mode
- Deduplicating findings by (signature, file, line)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from proteccapi.config import ScanConfig
from proteccapi.scanner.base import Finding, RawMatch, ScanReport, Signature
from proteccapi.scanner.files import ScanMode, select_files
from proteccapi.scanner.patterns import get_signatures, is_high_confidence

logger = logging.getLogger(__name__)


def scan_content(
    text: str,
    signatures: Iterable[Signature],
    file_path: Path = Path(),
) -> list[RawMatch]:
    """Apply each signature to the full text of a file.

    Matches are non-overlapping per signature and reported in text order
    within a signature. Line numbers are 1-based and computed from the number
    of line breaks before the match start. When a rule has a capture group,
    group 1 is the reported secret.

    Args:
        text: File content.
        signatures: Signatures to apply, in order.
        file_path: Path recorded on each match.

    Returns:
        List of raw matches.
    """
    matches: list[RawMatch] = []

    for signature in signatures:
        group = 1 if signature.rule.groups else 0
        for match in signature.rule.finditer(text):
            value = match.group(group)
            if value is None:
                continue
            if signature.validator is not None and not signature.validator(value):
                continue
            start = match.start(group)
            matches.append(
                RawMatch(
                    signature=signature.name,
                    file_path=file_path,
                    line_number=text.count("\n", 0, start) + 1,
                    matched_text=value,
                    offset=start,
                )
            )

    return matches


def dedupe(findings: Iterable[Finding]) -> list[Finding]:
    """Keep the first finding for each (signature, file, line) key.

    Order of first occurrence is preserved. Two different secrets of the same
    type on the same line collapse into one finding.
    """
    seen: set[tuple[str, str, int]] = set()
    unique: list[Finding] = []

    for finding in findings:
        if finding.key in seen:
            continue
        seen.add(finding.key)
        unique.append(finding)

    return unique


class SecretScanner:
    """Scans files for hard-coded secrets.

    Example:
        scanner = SecretScanner(ScanConfig(strict=True))
        report = scanner.scan(ScanMode.FULL, Path("."))
        print(f"Found {len(report.findings)} secrets")
    """

    def __init__(self, config: ScanConfig | None = None) -> None:
        """Initialize the scanner.

        Args:
            config: Scan configuration. Uses defaults if None.
        """
        self.config = config or ScanConfig()
        self.signatures = get_signatures(strict=self.config.strict)

    def accept(self, match: RawMatch) -> bool:
        """Confidence filter. Everything passes outside strict mode."""
        if not self.config.strict:
            return True
        return is_high_confidence(match.matched_text, self.config.entropy_threshold)

    def scan_file(self, path: Path) -> list[RawMatch] | None:
        """Scan a single file.

        Returns:
            Raw matches, or None if the file could not be read.
        """
        logger.debug("Scanning file: %s", path)
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Error reading file %s: %s", path, e)
            return None
        return scan_content(text, self.signatures, path)

    def scan_files(self, files: list[Path]) -> ScanReport:
        """Scan the given files and return deduplicated findings.

        With max_workers > 1 files are scanned concurrently; results are still
        consumed in input order so the first occurrence under a tie is stable.
        """
        if self.config.max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                per_file = list(executor.map(self.scan_file, files))
        else:
            per_file = [self.scan_file(path) for path in files]

        findings: list[Finding] = []
        skipped: list[Path] = []
        total = 0

        for path, matches in zip(files, per_file):
            if matches is None:
                skipped.append(path)
                continue
            for match in matches:
                if not self.accept(match):
                    logger.debug(
                        "Dropping low-confidence %s match in %s:%d",
                        match.signature,
                        match.file_path,
                        match.line_number,
                    )
                    continue
                total += 1
                findings.append(Finding.from_match(match))

        return ScanReport(
            findings=dedupe(findings),
            files_scanned=len(files) - len(skipped),
            total_matches=total,
            skipped_files=skipped,
        )

    def scan(self, mode: ScanMode, root: Path) -> ScanReport:
        """Select files under root and scan them.

        Raises:
            GitError: In staged mode, if git cannot be queried.
        """
        files = select_files(mode, root, self.config)
        return self.scan_files(files)
