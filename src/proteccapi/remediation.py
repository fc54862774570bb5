"""Remediation workflow - migrate detected secrets into the configuration store.

For each finding whose signature has a canonical key, the user is asked
whether the value should be moved into the store. Existing keys are never
overwritten. Accepted entries are written in one atomic update, the store is
restricted to owner read/write, and the store is added to .gitignore.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from rich.console import Console

from proteccapi.scanner.base import Finding, Signature
from proteccapi.scanner.patterns import find_signature, redact_secret
from proteccapi.store.parser import StoreParser
from proteccapi.store.writer import append_entries, ensure_ignored, ignore_entry_for

logger = logging.getLogger(__name__)


class PromptSession(Protocol):
    """Interactive yes/no confirmation capability."""

    def confirm(self, message: str, default: bool = True) -> bool: ...

    def close(self) -> None: ...


class ConsoleSession:
    """Prompt session backed by a rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.closed = False

    def confirm(self, message: str, default: bool = True) -> bool:
        """Ask a yes/no question. A closed or exhausted input always declines."""
        if self.closed:
            return False
        hint = "(Y/n)" if default else "(y/N)"
        try:
            response = self.console.input(f"{message} {hint}: ").strip().lower()
        except EOFError:
            self.closed = True
            return False
        if not response:
            return default
        return response in ("y", "yes")

    def close(self) -> None:
        self.closed = True


@dataclass(frozen=True)
class StagedEntry:
    """A KEY=value line accepted for the store."""

    key: str
    value: str
    finding: Finding

    @property
    def line(self) -> str:
        return f"{self.key}={self.value}"


@dataclass
class RemediationResult:
    """Outcome of a remediation pass.

    Attributes:
        entries: Lines written to the store.
        skipped_existing: Keys already present in the store.
        declined: Findings the user chose not to migrate.
        gitignore_updated: Whether the ignore file was created or changed.
    """

    entries: list[StagedEntry] = field(default_factory=list)
    skipped_existing: list[str] = field(default_factory=list)
    declined: list[Finding] = field(default_factory=list)
    gitignore_updated: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.entries)


def prompt_message(finding: Finding, store_name: str = ".env", mask: bool = True) -> str:
    """Build the confirmation prompt for a finding."""
    snippet = redact_secret(finding.snippet) if mask else finding.snippet
    return f"Add {finding.signature} to {store_name} file? (Detected: {snippet})"


def remediate(
    findings: Iterable[Finding],
    signatures: Iterable[Signature],
    store_path: Path,
    session: PromptSession,
    gitignore_path: Path | None = None,
    mask: bool = True,
) -> RemediationResult:
    """Offer to move each finding's value into the configuration store.

    Findings are processed strictly in order. A key already present in the
    store, or already staged earlier in this pass, is skipped.

    Args:
        findings: Deduplicated findings in discovery order.
        signatures: Registry used to resolve canonical keys.
        store_path: Path to the configuration store.
        session: Prompt session used for confirmations.
        gitignore_path: Ignore file to update (defaults to .gitignore next to the store).
        mask: Redact snippets in prompts.

    Returns:
        RemediationResult describing what was written.

    Raises:
        OSError: If the store cannot be written or its permissions changed.
    """
    registry = tuple(signatures)
    store = StoreParser().read(store_path)
    result = RemediationResult()
    staged_keys: set[str] = set()

    for finding in findings:
        signature = find_signature(finding.signature, registry)
        if signature is None or not signature.env_key:
            continue

        key = signature.env_key
        if store.has_value(key) or key in staged_keys:
            logger.debug("%s already present in %s, skipping", key, store_path)
            result.skipped_existing.append(key)
            continue

        message = prompt_message(finding, store_path.name, mask=mask)
        if session.confirm(message, default=True):
            staged_keys.add(key)
            result.entries.append(StagedEntry(key=key, value=finding.snippet, finding=finding))
        else:
            result.declined.append(finding)

    if not result.changed:
        return result

    try:
        append_entries(store_path, [entry.line for entry in result.entries])
    except OSError as e:
        logger.error("Error writing to %s: %s", store_path, e)
        raise

    if gitignore_path is None:
        gitignore_path = store_path.parent / ".gitignore"
    result.gitignore_updated = ensure_ignored(
        gitignore_path, ignore_entry_for(store_path, gitignore_path.parent)
    )

    return result
