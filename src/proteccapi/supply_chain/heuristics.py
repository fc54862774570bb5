"""Supply-chain heuristics for installed packages.

All checks here are advisory signals, not proof of compromise:
- Typosquatting: edit distance to a list of popular package names
- Lifecycle scripts: install/start hooks that run code automatically
- Entry file keywords: crypto, base64, eval, exec, raw filesystem writes
- Environment access: repeated reads of process.env
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from proteccapi.config import SecureCheckConfig
from proteccapi.supply_chain.packages import PackageDescriptor, gather_packages

logger = logging.getLogger(__name__)

LIFECYCLE_HOOKS = ("preinstall", "install", "postinstall", "prestart", "poststart")

SUSPICIOUS_KEYWORDS = ("crypto", "base64", "eval", "exec", "fs.write")
KEYWORD_WEIGHT = 0.2

ENV_ACCESS_TOKEN = "process.env"


@dataclass(frozen=True)
class SuspicionRecord:
    """A package name suspiciously close to a popular one."""

    package: str
    closest_match: str
    distance: int


@dataclass(frozen=True)
class LifecycleFlag:
    package: str
    hook: str
    script: str


@dataclass(frozen=True)
class SuspiciousCodeFlag:
    package: str
    file_path: Path
    score: float
    keywords: tuple[str, ...]


@dataclass(frozen=True)
class EnvUsageFlag:
    package: str
    file_path: Path
    occurrences: int


@dataclass
class InspectionReport:
    """Everything the heuristics flagged for one dependency tree."""

    packages_scanned: int = 0
    suspicion_records: list[SuspicionRecord] = field(default_factory=list)
    lifecycle_flags: list[LifecycleFlag] = field(default_factory=list)
    code_flags: list[SuspiciousCodeFlag] = field(default_factory=list)
    env_usage_flags: list[EnvUsageFlag] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return bool(
            self.suspicion_records
            or self.lifecycle_flags
            or self.code_flags
            or self.env_usage_flags
        )


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate edit distance between two strings."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)
    if len(s2) == 0:
        return len(s1)
    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row
    return previous_row[-1]


def check_typosquatting(
    name: str,
    popular: Sequence[str],
    max_distance: int = 2,
) -> SuspicionRecord | None:
    """Compare a package name against popular names.

    The closest popular name wins; on a tie the one declared first is kept.
    An exact match is the real package and is never suspect.
    """
    closest: str | None = None
    min_distance: int | None = None

    for candidate in popular:
        distance = levenshtein_distance(name, candidate)
        if min_distance is None or distance < min_distance:
            min_distance = distance
            closest = candidate

    if closest is None or min_distance is None:
        return None
    if 0 < min_distance <= max_distance:
        return SuspicionRecord(package=name, closest_match=closest, distance=min_distance)
    return None


def check_lifecycle_scripts(package: PackageDescriptor) -> list[LifecycleFlag]:
    """Flag install/start hooks declared in the manifest."""
    scripts = package.manifest.get("scripts")
    if not isinstance(scripts, dict):
        return []
    return [
        LifecycleFlag(package=package.name, hook=hook, script=str(scripts[hook]))
        for hook in LIFECYCLE_HOOKS
        if scripts.get(hook)
    ]


def keyword_score(content: str) -> tuple[float, tuple[str, ...]]:
    """Score content by suspicious keyword presence, capped at 1.0."""
    hits = tuple(keyword for keyword in SUSPICIOUS_KEYWORDS if keyword in content)
    return min(round(len(hits) * KEYWORD_WEIGHT, 2), 1.0), hits


def count_env_usage(content: str) -> int:
    return content.count(ENV_ACCESS_TOKEN)


def inspect_package(
    package: PackageDescriptor,
    config: SecureCheckConfig,
    report: InspectionReport,
) -> None:
    """Run every heuristic on one package, recording flags in the report."""
    record = check_typosquatting(
        package.name, config.popular_packages, config.max_typo_distance
    )
    if record:
        report.suspicion_records.append(record)

    report.lifecycle_flags.extend(check_lifecycle_scripts(package))

    entry = package.entry_file
    if not entry.is_file():
        return
    try:
        content = entry.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Cannot read %s: %s", entry, e)
        return

    score, hits = keyword_score(content)
    if score >= config.suspicion_threshold:
        report.code_flags.append(
            SuspiciousCodeFlag(package=package.name, file_path=entry, score=score, keywords=hits)
        )

    occurrences = count_env_usage(content)
    if occurrences > config.env_usage_threshold:
        report.env_usage_flags.append(
            EnvUsageFlag(package=package.name, file_path=entry, occurrences=occurrences)
        )


def inspect(modules_dir: Path, config: SecureCheckConfig | None = None) -> InspectionReport:
    """Inspect every installed package below a dependency directory.

    Args:
        modules_dir: Top-level dependency directory (e.g. ./node_modules).
        config: Heuristic thresholds and popular-name list.

    Returns:
        InspectionReport. Empty when the directory does not exist.
    """
    config = config or SecureCheckConfig()
    report = InspectionReport()

    if not modules_dir.is_dir():
        logger.info("No %s folder found, skipping package checks.", modules_dir.name)
        return report

    packages = gather_packages(modules_dir, nested_name=modules_dir.name)
    report.packages_scanned = len(packages)
    for package in packages:
        inspect_package(package, config, report)

    return report
