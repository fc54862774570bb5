"""Candidate file selection.

Two modes are supported:
- FULL: walk the whole tree below a root directory.
- STAGED: ask git for the files staged for the next commit.

Both apply the same eligibility filter (extension and size). The order of the
returned paths follows the filesystem or git and should only be relied on for
grouping output by file.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path

from proteccapi.config import ScanConfig
from proteccapi.utils.git import get_git_root, get_staged_files

logger = logging.getLogger(__name__)


class ScanMode(Enum):
    """Which files a scan covers."""

    FULL = "full"
    STAGED = "staged"


def is_eligible(path: Path, config: ScanConfig) -> bool:
    """Check whether a file should be scanned.

    Files with an excluded extension or larger than the configured ceiling are
    rejected. A stat failure makes the file ineligible rather than fatal.
    """
    if path.suffix.lower() in config.exclude_extensions:
        logger.debug("Skipping excluded file type: %s", path)
        return False

    try:
        size = path.stat().st_size
    except OSError as e:
        logger.warning("Error checking file %s: %s", path, e)
        return False

    if size > config.max_file_size:
        logger.debug("Skipping large file: %s (%d bytes)", path, size)
        return False

    return True


def _is_ignored(path: Path, ignored: set[str], base: Path | None = None) -> bool:
    parts = path.parts
    if base is not None:
        try:
            parts = path.relative_to(base).parts
        except ValueError:
            pass
    return any(part in ignored for part in parts)


def walk_tree(root: Path, config: ScanConfig) -> list[Path]:
    """Recursively collect eligible regular files below root.

    The configuration store that secrets are migrated into is skipped, since
    every key in it is there on purpose.
    """
    ignored = set(config.ignored_paths)
    store = (root / config.env_path).resolve()
    files: list[Path] = []

    for dirpath, dirnames, filenames in os.walk(root):
        # Prune in place so os.walk never descends into ignored directories
        dirnames[:] = [d for d in dirnames if d not in ignored]
        for filename in filenames:
            if filename in ignored:
                continue
            path = Path(dirpath) / filename
            if path.resolve() == store:
                logger.debug("Skipping configuration store: %s", path)
                continue
            if path.is_file() and is_eligible(path, config):
                files.append(path)

    return files


def select_files(mode: ScanMode, root: Path, config: ScanConfig) -> list[Path]:
    """Enumerate the files to scan.

    Ignored directory names are matched against the path inside the
    repository, so a checkout that itself lives below e.g. ``node_modules``
    still has its staged files scanned.

    Args:
        mode: Full-tree walk or staged files only.
        root: Root directory (also the working directory for git).
        config: Scan configuration with size and extension filters.

    Returns:
        Eligible file paths.

    Raises:
        GitError: In staged mode, if git cannot be queried.
    """
    if mode is ScanMode.FULL:
        logger.debug("Scanning all files under %s", root)
        return walk_tree(root, config)

    logger.debug("Getting staged files only")
    ignored = set(config.ignored_paths)
    staged = get_staged_files(root)
    base = get_git_root(root) or root
    return [
        path
        for path in staged
        if not _is_ignored(path, ignored, base) and is_eligible(path, config)
    ]
