"""Writes to the configuration store and the git ignore file.

Store updates are a single write-and-rename so that an interrupted run never
leaves a half-written store behind.
"""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

OWNER_READ_WRITE = stat.S_IRUSR | stat.S_IWUSR


def append_entries(path: Path, lines: list[str]) -> None:
    """Append KEY=value lines to the store atomically, then restrict it to 0600.

    The existing content is read, extended and written to a temporary file in
    the same directory, which then replaces the store.

    Raises:
        OSError: If the store cannot be written or its permissions changed.
    """
    try:
        existing = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        existing = ""

    if existing and not existing.endswith("\n"):
        existing += "\n"
    content = existing + "".join(f"{line}\n" for line in lines)

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.chmod(tmp_name, OWNER_READ_WRITE)
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise

    # Re-apply in case the filesystem ignored the mode on rename
    os.chmod(path, OWNER_READ_WRITE)
    logger.debug("Wrote %d line(s) to %s", len(lines), path)


def ignore_entry_for(store_path: Path, root: Path) -> str:
    """Return the ignore-file line for a store, relative to root when possible."""
    try:
        return store_path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return store_path.name


def ensure_ignored(gitignore: Path, entry: str) -> bool:
    """Make sure an entry is listed in the ignore file.

    The ignore file is created when absent.

    Args:
        gitignore: Path to .gitignore.
        entry: Line that must be present.

    Returns:
        True if the ignore file was created or changed.
    """
    if not gitignore.exists():
        gitignore.write_text(f"{entry}\n", encoding="utf-8")
        logger.info("Created %s with %s", gitignore, entry)
        return True

    content = gitignore.read_text(encoding="utf-8")
    wanted = {entry, f"/{entry}"}
    if any(line.strip() in wanted for line in content.splitlines()):
        return False

    prefix = "" if not content or content.endswith("\n") else "\n"
    gitignore.write_text(f"{content}{prefix}{entry}\n", encoding="utf-8")
    logger.info("Added %s to %s", entry, gitignore)
    return True
