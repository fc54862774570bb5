"""Git queries used by the scanner.

Only two things are ever asked of git: where the repository root is, and which
files are staged for the next commit.
"""

from __future__ import annotations

import subprocess  # nosec B404
from pathlib import Path

GIT_TIMEOUT = 10


class GitError(Exception):
    """Git could not answer a query."""

    pass


def _git(args: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    workdir = cwd if cwd.is_dir() else cwd.parent
    return subprocess.run(  # nosec B603, B607
        ["git", *args],
        cwd=str(workdir),
        capture_output=True,
        text=True,
        timeout=GIT_TIMEOUT,
    )


def is_git_repo(path: Path) -> bool:
    """Return True when path lies inside a git work tree."""
    try:
        proc = _git(["rev-parse", "--is-inside-work-tree"], path)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return False
    return proc.returncode == 0 and proc.stdout.strip() == "true"


def get_git_root(path: Path) -> Path | None:
    """Return the top-level directory of the repository containing path.

    None when path is not in a repository or git is unavailable.
    """
    try:
        proc = _git(["rev-parse", "--show-toplevel"], path)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if proc.returncode != 0:
        return None
    return Path(proc.stdout.strip())


def parse_name_list(output: str) -> list[str]:
    """Split newline-separated git output into non-empty paths."""
    return [line.strip() for line in output.splitlines() if line.strip()]


def get_staged_files(cwd: Path) -> list[Path]:
    """List the files staged for commit.

    Git reports staged paths relative to the repository root, so they are
    resolved against it rather than against cwd. Deletions are filtered out
    because there is no content left to scan.

    Args:
        cwd: Directory to run git in.

    Returns:
        Staged file paths in the order git reports them.

    Raises:
        GitError: If git is missing, times out, or cwd is not in a repository.
    """
    try:
        proc = _git(["diff", "--cached", "--name-only", "--diff-filter=ACMR"], cwd)
    except FileNotFoundError as e:
        raise GitError("Git not found. Staged scanning requires git.") from e
    except subprocess.TimeoutExpired as e:
        raise GitError("Git command timed out") from e

    if proc.returncode:
        raise GitError(proc.stderr.strip() or "git diff --cached failed")

    base = get_git_root(cwd) or cwd
    return [base / name for name in parse_name_list(proc.stdout)]
