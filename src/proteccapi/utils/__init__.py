"""Utility modules for proteccapi."""

from proteccapi.utils.git import (
    GitError,
    get_git_root,
    get_staged_files,
    is_git_repo,
    parse_name_list,
)

__all__ = [
    "GitError",
    "get_git_root",
    "get_staged_files",
    "is_git_repo",
    "parse_name_list",
]
