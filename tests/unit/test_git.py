"""Tests for git helpers."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from proteccapi.utils.git import GitError, get_staged_files, parse_name_list


def test_parse_name_list_skips_blank_lines():
    assert parse_name_list("a.js\n\n  src/b.py  \n") == ["a.js", "src/b.py"]


def test_staged_files_resolved_against_repo_root(tmp_path: Path, monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="src/app.js\nREADME.md\n", stderr="")

    monkeypatch.setattr("proteccapi.utils.git.subprocess.run", fake_run)
    monkeypatch.setattr("proteccapi.utils.git.get_git_root", lambda _p: tmp_path)

    files = get_staged_files(tmp_path / "src")

    assert calls[0] == ["git", "diff", "--cached", "--name-only", "--diff-filter=ACMR"]
    assert files == [tmp_path / "src" / "app.js", tmp_path / "README.md"]


def test_staged_files_not_a_repository(tmp_path: Path, monkeypatch):
    def fake_run(cmd, **kwargs):
        return subprocess.CompletedProcess(
            cmd, 128, stdout="", stderr="fatal: not a git repository"
        )

    monkeypatch.setattr("proteccapi.utils.git.subprocess.run", fake_run)

    with pytest.raises(GitError, match="not a git repository"):
        get_staged_files(tmp_path)


def test_staged_files_git_missing(tmp_path: Path, monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError("git")

    monkeypatch.setattr("proteccapi.utils.git.subprocess.run", fake_run)

    with pytest.raises(GitError, match="Git not found"):
        get_staged_files(tmp_path)
