"""Tests for candidate file selection."""

from __future__ import annotations

from pathlib import Path

import pytest

from proteccapi.config import ScanConfig
from proteccapi.scanner.files import ScanMode, is_eligible, select_files, walk_tree
from proteccapi.utils.git import GitError


class TestIsEligible:
    """Tests for the extension and size filter."""

    def test_text_file_is_eligible(self, tmp_path: Path):
        path = tmp_path / "app.py"
        path.write_text("x = 1\n")
        assert is_eligible(path, ScanConfig())

    def test_excluded_extension_case_insensitive(self, tmp_path: Path):
        path = tmp_path / "LOGO.PNG"
        path.write_bytes(b"\x89PNG")
        assert not is_eligible(path, ScanConfig())

    def test_extension_without_dot_is_normalized(self, tmp_path: Path):
        path = tmp_path / "data.csv"
        path.write_text("a,b\n")
        assert not is_eligible(path, ScanConfig(exclude_extensions=["CSV"]))

    def test_oversized_file_rejected(self, tmp_path: Path):
        path = tmp_path / "big.txt"
        path.write_text("x" * 101)
        assert not is_eligible(path, ScanConfig(max_file_size=100))

    def test_size_at_ceiling_accepted(self, tmp_path: Path):
        path = tmp_path / "edge.txt"
        path.write_text("x" * 100)
        assert is_eligible(path, ScanConfig(max_file_size=100))

    def test_missing_file_is_ineligible(self, tmp_path: Path):
        assert not is_eligible(tmp_path / "missing.txt", ScanConfig())


class TestWalkTree:
    """Tests for full-tree enumeration."""

    def test_prunes_ignored_directories(self, project_dir: Path):
        files = walk_tree(project_dir, ScanConfig())

        names = {p.relative_to(project_dir).as_posix() for p in files}
        assert names == {"src/app.js", "README.md"}

    def test_skips_ignored_file_names(self, tmp_path: Path):
        (tmp_path / "package-lock.json").write_text("{}")
        (tmp_path / "package.json").write_text("{}")

        files = walk_tree(tmp_path, ScanConfig())

        assert [p.name for p in files] == ["package.json"]

    def test_empty_tree(self, tmp_path: Path):
        assert walk_tree(tmp_path, ScanConfig()) == []

    def test_skips_configuration_store(self, tmp_path: Path):
        (tmp_path / ".env").write_text("AWS_ACCESS_KEY_ID=x\n")
        (tmp_path / "config.js").write_text("x")

        files = walk_tree(tmp_path, ScanConfig())

        assert [p.name for p in files] == ["config.js"]

    def test_skips_custom_store_path(self, tmp_path: Path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "secrets.env").write_text("A=1\n")
        (tmp_path / ".env").write_text("B=2\n")

        files = walk_tree(tmp_path, ScanConfig(env_path="config/secrets.env"))

        assert [p.name for p in files] == [".env"]


class TestSelectFiles:
    """Tests for mode dispatch."""

    def test_full_mode_walks_tree(self, project_dir: Path):
        files = select_files(ScanMode.FULL, project_dir, ScanConfig())
        assert project_dir / "src" / "app.js" in files

    def test_staged_mode_filters_git_output(self, tmp_path: Path, monkeypatch):
        keep = tmp_path / "app.js"
        keep.write_text("x")
        image = tmp_path / "shot.png"
        image.write_bytes(b"\x89PNG")
        vendored = tmp_path / "node_modules" / "dep.js"
        vendored.parent.mkdir()
        vendored.write_text("x")
        deleted = tmp_path / "deleted.js"

        monkeypatch.setattr("proteccapi.scanner.files.get_git_root", lambda _cwd: tmp_path)
        monkeypatch.setattr(
            "proteccapi.scanner.files.get_staged_files",
            lambda _cwd: [keep, image, vendored, deleted],
        )

        assert select_files(ScanMode.STAGED, tmp_path, ScanConfig()) == [keep]

    def test_staged_mode_propagates_git_error(self, tmp_path: Path, monkeypatch):
        def fail(_cwd):
            raise GitError("not a git repository")

        monkeypatch.setattr("proteccapi.scanner.files.get_staged_files", fail)

        with pytest.raises(GitError):
            select_files(ScanMode.STAGED, tmp_path, ScanConfig())

    def test_staged_mode_repo_inside_ignored_directory(self, tmp_path: Path, monkeypatch):
        """Only the part of the path inside the repository is checked."""
        repo = tmp_path / "node_modules" / "mylib"
        repo.mkdir(parents=True)
        app = repo / "app.js"
        app.write_text("x")
        nested = repo / "node_modules" / "dep.js"
        nested.parent.mkdir()
        nested.write_text("x")

        monkeypatch.setattr("proteccapi.scanner.files.get_git_root", lambda _cwd: repo)
        monkeypatch.setattr("proteccapi.scanner.files.get_staged_files", lambda _cwd: [app, nested])

        assert select_files(ScanMode.STAGED, repo, ScanConfig()) == [app]

    def test_staged_mode_without_git_root_uses_scan_root(self, tmp_path: Path, monkeypatch):
        repo = tmp_path / ".git-checkouts" / "build" / "mylib"
        repo.mkdir(parents=True)
        app = repo / "app.js"
        app.write_text("x")

        monkeypatch.setattr("proteccapi.scanner.files.get_git_root", lambda _cwd: None)
        monkeypatch.setattr("proteccapi.scanner.files.get_staged_files", lambda _cwd: [app])

        assert select_files(ScanMode.STAGED, repo, ScanConfig(ignored_paths=["build"])) == [app]
