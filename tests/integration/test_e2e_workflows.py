"""End-to-end workflow tests.

These drive the public API across scanning, remediation and the dependency
checks on real directory trees. The staged-mode tests need a git binary and
are skipped without one.
"""

from __future__ import annotations

import shutil
import stat
import subprocess  # nosec B404
from pathlib import Path

import pytest
from conftest import AWS_ACCESS_KEY, FakeAuditRunner, FakeSession, write_package

from proteccapi import ScanStatus, scan, secure_check
from proteccapi.config import ScanConfig
from proteccapi.scanner.files import ScanMode

pytestmark = [pytest.mark.integration]

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)  # nosec B603, B607


class TestRemediationWorkflow:
    """Scan, migrate into the store, scan again."""

    def test_accepting_a_key_migrates_it(self, tmp_path: Path):
        (tmp_path / "config.js").write_text(f'const key = "{AWS_ACCESS_KEY}";\n')
        session = FakeSession(default=True)

        outcome = scan(tmp_path, ScanConfig(), mode=ScanMode.FULL, fix=True, session=session)

        store = tmp_path / ".env"
        assert outcome.status is ScanStatus.REMEDIATED
        assert outcome.exit_code == 1
        assert f"AWS_ACCESS_KEY_ID={AWS_ACCESS_KEY}" in store.read_text().splitlines()
        assert stat.S_IMODE(store.stat().st_mode) == 0o600
        assert ".env" in (tmp_path / ".gitignore").read_text().splitlines()
        assert session.closed

    def test_rerun_does_not_duplicate_store_entries(self, tmp_path: Path):
        (tmp_path / "config.js").write_text(f'const key = "{AWS_ACCESS_KEY}";\n')
        scan(tmp_path, mode=ScanMode.FULL, fix=True, session=FakeSession(default=True))

        second = scan(tmp_path, mode=ScanMode.FULL, fix=True, session=FakeSession(default=True))

        # The source still holds the key, which the store already has
        assert second.status is ScanStatus.BLOCKED
        assert second.remediation.skipped_existing
        content = (tmp_path / ".env").read_text()
        assert content.count("AWS_ACCESS_KEY_ID=") == 1
        assert (tmp_path / ".gitignore").read_text().count(".env") == 1
        assert [f.file_path.name for f in second.report.findings] == ["config.js"]

    def test_without_fix_nothing_is_written(self, tmp_path: Path):
        (tmp_path / "config.js").write_text(f'const key = "{AWS_ACCESS_KEY}";\n')

        outcome = scan(tmp_path, mode=ScanMode.FULL)

        assert outcome.status is ScanStatus.BLOCKED
        assert not (tmp_path / ".env").exists()
        assert not (tmp_path / ".gitignore").exists()

    def test_fix_requires_session(self, tmp_path: Path):
        (tmp_path / "config.js").write_text(f'const key = "{AWS_ACCESS_KEY}";\n')

        with pytest.raises(ValueError):
            scan(tmp_path, mode=ScanMode.FULL, fix=True)


@requires_git
class TestStagedWorkflow:
    """Staged-mode scanning against a real repository."""

    @pytest.fixture
    def repo(self, tmp_path: Path) -> Path:
        _git(tmp_path, "init", "-q")
        return tmp_path

    def test_only_staged_files_are_scanned(self, repo: Path):
        (repo / "staged.js").write_text(f'k = "{AWS_ACCESS_KEY}"\n')
        (repo / "unstaged.js").write_text(f'k = "{AWS_ACCESS_KEY}"\n')
        _git(repo, "add", "staged.js")

        outcome = scan(repo)

        assert outcome.status is ScanStatus.BLOCKED
        assert [f.file_path.name for f in outcome.report.findings] == ["staged.js"]

    def test_staged_from_subdirectory_resolves_repo_paths(self, repo: Path):
        (repo / "src").mkdir()
        (repo / "src" / "app.js").write_text(f'k = "{AWS_ACCESS_KEY}"\n')
        _git(repo, "add", "src/app.js")

        outcome = scan(repo / "src")

        assert outcome.report.findings[0].file_path.name == "app.js"
        assert outcome.report.files_scanned == 1

    def test_nothing_staged_is_clean(self, repo: Path):
        (repo / "unstaged.js").write_text(f'k = "{AWS_ACCESS_KEY}"\n')

        outcome = scan(repo)

        assert outcome.status is ScanStatus.CLEAN
        assert outcome.exit_code == 0

    def test_outside_repository_is_an_error(self, tmp_path: Path, monkeypatch):
        outside = tmp_path / "plain"
        outside.mkdir()
        # Stop git from discovering a repository above tmp_path
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))

        outcome = scan(outside)

        assert outcome.status is ScanStatus.ERROR
        assert outcome.error.startswith("Error getting files")


class TestSecureCheckWorkflow:
    """Audit plus heuristics through the public API."""

    def test_score_and_exit_code(self, tmp_path: Path, modern_audit_output):
        modules = tmp_path / "node_modules"
        write_package(modules, "expresss", entry_content="process.env.A; process.env.B;")
        write_package(modules, "axios")

        result = secure_check(tmp_path, runner=FakeAuditRunner(modern_audit_output))

        assert result.vulnerability_count == 3
        assert [r.package for r in result.inspection.suspicion_records] == ["expresss"]
        assert result.score == 7.5
        assert result.exit_code == 1

    def test_clean_project(self, tmp_path: Path):
        result = secure_check(tmp_path, runner=FakeAuditRunner({"vulnerabilities": {}}))

        assert result.score == 10.0
        assert result.exit_code == 0
