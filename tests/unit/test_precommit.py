"""Tests for pre-commit hook installation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from proteccapi.integrations.precommit import (
    HOOK_ENTRY,
    HOOK_ID,
    install_hooks,
    is_hook_installed,
    uninstall_hooks,
)


class TestInstallHooks:
    """Tests for install_hooks."""

    def test_creates_config(self, tmp_path: Path):
        config_path = tmp_path / ".pre-commit-config.yaml"

        assert install_hooks(config_path) is True

        data = yaml.safe_load(config_path.read_text())
        assert data["repos"][0]["repo"] == "local"
        assert data["repos"][0]["hooks"][0]["id"] == HOOK_ID
        assert data["repos"][0]["hooks"][0]["entry"] == "proteccapi scan"

    def test_second_install_is_noop(self, tmp_path: Path):
        config_path = tmp_path / ".pre-commit-config.yaml"
        install_hooks(config_path)

        assert install_hooks(config_path) is False
        data = yaml.safe_load(config_path.read_text())
        assert len(data["repos"][0]["hooks"]) == 1

    def test_appends_to_existing_local_repo(self, tmp_path: Path):
        config_path = tmp_path / ".pre-commit-config.yaml"
        config_path.write_text(
            yaml.dump({"repos": [{"repo": "local", "hooks": [{"id": "lint"}]}]})
        )

        install_hooks(config_path)

        hooks = yaml.safe_load(config_path.read_text())["repos"][0]["hooks"]
        assert [h["id"] for h in hooks] == ["lint", HOOK_ID]

    def test_template_not_mutated(self, tmp_path: Path):
        install_hooks(tmp_path / "a.yaml")
        assert len(HOOK_ENTRY["hooks"]) == 1

    def test_missing_config_without_create(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(
            "proteccapi.integrations.precommit.find_precommit_config", lambda: None
        )

        with pytest.raises(FileNotFoundError):
            install_hooks(create_if_missing=False)

    def test_non_mapping_config_rejected(self, tmp_path: Path):
        config_path = tmp_path / ".pre-commit-config.yaml"
        config_path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError):
            install_hooks(config_path)


class TestUninstallHooks:
    """Tests for uninstall_hooks and is_hook_installed."""

    def test_round_trip(self, tmp_path: Path):
        config_path = tmp_path / ".pre-commit-config.yaml"
        install_hooks(config_path)
        assert is_hook_installed(config_path)

        assert uninstall_hooks(config_path) is True

        assert not is_hook_installed(config_path)
        assert yaml.safe_load(config_path.read_text())["repos"] == []

    def test_keeps_other_hooks(self, tmp_path: Path):
        config_path = tmp_path / ".pre-commit-config.yaml"
        config_path.write_text(
            yaml.dump({"repos": [{"repo": "local", "hooks": [{"id": "lint"}, {"id": HOOK_ID}]}]})
        )

        uninstall_hooks(config_path)

        hooks = yaml.safe_load(config_path.read_text())["repos"][0]["hooks"]
        assert hooks == [{"id": "lint"}]

    def test_missing_file(self, tmp_path: Path):
        assert uninstall_hooks(tmp_path / "missing.yaml") is False
        assert not is_hook_installed(tmp_path / "missing.yaml")
