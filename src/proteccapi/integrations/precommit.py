"""Pre-commit integration.

proteccapi runs as a ``local`` hook so that it uses whatever interpreter the
project installed it into. The hook passes no filenames; ``proteccapi scan``
asks git for the staged set itself.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

PRECOMMIT_FILENAME = ".pre-commit-config.yaml"

HOOK_ID = "proteccapi-scan"

HOOK_CONFIG = f"""# Snippet for {PRECOMMIT_FILENAME}

repos:
  - repo: local
    hooks:
      - id: {HOOK_ID}
        name: Block hard-coded API keys
        entry: proteccapi scan
        language: system
        pass_filenames: false
        stages: [pre-commit]
"""

HOOK_ENTRY: dict[str, Any] = {
    "repo": "local",
    "hooks": [
        {
            "id": HOOK_ID,
            "name": "Block hard-coded API keys",
            "entry": "proteccapi scan",
            "language": "system",
            "pass_filenames": False,
            "stages": ["pre-commit"],
        },
    ],
}


def get_hook_config() -> str:
    """Return the YAML snippet users can paste by hand."""
    return HOOK_CONFIG


def find_precommit_config(start_dir: Path | None = None) -> Path | None:
    """Search start_dir (default cwd) and its parents for the pre-commit config."""
    directory = (start_dir or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / PRECOMMIT_FILENAME
        if candidate.exists():
            return candidate
    return None


def _read(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} is not a mapping")
    return data


def _write(data: dict[str, Any], path: Path) -> None:
    path.write_text(
        yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )


def _local_repos(data: dict[str, Any]) -> list[dict[str, Any]]:
    return [repo for repo in data.get("repos") or [] if repo.get("repo") == "local"]


def _has_hook(repo: dict[str, Any]) -> bool:
    return any(hook.get("id") == HOOK_ID for hook in repo.get("hooks") or [])


def install_hooks(
    config_path: Path | None = None,
    create_if_missing: bool = True,
) -> bool:
    """Add the proteccapi hook to the pre-commit config.

    The hook joins an existing ``local`` repo entry when there is one.

    Args:
        config_path: Config to edit. Searched for from cwd when None.
        create_if_missing: Create the config in cwd when none is found.

    Returns:
        True if the hook was added, False if it was already there.

    Raises:
        FileNotFoundError: If no config exists and create_if_missing is False.
        ValueError: If the config is not a YAML mapping.
    """
    config_path = config_path or find_precommit_config()
    if config_path is None:
        if not create_if_missing:
            raise FileNotFoundError(
                f"{PRECOMMIT_FILENAME} not found. Run from the repository root or pass --config."
            )
        config_path = Path.cwd() / PRECOMMIT_FILENAME

    data = _read(config_path) if config_path.exists() else {}
    local = _local_repos(data)
    if any(_has_hook(repo) for repo in local):
        return False

    entry = copy.deepcopy(HOOK_ENTRY)
    if local:
        local[0].setdefault("hooks", []).extend(entry["hooks"])
    else:
        data.setdefault("repos", []).append(entry)

    _write(data, config_path)
    return True


def uninstall_hooks(config_path: Path | None = None) -> bool:
    """Remove the proteccapi hook, dropping any ``local`` entry left empty.

    Returns:
        True if the config was changed.
    """
    config_path = config_path or find_precommit_config()
    if config_path is None or not config_path.exists():
        return False

    data = _read(config_path)
    local = _local_repos(data)
    if not any(_has_hook(repo) for repo in local):
        return False

    for repo in local:
        repo["hooks"] = [hook for hook in repo.get("hooks") or [] if hook.get("id") != HOOK_ID]
    data["repos"] = [
        repo for repo in data["repos"] if repo.get("repo") != "local" or repo.get("hooks")
    ]

    _write(data, config_path)
    return True


def is_hook_installed(config_path: Path | None = None) -> bool:
    config_path = config_path or find_precommit_config()
    if config_path is None or not config_path.exists():
        return False
    return any(_has_hook(repo) for repo in _local_repos(_read(config_path)))
