"""Configuration loading for proteccapi.

Configuration is resolved once at startup and passed down explicitly:

    defaults < proteccapi.toml / [tool.proteccapi] < environment < CLI flags

Example proteccapi.toml:
    [scan]
    max_file_size = 10485760
    exclude_extensions = [".jpg", ".png", ".zip"]
    strict = true
    env_path = ".env"

    [secure_check]
    popular_packages = ["react", "lodash", "express"]
    fail_on_vulnerabilities = false
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILENAME = "proteccapi.toml"

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

DEFAULT_ENTROPY_THRESHOLD = 3.5

DEFAULT_EXCLUDE_EXTENSIONS = [
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".bmp",
    ".ico",
    ".webp",
    ".pdf",
    ".zip",
    ".gz",
    ".tar",
    ".7z",
    ".mp3",
    ".mp4",
    ".mov",
    ".woff",
    ".woff2",
    ".ttf",
    ".eot",
    ".lock",
]

DEFAULT_IGNORED_PATHS = ["node_modules", ".git", "package-lock.json"]

DEFAULT_POPULAR_PACKAGES = [
    "react",
    "lodash",
    "express",
    "mongoose",
    "chalk",
    "moment",
    "axios",
    "vue",
    "typescript",
]


class ConfigNotFoundError(Exception):
    """Configuration file not found."""

    pass


def _pick(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    """Keep only keys that are fields of the dataclass."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class ScanConfig:
    """Settings for the secret scan and remediation path.

    Attributes:
        max_file_size: Files larger than this many bytes are skipped.
        exclude_extensions: Binary/media extensions that are never scanned.
        ignored_paths: Directory or file names skipped during the walk.
        strict: Enforce validators and the entropy filter.
        entropy_threshold: Minimum Shannon entropy for strict mode.
        env_path: Configuration store secrets are migrated into.
        gitignore_path: Ignore file that must list the store.
        max_workers: Files scanned concurrently (1 = sequential).
    """

    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    exclude_extensions: list[str] = field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_EXTENSIONS)
    )
    ignored_paths: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORED_PATHS))
    strict: bool = True
    entropy_threshold: float = DEFAULT_ENTROPY_THRESHOLD
    env_path: str = ".env"
    gitignore_path: str = ".gitignore"
    max_workers: int = 1

    def __post_init__(self) -> None:
        self.exclude_extensions = [
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in self.exclude_extensions
        ]
        if self.max_workers < 1:
            self.max_workers = 1


@dataclass
class SecureCheckConfig:
    """Settings for the dependency audit and supply-chain heuristics."""

    popular_packages: list[str] = field(
        default_factory=lambda: list(DEFAULT_POPULAR_PACKAGES)
    )
    max_typo_distance: int = 2
    suspicion_threshold: float = 0.4
    env_usage_threshold: int = 1
    fail_on_vulnerabilities: bool = False
    modules_dir: str = "node_modules"


@dataclass
class ProteccapiConfig:
    """Complete proteccapi configuration."""

    scan: ScanConfig = field(default_factory=ScanConfig)
    secure_check: SecureCheckConfig = field(default_factory=SecureCheckConfig)
    debug: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProteccapiConfig:
        """Create config from a parsed TOML dictionary.

        Unknown keys are ignored so that newer config files keep working.
        """
        scan_data = data.get("scan", {})
        check_data = data.get("secure_check", data.get("secure-check", {}))

        return cls(
            scan=ScanConfig(**_pick(ScanConfig, scan_data)),
            secure_check=SecureCheckConfig(**_pick(SecureCheckConfig, check_data)),
            debug=bool(data.get("debug", False)),
        )


class EnvironmentOverrides(BaseSettings):
    """Overrides read once from the process environment.

    PROTECCAPI_DEBUG=true enables debug logging and PROTECCAPI_SCAN_ALL=true
    switches the scan to full-tree mode.
    """

    model_config = SettingsConfigDict(env_prefix="PROTECCAPI_", extra="ignore")

    debug: bool = False
    scan_all: bool = False


def find_config(start_dir: Path | None = None) -> Path | None:
    """Find proteccapi.toml, or a pyproject.toml with [tool.proteccapi].

    Searches the start directory and its parents.

    Args:
        start_dir: Starting directory (defaults to cwd)

    Returns:
        Path to config file or None if not found
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        pyproject = current / "pyproject.toml"
        if pyproject.is_file():
            try:
                with pyproject.open("rb") as f:
                    data = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError):
                data = {}
            if "proteccapi" in data.get("tool", {}):
                return pyproject

        if current == current.parent:
            return None
        current = current.parent


def load_config(path: Path | None = None) -> ProteccapiConfig:
    """Load configuration from a file, or defaults if none is found.

    Args:
        path: Explicit config path. Auto-discovered when None.

    Returns:
        ProteccapiConfig instance.

    Raises:
        ConfigNotFoundError: If an explicit path does not exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if path is None:
        path = find_config()
        if path is None:
            return ProteccapiConfig()
    elif not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    with path.open("rb") as f:
        data = tomllib.load(f)

    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get("proteccapi", {})

    return ProteccapiConfig.from_dict(data)
