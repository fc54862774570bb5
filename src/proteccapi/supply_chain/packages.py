"""Installed package discovery.

Walks a dependency directory (``node_modules``) and every nested dependency
directory below installed packages. Arbitrary subdirectories of a package are
never entered, which bounds the walk to the dependency graph.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"


@dataclass
class PackageDescriptor:
    """An installed package.

    Attributes:
        name: Package name from the manifest.
        version: Package version from the manifest.
        manifest_path: Path to package.json.
        manifest: Decoded manifest contents.
    """

    name: str
    version: str
    manifest_path: Path
    manifest: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def directory(self) -> Path:
        return self.manifest_path.parent

    @property
    def entry_file(self) -> Path:
        """Main entry file: the manifest's ``main`` field, else index.js."""
        main = self.manifest.get("main")
        if isinstance(main, str) and main.strip():
            candidate = self.directory / main
            if candidate.is_dir():
                candidate = candidate / "index.js"
            elif not candidate.suffix:
                candidate = candidate.with_suffix(".js")
            return candidate
        return self.directory / "index.js"


def read_manifest(manifest_path: Path) -> dict[str, Any] | None:
    """Read a package.json, returning None if it is missing or malformed."""
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Malformed package manifest %s: %s", manifest_path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Malformed package manifest %s: not an object", manifest_path)
        return None
    return data


def _package_dirs(modules_dir: Path) -> list[Path]:
    """List package directories in a dependency directory, expanding @scopes."""
    dirs: list[Path] = []
    try:
        entries = sorted(modules_dir.iterdir())
    except OSError as e:
        logger.warning("Cannot list %s: %s", modules_dir, e)
        return dirs

    for entry in entries:
        if not entry.is_dir() or entry.name.startswith("."):
            continue
        if entry.name.startswith("@"):
            try:
                dirs.extend(sorted(p for p in entry.iterdir() if p.is_dir()))
            except OSError as e:
                logger.warning("Cannot list %s: %s", entry, e)
            continue
        dirs.append(entry)
    return dirs


def gather_packages(modules_dir: Path, nested_name: str = "node_modules") -> list[PackageDescriptor]:
    """Collect every installed package below a dependency directory.

    Args:
        modules_dir: Top-level dependency directory.
        nested_name: Name of nested dependency directories to descend into.

    Returns:
        Package descriptors in walk order. Packages whose manifest is missing,
        malformed or lacks a name/version are skipped.
    """
    results: list[PackageDescriptor] = []
    pending = [modules_dir]
    visited: set[Path] = set()

    while pending:
        current = pending.pop(0)
        try:
            resolved = current.resolve()
        except OSError:
            continue
        if resolved in visited or not current.is_dir():
            continue
        visited.add(resolved)

        for package_dir in _package_dirs(current):
            manifest_path = package_dir / MANIFEST_NAME
            data = read_manifest(manifest_path)
            if data and data.get("name") and data.get("version"):
                results.append(
                    PackageDescriptor(
                        name=str(data["name"]),
                        version=str(data["version"]),
                        manifest_path=manifest_path,
                        manifest=data,
                    )
                )

            nested = package_dir / nested_name
            if nested.is_dir():
                pending.append(nested)

    return results
