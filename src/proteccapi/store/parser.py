"""Configuration store (.env) parser."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class StoreEntry:
    """A single KEY=value line."""

    name: str
    value: str
    line_number: int

    @property
    def is_empty(self) -> bool:
        return not self.value


@dataclass
class EnvStore:
    """Parsed configuration store."""

    path: Path
    entries: dict[str, StoreEntry] = field(default_factory=dict)

    def get(self, name: str) -> StoreEntry | None:
        """Get an entry by key."""
        return self.entries.get(name)

    def has_value(self, name: str) -> bool:
        """True if the key is present with a non-empty value."""
        entry = self.entries.get(name)
        return entry is not None and not entry.is_empty

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)


class StoreParser:
    """Parse KEY=value configuration stores.

    Handles:
    - Standard KEY=value
    - Optional leading "export "
    - Quoted values: KEY="value" or KEY='value'
    - Comments and blank lines (skipped)
    """

    LINE_PATTERN = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_.]*)\s*=\s*(.*)$")

    def parse_string(self, content: str, path: Path = Path()) -> EnvStore:
        """Parse store content from a string."""
        store = EnvStore(path=path)

        for line_num, line in enumerate(content.splitlines(), start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            match = self.LINE_PATTERN.match(line)
            if not match:
                continue

            key = match.group(1)
            value = self._unquote(match.group(2).strip())
            store.entries[key] = StoreEntry(name=key, value=value, line_number=line_num)

        return store

    def read(self, path: Path | str) -> EnvStore:
        """Read and parse a store, treating a missing or unreadable file as empty.

        Args:
            path: Path to the store file

        Returns:
            EnvStore, empty if the file could not be read
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return EnvStore(path=path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s, treating it as empty: %s", path, e)
            return EnvStore(path=path)

        return self.parse_string(content, path)

    def _unquote(self, value: str) -> str:
        """Remove surrounding quotes, or a trailing comment from bare values."""
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            return value[1:-1]
        if " #" in value:
            return value.split(" #", 1)[0].rstrip()
        return value
