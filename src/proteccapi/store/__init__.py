"""Configuration store reading and writing."""

from proteccapi.store.parser import EnvStore, StoreEntry, StoreParser
from proteccapi.store.writer import append_entries, ensure_ignored, ignore_entry_for

__all__ = [
    "EnvStore",
    "StoreEntry",
    "StoreParser",
    "append_entries",
    "ensure_ignored",
    "ignore_entry_for",
]
