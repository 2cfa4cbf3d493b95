"""
Saved-palette list kept as one serialized array in a key-value store.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from palette_model import Palette

logger = logging.getLogger(__name__)

STORAGE_KEY = 'colorPalettes_v5'


class KeyValueStore(Protocol):
    """String key-value storage."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-process store."""

    def __init__(self, initial: Optional[dict] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Store backed by a single JSON object file."""

    def __init__(self, path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable store %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding='utf-8')


class PersistenceGateway:
    """
    Ordered list of saved palettes.

    Entries are stored in their serialized form, oldest first. The gateway
    never merges or deduplicates.
    """

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    def _read(self) -> list[dict]:
        raw = self.store.get(self.key)
        if raw is None:
            return []
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Saved palettes under %r are corrupt, treating as empty: %s", self.key, e)
            return []
        if not isinstance(entries, list):
            logger.warning("Saved palettes under %r are not a list, treating as empty", self.key)
            return []
        palettes = [entry for entry in entries if isinstance(entry, dict)]
        if len(palettes) != len(entries):
            logger.warning("Skipping %d malformed saved palette(s) under %r", len(entries) - len(palettes), self.key)
        return palettes

    def _write(self, entries: list[dict]) -> None:
        self.store.set(self.key, json.dumps(entries))

    def list(self) -> list[dict]:
        """All saved palettes in insertion order."""
        return self._read()

    def __len__(self) -> int:
        return len(self._read())

    def append(self, palette: Palette) -> int:
        """Save a snapshot of the palette at the tail. Returns its index."""
        entries = self._read()
        entries.append(palette.to_dict())
        self._write(entries)
        logger.info("Saved palette %r (%d saved)", palette.name, len(entries))
        return len(entries) - 1

    def delete_at(self, index: int) -> dict:
        """Remove and return one saved entry."""
        entries = self._read()
        if not 0 <= index < len(entries):
            raise IndexError(f"No saved palette at index {index}")
        removed = entries.pop(index)
        self._write(entries)
        logger.info("Deleted saved palette %r", removed.get('name'))
        return removed

    def load(self, index: int) -> Palette:
        """
        Rebuild a saved palette with fresh ids.

        Raises:
            IndexError: If there is no entry at the index.
            ValueError: If the stored entry is malformed.
        """
        entries = self._read()
        if not 0 <= index < len(entries):
            raise IndexError(f"No saved palette at index {index}")
        return Palette.from_dict(entries[index])
