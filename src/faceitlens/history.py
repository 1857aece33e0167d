"""
Search history, last search and language preference.

Everything is stored as JSON values behind a small KeyValueStore port, so the
same logic runs over an in-memory dict (API process, tests) or a JSON file in
the user's home directory (CLI).
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any

from faceitlens.core.config import HistoryConfig
from faceitlens.core.errors import InvalidInputError
from faceitlens.core.schemas import SearchHistoryEntry
from faceitlens.core.utils import now_ms

logger = logging.getLogger(__name__)

HISTORY_KEY = "faceit_search_history"
LAST_SEARCH_KEY = "faceit_last_search"
LANGUAGE_KEY = "faceit_language"

# Locales faceit.com serves profile pages in
SUPPORTED_LANGUAGES = ("en", "ru", "zh", "es", "de")

DEFAULT_STORAGE_PATH = Path.home() / ".faceitlens" / "storage.json"


def normalize_language(language: str) -> str:
    """Lower-case a language code and check it is supported."""
    code = (language or "").strip().lower()
    if code not in SUPPORTED_LANGUAGES:
        raise InvalidInputError(
            f"Unsupported language '{language}' (choose from {', '.join(SUPPORTED_LANGUAGES)})"
        )
    return code


# =============================================================================
# Key-value port
# =============================================================================


class KeyValueStore:
    """Minimal key-value port: get / set / delete / clear."""

    def get(self, key: str) -> Any | None:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class InMemoryStore(KeyValueStore):
    """Process-local store."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        # Round-trip through JSON so stored values never alias caller objects
        raw = json.dumps(value)
        with self._lock:
            self._data[key] = raw

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON object file."""

    def __init__(self, path: Path | str = DEFAULT_STORAGE_PATH) -> None:
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable storage file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def clear(self) -> None:
        with self._lock:
            if self.path.exists():
                self.path.unlink()


# =============================================================================
# History
# =============================================================================


class SearchHistory:
    """
    Recent successful lookups, newest first.

    Entries are deduplicated case-insensitively by input text and capped at
    max_entries. Unreadable stored data is treated as empty.
    """

    def __init__(
        self,
        store: KeyValueStore,
        max_entries: int = 20,
        last_search_max_age_hours: float = 24.0,
        default_language: str = "en",
    ):
        self.store = store
        self.max_entries = max_entries
        self.last_search_max_age_ms = int(last_search_max_age_hours * 60 * 60 * 1000)
        self.default_language = default_language

    @classmethod
    def from_config(
        cls, config: HistoryConfig, store: KeyValueStore | None = None
    ) -> SearchHistory:
        if store is None:
            store = JsonFileStore(config.path or DEFAULT_STORAGE_PATH)
        return cls(
            store,
            max_entries=config.max_entries,
            last_search_max_age_hours=config.last_search_max_age_hours,
            default_language=config.default_language,
        )

    # ------------------------------------------------------------------
    # Search history
    # ------------------------------------------------------------------

    def entries(self) -> list[SearchHistoryEntry]:
        raw = self.store.get(HISTORY_KEY)
        if not isinstance(raw, list):
            return []
        entries = []
        for item in raw:
            try:
                entries.append(SearchHistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed history entry {item!r}: {e}")
        return entries

    def _save(self, entries: list[SearchHistoryEntry]) -> None:
        self.store.set(HISTORY_KEY, [entry.to_dict() for entry in entries])

    def add(
        self,
        input_text: str,
        player_name: str | None = None,
        steam_id: str | None = None,
    ) -> SearchHistoryEntry:
        """Record a lookup at the top of the history."""
        key = input_text.lower()
        entries = [e for e in self.entries() if e.input.lower() != key]
        entry = SearchHistoryEntry(
            input=input_text,
            timestamp=now_ms(),
            player_name=player_name,
            steam_id=steam_id,
        )
        entries.insert(0, entry)
        self._save(entries[: self.max_entries])
        return entry

    def remove(self, input_text: str) -> bool:
        """Delete one entry (case-insensitive). Returns whether it existed."""
        key = input_text.lower()
        entries = self.entries()
        kept = [e for e in entries if e.input.lower() != key]
        if len(kept) == len(entries):
            return False
        self._save(kept)
        return True

    def clear(self) -> None:
        self.store.delete(HISTORY_KEY)

    # ------------------------------------------------------------------
    # Last search
    # ------------------------------------------------------------------

    def save_last_search(self, stats: dict[str, Any], input_text: str, matches_limit: int) -> None:
        self.store.set(
            LAST_SEARCH_KEY,
            {
                "stats": stats,
                "input": input_text,
                "matchesLimit": matches_limit,
                "timestamp": now_ms(),
            },
        )

    def get_last_search(self) -> dict[str, Any] | None:
        """The last search, or None once it is older than the max age."""
        data = self.store.get(LAST_SEARCH_KEY)
        if not isinstance(data, dict):
            return None

        age = now_ms() - int(data.get("timestamp") or 0)
        if age > self.last_search_max_age_ms:
            self.store.delete(LAST_SEARCH_KEY)
            return None
        return data

    def clear_last_search(self) -> None:
        self.store.delete(LAST_SEARCH_KEY)

    # ------------------------------------------------------------------
    # Language preference
    # ------------------------------------------------------------------

    def get_language(self) -> str:
        """Stored profile URL language, or the configured default."""
        value = self.store.get(LANGUAGE_KEY)
        if isinstance(value, str) and value in SUPPORTED_LANGUAGES:
            return value
        return self.default_language

    def set_language(self, language: str) -> str:
        """
        Store the profile URL language.

        Raises:
            InvalidInputError: Language is not one of SUPPORTED_LANGUAGES
        """
        language = normalize_language(language)
        self.store.set(LANGUAGE_KEY, language)
        return language
