"""
Repository — the single place where stored data is read and written.

Holds the two collections (categories, entries) as JSON documents in the kv
table and notifies every other subscriber when one of them changes, so two
open windows always render the same data.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Callable, List, Optional

from .defaults import default_categories
from .models import Category, Entry

logger = logging.getLogger(__name__)

CATEGORIES_KEY = "timelog.categories.v1"
ENTRIES_KEY = "timelog.entries.v2"

Listener = Callable[[str, Any], None]


class Repository:
    """Key-value access layer wrapping a sqlite3 connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self._listeners: List[Listener] = []

    # ── Raw key-value API ───────────────────────────────────────────────────

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value for key, or default if missing/unreadable."""
        row = self.conn.execute(
            "SELECT value FROM kv WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning("Unparsable value stored under %r, using default.", key)
            return default

    def set(self, key: str, value: Any, origin: Optional[Listener] = None) -> None:
        """
        Store value under key and notify subscribers.

        origin is the writer's own listener; it is skipped so a window does
        not get its own write echoed back.
        """
        self.conn.execute(
            "INSERT INTO kv (key, value, updated_at) VALUES (?, ?, datetime('now')) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
            "updated_at = excluded.updated_at",
            (key, json.dumps(value, ensure_ascii=False)),
        )
        self.conn.commit()
        self._notify(key, value, origin)

    def delete(self, key: str, origin: Optional[Listener] = None) -> None:
        self.conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        self.conn.commit()
        self._notify(key, None, origin)

    # ── Change notification ─────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener(key, value); returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, key: str, value: Any, origin: Optional[Listener]) -> None:
        for listener in list(self._listeners):
            if listener is origin:
                continue
            listener(key, value)

    # ── Categories ──────────────────────────────────────────────────────────

    def load_categories(self) -> List[Category]:
        raw = self.get(CATEGORIES_KEY)
        if raw is None:
            return default_categories()
        cats = self._decode_list(raw, Category.from_dict, CATEGORIES_KEY)
        return cats if cats is not None else default_categories()

    def save_categories(self, categories: List[Category],
                        origin: Optional[Listener] = None) -> None:
        self.set(CATEGORIES_KEY, [c.to_dict() for c in categories], origin)
        logger.info("Saved %d categories", len(categories))

    # ── Entries ─────────────────────────────────────────────────────────────

    def load_entries(self) -> List[Entry]:
        raw = self.get(ENTRIES_KEY)
        if raw is None:
            return []
        entries = self._decode_list(raw, Entry.from_dict, ENTRIES_KEY) or []
        return sorted(entries, key=lambda e: e.ts)

    def save_entries(self, entries: List[Entry],
                     origin: Optional[Listener] = None) -> None:
        self.set(ENTRIES_KEY, [e.to_dict() for e in entries], origin)
        logger.info("Saved %d entries", len(entries))

    def reset_all_data(self, origin: Optional[Listener] = None) -> None:
        """Delete both collections. Requires explicit confirmation in the UI."""
        self.delete(CATEGORIES_KEY, origin)
        self.delete(ENTRIES_KEY, origin)
        logger.warning("All data has been reset.")

    # ── Decoding ────────────────────────────────────────────────────────────

    @staticmethod
    def _decode_list(raw: Any, from_dict: Callable[[dict], Any], key: str) -> Optional[list]:
        """Decode a stored list, skipping bad records. None if raw is not a list."""
        if not isinstance(raw, list):
            logger.warning("Value under %r is not a list, ignoring it.", key)
            return None
        items = []
        for record in raw:
            try:
                items.append(from_dict(record))
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed record under %r: %r", key, record)
        return items


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The persistence collaborator. get/set/delete over JSON documents plus a
#   subscribe/notify channel, and typed helpers for the two collections.
#
# Key methods:
#   - set(): writes, commits, then tells every *other* subscriber. The writer
#     passes its own listener as origin so it is not notified of itself.
#   - load_categories(): a missing key means "first launch" → defaults.
#   - load_entries(): always returned sorted by timestamp.
#
# Data flow:
#   LogService.submit() → Repository.save_entries() → kv row updated →
#   other LogService instances' listeners → their windows refresh.
#
# Interviewer-friendly talking points:
#   1. Corrupt data never reaches the user as an error: unparsable JSON or a
#      wrong shape falls back to the default collection, and individual bad
#      records are skipped with a warning.
#   2. Notification happens after commit, so a listener that re-reads the
#      store always sees the new value.
