"""
Log Service — every write to the time log goes through here.

Handles: submitting free text, editing/deleting entries, category CRUD, and
building the derived view (durations + totals) the log screen renders.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional

from timelog.config import DEFAULT_CONFIG
from timelog.data.models import (
    CUSTOM_DESCRIPTION, Category, Entry, LogView, make_label,
)
from timelog.data.repository import CATEGORIES_KEY, ENTRIES_KEY, Repository
from timelog.engine.aggregator import TotalsView, aggregate
from timelog.engine.durations import compute_durations
from timelog.engine.ranges import RangeUnit, bounds
from timelog.engine.resolver import resolve, suggest

logger = logging.getLogger(__name__)


class LogService:
    """
    One writer per window over the shared repository.

    Keeps in-memory snapshots of both collections, writes them back after
    every change, and reloads them when another window writes.
    """

    def __init__(
        self,
        repo: Repository,
        config: Optional[dict] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.repo = repo
        self.config = config or DEFAULT_CONFIG.copy()
        self.on_change = on_change

        self._categories: Optional[List[Category]] = None
        self._entries: Optional[List[Entry]] = None

        # Keep one bound-method object so the repository can recognise it as
        # the origin of our own writes.
        self._listener = self._on_store_update
        self._unsubscribe = repo.subscribe(self._listener)

    def close(self) -> None:
        self._unsubscribe()

    # ── Snapshots ───────────────────────────────────────────────────────────

    @property
    def categories(self) -> List[Category]:
        if self._categories is None:
            self._categories = self.repo.load_categories()
        return list(self._categories)

    @property
    def entries(self) -> List[Entry]:
        if self._entries is None:
            self._entries = self.repo.load_entries()
        return list(self._entries)

    def get_category(self, category_id: str) -> Optional[Category]:
        for c in self.categories:
            if c.id == category_id:
                return c
        return None

    def category_for(self, entry: Entry) -> Optional[Category]:
        """The entry's category, or None if it has been deleted."""
        return self.get_category(entry.category_id)

    # ── Suggestions ─────────────────────────────────────────────────────────

    def suggest(self, query: str, limit: Optional[int] = None) -> List[Category]:
        if limit is None:
            limit = self.config["dropdown_max_items"]
        return suggest(query, self.categories, limit)

    # ── Entries ─────────────────────────────────────────────────────────────

    def submit(self, free_text: str, ts: datetime) -> Optional[Entry]:
        """Log free text at ts. Blank text is ignored and returns None."""
        category = self._resolve_and_commit(free_text)
        if category is None:
            return None
        return self.add_entry_for(category, ts)

    def add_entry_for(self, category: Category, ts: datetime) -> Entry:
        """Log an already chosen category (dropdown pick) at ts."""
        entry = Entry.create(ts, category)
        self._save_entries(self.entries + [entry])
        logger.info("Logged %s at %s", category.label, ts.isoformat(timespec="minutes"))
        return entry

    def edit_entry(self, entry_id: str, free_text: str, ts: datetime) -> Optional[Entry]:
        """Re-resolve an entry's text and move it to ts. Blank text is a no-op."""
        self._find_entry(entry_id)
        category = self._resolve_and_commit(free_text)
        if category is None:
            return None
        return self.edit_entry_to(entry_id, category, ts)

    def edit_entry_to(self, entry_id: str, category: Category, ts: datetime) -> Entry:
        """Point an entry at an already chosen category (dropdown pick) and move it to ts."""
        existing = self._find_entry(entry_id)
        updated = replace(existing, ts=ts, raw_text=category.ticket,
                          category_id=category.id, label=category.label)
        self._save_entries([updated if e.id == entry_id else e for e in self.entries])
        logger.info("Edited entry %s → %s at %s", entry_id, category.label,
                    ts.isoformat(timespec="minutes"))
        return updated

    def delete_entry(self, entry_id: str) -> bool:
        remaining = [e for e in self.entries if e.id != entry_id]
        if len(remaining) == len(self.entries):
            return False
        self._save_entries(remaining)
        logger.info("Deleted entry %s", entry_id)
        return True

    # ── Categories ──────────────────────────────────────────────────────────

    def add_category(self, ticket: str, description: str = "",
                     non_work: bool = False) -> Optional[Category]:
        """Create a category at the top of the list. Blank ticket is ignored."""
        ticket = ticket.strip()
        if not ticket:
            return None
        cat = Category.create(ticket, description.strip() or CUSTOM_DESCRIPTION, non_work)
        self._save_categories([cat] + self.categories)
        logger.info("Added category %s", cat.label)
        return cat

    def update_category(
        self,
        category_id: str,
        ticket: Optional[str] = None,
        description: Optional[str] = None,
        non_work: Optional[bool] = None,
    ) -> Category:
        """Apply edits to a category; the label is re-derived from ticket/description."""
        current = self.get_category(category_id)
        if current is None:
            raise KeyError(f"No category with id {category_id!r}.")

        new_ticket = current.ticket if ticket is None else ticket
        new_description = current.description if description is None else description
        updated = replace(current, ticket=new_ticket, description=new_description,
                          non_work=current.non_work if non_work is None else non_work)
        if ticket is not None or description is not None:
            updated = replace(updated, label=make_label(new_ticket, new_description))

        self._save_categories([updated if c.id == category_id else c for c in self.categories])
        return updated

    def delete_category(self, category_id: str) -> bool:
        return self.delete_categories([category_id]) == 1

    def delete_categories(self, category_ids: Iterable[str]) -> int:
        """Remove categories. Entries referencing them are left untouched."""
        ids = set(category_ids)
        remaining = [c for c in self.categories if c.id not in ids]
        removed = len(self.categories) - len(remaining)
        if removed:
            self._save_categories(remaining)
            logger.warning("Deleted %d categories", removed)
        return removed

    def reset_all_data(self) -> None:
        """Drop every entry and category; the default categories come back."""
        self.repo.reset_all_data(origin=self._listener)
        self._categories = None
        self._entries = None
        self._changed()

    # ── Derived view ────────────────────────────────────────────────────────

    def view(
        self,
        reference: Optional[datetime] = None,
        unit: str = RangeUnit.DAY,
        totals_view: str = TotalsView.WORK,
    ) -> LogView:
        reference = reference or datetime.now()
        window = bounds(reference, unit)
        rows = compute_durations(self.entries, window)
        totals = aggregate(rows, self.categories, totals_view)
        return LogView(bounds=window, rows=rows, totals=totals, unit=unit,
                       totals_view=totals_view, reference=reference)

    # ── Helpers ─────────────────────────────────────────────────────────────

    def _resolve_and_commit(self, free_text: str) -> Optional[Category]:
        if not free_text.strip():
            return None
        resolution = resolve(free_text, self.categories, self.config["match_threshold"])
        if resolution.is_new:
            self._save_categories(self.categories + [resolution.category])
            logger.info("Created ad-hoc category %r", resolution.category.ticket)
        return resolution.category

    def _find_entry(self, entry_id: str) -> Entry:
        for e in self.entries:
            if e.id == entry_id:
                return e
        raise KeyError(f"No entry with id {entry_id!r}.")

    def _save_entries(self, entries: List[Entry]) -> None:
        self._entries = sorted(entries, key=lambda e: e.ts)
        self.repo.save_entries(self._entries, origin=self._listener)
        self._changed()

    def _save_categories(self, categories: List[Category]) -> None:
        self._categories = list(categories)
        self.repo.save_categories(self._categories, origin=self._listener)
        self._changed()

    def _on_store_update(self, key: str, value: Any) -> None:
        """Another window wrote; drop the stale snapshot and refresh."""
        if key == CATEGORIES_KEY:
            self._categories = None
        elif key == ENTRIES_KEY:
            self._entries = None
        else:
            return
        logger.debug("Reloading %s after external update", key)
        self._changed()

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The only writer of the time log. The UI calls submit()/edit_entry()/
#   add_category()/...; this class updates its snapshot, persists it, and
#   asks the UI to redraw via on_change.
#
# Key design decisions:
#   - The resolver is pure; committing a new ad-hoc category happens here,
#     exactly once, right before the entry that needs it is saved.
#   - Entries are re-sorted by timestamp on every save, so the stored list
#     is always in chronological order (sorted() is stable for ties).
#   - Two windows = two LogService instances on one Repository. Each passes
#     its own listener as origin, so only the *other* one reloads.
#
# Data flow:
#   QLineEdit Enter → LogService.submit() → resolve() → (new category saved)
#   → entry saved → Repository notifies other windows → on_change → redraw.
#
# Interviewer-friendly talking points:
#   1. Deleting a category never deletes entries. Those entries show as
#      uncategorized and drop out of totals, which the user can fix by
#      editing them; silent data loss would be worse.
#   2. Blank input returns None instead of raising: pressing Enter on an
#      empty box is not an error worth a dialog.
