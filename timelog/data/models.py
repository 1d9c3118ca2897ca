"""
Data models for TimeLog.

Frozen dataclasses for the two persisted records (Category, Entry) plus the
read-only views the engine derives from them. Edits never mutate a record in
place; callers build a replaced copy with dataclasses.replace().
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

LABEL_SEPARATOR = " — "
ADHOC_DESCRIPTION = "Ad-hoc"
CUSTOM_DESCRIPTION = "Custom category"


def make_label(ticket: str, description: str) -> str:
    return f"{ticket}{LABEL_SEPARATOR}{description}"


def new_category_id() -> str:
    return f"cat-{uuid.uuid4().hex}"


def new_entry_id() -> str:
    return f"e-{uuid.uuid4().hex}"


def to_local(ts: datetime) -> datetime:
    """The same instant as an aware datetime in the machine's local zone.

    Naive values are taken to be local wall-clock time.
    """
    return ts.astimezone()


def local_wall(ts: datetime) -> datetime:
    """Naive local wall-clock time of ts, for day/week/month boundaries."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)


def parse_timestamp(value: str) -> datetime:
    """
    Parse a stored timestamp into an aware local datetime.

    Accepts offset-qualified strings, UTC ('Z') ones written by older
    versions, and plain strings, which are read as local time.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return to_local(datetime.fromisoformat(value))


@dataclass(frozen=True)
class Category:
    """A reusable label (ticket + description) that entries attach to."""
    id: str
    ticket: str
    description: str
    label: str
    non_work: bool = False

    @classmethod
    def create(cls, ticket: str, description: str, non_work: bool = False) -> "Category":
        return cls(id=new_category_id(), ticket=ticket, description=description,
                   label=make_label(ticket, description), non_work=non_work)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket": self.ticket,
            "description": self.description,
            "label": self.label,
            "nonWork": self.non_work,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        ticket = str(data.get("ticket", ""))
        description = str(data.get("description", ""))
        return cls(
            id=str(data["id"]),
            ticket=ticket,
            description=description,
            label=str(data.get("label") or make_label(ticket, description)),
            non_work=bool(data.get("nonWork", False)),
        )


@dataclass(frozen=True)
class Entry:
    """
    One timestamped log record.

    ts is an absolute instant, kept as an aware datetime in local time.
    raw_text holds the resolved category's ticket; label is a snapshot of the
    category label at the time the entry was created or last edited. The
    category_id is a plain reference and may point at a deleted category.
    """
    id: str
    ts: datetime
    raw_text: str
    category_id: str
    label: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "ts", to_local(self.ts))

    @classmethod
    def create(cls, ts: datetime, category: Category) -> "Entry":
        return cls(id=new_entry_id(), ts=ts, raw_text=category.ticket,
                   category_id=category.id, label=category.label)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tsISO": self.ts.isoformat(),
            "rawText": self.raw_text,
            "categoryId": self.category_id,
            "label": self.label,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Entry":
        return cls(
            id=str(data["id"]),
            ts=parse_timestamp(str(data["tsISO"])),
            raw_text=str(data.get("rawText", "")),
            category_id=str(data.get("categoryId", "")),
            label=str(data.get("label", "")),
        )


@dataclass(frozen=True)
class DurationRow:
    """An entry annotated with the minutes until the next entry that day."""
    entry: Entry
    minutes: int

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def ts(self) -> datetime:
        return self.entry.ts

    @property
    def category_id(self) -> str:
        return self.entry.category_id

    @property
    def label(self) -> str:
        return self.entry.label


@dataclass(frozen=True)
class Bounds:
    """Inclusive [start, end] window in naive local wall-clock time."""
    start: datetime
    end: datetime

    def contains(self, ts: datetime) -> bool:
        return self.start <= local_wall(ts) <= self.end


@dataclass(frozen=True)
class TotalsRow:
    label: str
    minutes: int
    hm: str = ""


@dataclass(frozen=True)
class Totals:
    rows: List[TotalsRow] = field(default_factory=list)
    total: int = 0


@dataclass(frozen=True)
class Resolution:
    """Result of resolving free text: an existing category or a new ad-hoc one."""
    category: Category
    is_new: bool


@dataclass(frozen=True)
class LogView:
    """Everything the log screen renders for one range + totals selection."""
    bounds: Bounds
    rows: List[DurationRow]
    totals: Totals
    unit: str = "day"
    totals_view: str = "work"
    reference: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Defines the two records the app persists (Category, Entry) and the
#   derived shapes the engine hands to the UI (DurationRow, Totals, Bounds).
#
# Key points:
#   - frozen=True: the engine works on snapshots and must never mutate its
#     inputs. Freezing turns an accidental mutation into an immediate error.
#   - to_dict/from_dict keep the camelCase keys of the stored JSON, so the
#     on-disk shape is independent of Python naming.
#   - Entry.category_id is a reference, not ownership: deleting a category
#     leaves entries pointing at nothing, and every consumer null-checks.
#
# Interviewer-friendly talking points:
#   1. Label snapshot on Entry: renaming a category later does not rewrite
#      history in the entry list, but totals group by the live category.
#   2. Two views of one timestamp: Entry.ts is an aware instant, so a gap
#      across a DST switch subtracts to the real elapsed minutes, while
#      Bounds and day grouping use local_wall() for calendar boundaries.
