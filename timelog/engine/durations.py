"""
Duration Calculator — how long each entry lasted.

An entry runs until the next entry on the same calendar day. The last entry
of a day has no successor and counts 0 minutes, even if the next day starts
a minute after midnight.
"""

from __future__ import annotations

import math
from collections import OrderedDict
from datetime import date, datetime
from typing import Dict, Iterable, List

from timelog.data.models import Bounds, DurationRow, Entry, local_wall, to_local


def round_minutes(start: datetime, end: datetime) -> int:
    """Elapsed whole minutes from start to end, halves rounded up, never negative."""
    minutes = (to_local(end) - to_local(start)).total_seconds() / 60.0
    return max(0, math.floor(minutes + 0.5))


def group_by_day(entries: Iterable[Entry]) -> Dict[date, List[Entry]]:
    """Entries keyed by local calendar date, each day sorted by time."""
    days: Dict[date, List[Entry]] = OrderedDict()
    for e in entries:
        days.setdefault(local_wall(e.ts).date(), []).append(e)
    for day_entries in days.values():
        day_entries.sort(key=lambda e: e.ts)
    return days


def compute_durations(entries: Iterable[Entry], window: Bounds) -> List[DurationRow]:
    """Entries inside window, each with minutes until its same-day successor."""
    in_range = [e for e in entries if window.contains(e.ts)]

    rows: List[DurationRow] = []
    for day_entries in group_by_day(in_range).values():
        for current, following in zip(day_entries, day_entries[1:] + [None]):
            minutes = round_minutes(current.ts, following.ts) if following else 0
            rows.append(DurationRow(entry=current, minutes=minutes))

    rows.sort(key=lambda r: r.ts)
    return rows


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Derives per-entry durations. Entries only record when an activity
#   *started*; its length is the gap to whatever was logged next.
#
# Key points:
#   - Grouping is by calendar date, not a rolling 24h window. Forgetting to
#     log "EoD" should not turn the last task of the day into a 14-hour one.
#   - Rounding is floor(x + 0.5): 30.5 minutes is 31, matching what users
#     see on a clock, instead of Python's round-half-to-even.
#   - Identical timestamps give 0 for the earlier one; the sorts are stable
#     so insertion order decides which is "earlier".
#
# Interviewer-friendly talking points:
#   1. O(n log n) per call, recomputed on every render. A month of entries
#      is a few hundred rows, so caching would add complexity for nothing.
