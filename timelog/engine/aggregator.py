"""
Aggregator — per-category totals for the totals panel.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Sequence

from timelog.data.models import Category, DurationRow, Totals, TotalsRow, to_local

logger = logging.getLogger(__name__)


class TotalsView:
    WORK = "work"
    ALL = "all"

    CHOICES = (WORK, ALL)


def human_hm(total_minutes: int) -> str:
    """Render minutes as e.g. '1h 05m'."""
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes:02d}m"


def to_local_hm(ts: datetime) -> str:
    return to_local(ts).strftime("%H:%M")


def aggregate(
    rows: Iterable[DurationRow],
    categories: Sequence[Category],
    view: str = TotalsView.WORK,
) -> Totals:
    """
    Sum minutes per category label, largest first.

    Rows whose category no longer exists are left out. In the work view,
    non-work categories are left out too. Two categories rendering the same
    label share one row.
    """
    if view not in TotalsView.CHOICES:
        raise ValueError(f"Unknown totals view {view!r}; expected one of {TotalsView.CHOICES}.")

    by_id = {c.id: c for c in categories}
    # dicts keep insertion order, so ties below stay in first-seen order
    sums: Dict[str, int] = {}
    skipped = 0
    for r in rows:
        cat = by_id.get(r.category_id)
        if cat is None:
            skipped += 1
            continue
        if view == TotalsView.WORK and cat.non_work:
            continue
        sums[cat.label] = sums.get(cat.label, 0) + r.minutes

    if skipped:
        logger.debug("Left %d uncategorized rows out of totals", skipped)

    ordered = sorted(sums.items(), key=lambda kv: kv[1], reverse=True)
    out: List[TotalsRow] = [TotalsRow(label, m, human_hm(m)) for label, m in ordered]
    return Totals(rows=out, total=sum(r.minutes for r in out))
