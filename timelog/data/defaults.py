"""Starter category set, written the first time the store has no categories."""

from __future__ import annotations

from typing import List

from .models import Category, make_label

# (id, ticket, description, non_work)
_DEFAULTS = [
    ("cat-85n", "85n", "API epic", False),
    ("cat-85h", "85h", "Work item", False),
    ("cat-85i", "85i", "Work item", False),
    ("cat-112g", "112g", "Work item", False),
    ("cat-api", "API", "Ticket", False),
    ("cat-standup", "STANDUP", "Daily stand-up", False),
    ("cat-refine", "Refinement", "Backlog/Refinement", False),
    ("cat-retro", "Retro", "Sprint retrospective", False),
    ("cat-demo", "Sprint demo", "Sprint review/demo", False),
    ("cat-attachments", "File attachments", "Call", False),
    ("cat-lunch", "Lunch", "Break", True),
    ("cat-break", "Break", "Short break", True),
    ("cat-ooo", "OOO", "Out of office", True),
]


def default_categories() -> List[Category]:
    cats = [
        Category(id=cid, ticket=ticket, description=desc,
                 label=make_label(ticket, desc), non_work=non_work)
        for cid, ticket, desc, non_work in _DEFAULTS
    ]
    # The end-of-day marker ships with a short label that differs from its
    # description; it is re-derived on the first edit like any other.
    cats.append(Category(id="cat-eod", ticket="EoD", description="End of day marker",
                         label="EoD — Marker", non_work=True))
    return cats
