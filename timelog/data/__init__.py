from .database import Database
from .models import Category, Entry, DurationRow, Bounds, Totals, TotalsRow, Resolution, LogView
from .repository import Repository, CATEGORIES_KEY, ENTRIES_KEY
from .defaults import default_categories

__all__ = [
    "Database", "Category", "Entry", "DurationRow", "Bounds", "Totals", "TotalsRow",
    "Resolution", "LogView", "Repository", "CATEGORIES_KEY", "ENTRIES_KEY",
    "default_categories",
]
