"""
Seed Data Generator — fills the log with a month of realistic fake entries.

Run: python scripts/seed_data.py
"""

import random
import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from timelog.config import db_path_from, load_config
from timelog.data.database import Database
from timelog.data.repository import Repository
from timelog.services.log_service import LogService

# What a typical day looks like: (free text, minutes range)
DAY_TEMPLATE = [
    ("85n", (30, 90)),
    ("STANDUP", (15, 20)),
    ("85n", (45, 120)),
    ("lunch", (30, 60)),
    ("API", (30, 90)),
    ("Refinement", (30, 60)),
    ("85h", (20, 90)),
    ("break", (5, 15)),
    ("112g", (30, 90)),
]


def seed(days: int = 30) -> None:
    cfg = load_config()
    db = Database(db_path_from(cfg))
    db.connect()
    svc = LogService(Repository(db.conn), cfg)

    today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
    count = 0
    for offset in range(days, 0, -1):
        day = today - timedelta(days=offset)
        if day.weekday() >= 5:
            continue
        cursor = day + timedelta(hours=random.randint(8, 9), minutes=random.randint(0, 30))
        for text, (lo, hi) in DAY_TEMPLATE:
            svc.submit(text, cursor)
            cursor += timedelta(minutes=random.randint(lo, hi))
            count += 1
        svc.submit("EoD", cursor)
        count += 1

    svc.close()
    db.close()
    print(f"Seeded {count} entries over the last {days} days.")


if __name__ == "__main__":
    seed()
