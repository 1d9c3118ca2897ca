"""
Application settings — matching threshold, dropdown sizes, shortcut, defaults.

Settings live in config/timelog.json next to the repo root. Missing keys fall
back to DEFAULT_CONFIG, so an old or hand-edited file never breaks startup.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT_DIR / "config" / "timelog.json"
DEFAULT_DB_PATH = ROOT_DIR / "timelog.db"

DEFAULT_CONFIG = {
    "match_threshold": 60,
    "dropdown_max_items": 8,
    "quick_entry_max_items": 5,
    "quick_entry_shortcut": "Ctrl+Shift+T",
    "default_range": "day",
    "default_totals_view": "work",
    "db_path": None,  # None → DEFAULT_DB_PATH
}


def load_config(path: Optional[Path] = None) -> dict:
    """Read the config file and merge it over the defaults."""
    path = path or CONFIG_PATH
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                cfg = json.load(f)
            merged = DEFAULT_CONFIG.copy()
            merged.update({k: v for k, v in cfg.items() if k in DEFAULT_CONFIG})
            return merged
        except (json.JSONDecodeError, AttributeError, OSError):
            logger.warning("Bad config at %s, using defaults.", path)
    return DEFAULT_CONFIG.copy()


def save_config(cfg: dict, path: Optional[Path] = None) -> None:
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(cfg, f, indent=2)
    logger.info("Config saved to %s", path)


def db_path_from(cfg: dict) -> Path:
    return Path(cfg["db_path"]) if cfg.get("db_path") else DEFAULT_DB_PATH
