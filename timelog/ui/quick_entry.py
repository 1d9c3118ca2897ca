"""
Quick Entry — small frameless popup for logging without opening the main window.

Runs its own LogService over the shared repository, so entries it writes reach
the main window through the repository's change notification.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QGuiApplication, QKeyEvent
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from timelog.data.models import Category
from timelog.services.log_service import LogService
from timelog.ui.suggest_box import SuggestBox

logger = logging.getLogger(__name__)


class QuickEntryWindow(QWidget):
    """Always-on-top capture box. Enter logs at the current time and hides."""

    def __init__(self, service: LogService, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.service = service
        self.setWindowTitle("Quick Entry")
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
        )
        self.setFixedWidth(520)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 14, 16, 14)
        layout.setSpacing(6)

        hint = QLabel("Log activity — Enter to save, Esc to close")
        hint.setObjectName("subtitle")
        layout.addWidget(hint)

        self.suggest_box = SuggestBox(service, service.config["quick_entry_max_items"],
                                      placeholder="Type a ticket or activity…")
        self.suggest_box.edit.setObjectName("quick_entry")
        self.suggest_box.text_submitted.connect(self._on_text_submitted)
        self.suggest_box.category_picked.connect(self._on_category_picked)
        layout.addWidget(self.suggest_box)

    # ── Public API ──────────────────────────────────────────────────────────

    def popup(self) -> None:
        """Show centered near the top of the current screen with focus in the box."""
        self.suggest_box.clear()
        self.adjustSize()
        screen = QGuiApplication.primaryScreen()
        if screen is not None:
            geo = screen.availableGeometry()
            self.move(geo.center().x() - self.width() // 2, geo.top() + geo.height() // 4)
        self.show()
        self.raise_()
        self.activateWindow()
        self.suggest_box.focus()

    # ── Internal ────────────────────────────────────────────────────────────

    @Slot(str)
    def _on_text_submitted(self, text: str) -> None:
        if self.service.submit(text, self._now()) is not None:
            self.hide()

    @Slot(object)
    def _on_category_picked(self, category: Category) -> None:
        self.service.add_entry_for(category, self._now())
        self.hide()

    @staticmethod
    def _now() -> datetime:
        return datetime.now().replace(second=0, microsecond=0)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.key() == Qt.Key.Key_Escape:
            self.hide()
            return
        super().keyPressEvent(event)
