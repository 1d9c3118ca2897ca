"""
Suggest Box — a line edit with a live category dropdown underneath.

Shared by the log tab and the quick-entry popup. Enter submits the typed text;
picking a row (click, or arrows + Enter) submits that category directly.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from PySide6.QtCore import QEvent, QObject, Qt, Signal, Slot
from PySide6.QtGui import QKeyEvent
from PySide6.QtWidgets import QLineEdit, QListWidget, QListWidgetItem, QVBoxLayout, QWidget

from timelog.data.models import Category
from timelog.services.log_service import LogService

logger = logging.getLogger(__name__)


class SuggestBox(QWidget):
    """Free-text input plus suggestion list."""

    text_submitted = Signal(str)
    category_picked = Signal(object)  # Category

    def __init__(self, service: LogService, limit: int,
                 placeholder: str = "What are you working on?",
                 parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.service = service
        self.limit = limit
        self._matches: List[Category] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self.edit = QLineEdit()
        self.edit.setPlaceholderText(placeholder)
        self.edit.textChanged.connect(self._refresh)
        self.edit.returnPressed.connect(self._on_return)
        self.edit.installEventFilter(self)
        layout.addWidget(self.edit)

        self.list = QListWidget()
        self.list.setObjectName("suggestions")
        self.list.setMaximumHeight(200)
        self.list.itemClicked.connect(self._on_item_clicked)
        self.list.hide()
        layout.addWidget(self.list)

    # ── Public API ──────────────────────────────────────────────────────────

    def text(self) -> str:
        return self.edit.text()

    def set_text(self, text: str) -> None:
        self.edit.setText(text)

    def clear(self) -> None:
        self.edit.clear()
        self._hide_list()

    def focus(self) -> None:
        self.edit.setFocus()
        self.edit.selectAll()

    # ── Internal ────────────────────────────────────────────────────────────

    @Slot(str)
    def _refresh(self, text: str) -> None:
        self._matches = self.service.suggest(text, self.limit)
        self.list.clear()
        for cat in self._matches:
            item = QListWidgetItem(cat.label + ("  (non-work)" if cat.non_work else ""))
            item.setData(Qt.ItemDataRole.UserRole, cat.id)
            self.list.addItem(item)
        self.list.setVisible(bool(self._matches))
        self.list.setCurrentRow(-1)

    def _hide_list(self) -> None:
        self._matches = []
        self.list.clear()
        self.list.hide()

    @Slot()
    def _on_return(self) -> None:
        row = self.list.currentRow()
        if self.list.isVisible() and 0 <= row < len(self._matches):
            self._pick(self._matches[row])
            return
        text = self.edit.text()
        if text.strip():
            self.text_submitted.emit(text)

    @Slot(QListWidgetItem)
    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        row = self.list.row(item)
        if 0 <= row < len(self._matches):
            self._pick(self._matches[row])

    def _pick(self, category: Category) -> None:
        self.edit.blockSignals(True)
        self.edit.setText(category.ticket)
        self.edit.blockSignals(False)
        self._hide_list()
        self.category_picked.emit(category)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self.edit and isinstance(event, QKeyEvent) \
                and event.type() == QEvent.Type.KeyPress:
            key = event.key()
            if key == Qt.Key.Key_Down and self.list.isVisible():
                self.list.setCurrentRow(min(self.list.currentRow() + 1, self.list.count() - 1))
                return True
            if key == Qt.Key.Key_Up and self.list.isVisible():
                self.list.setCurrentRow(max(self.list.currentRow() - 1, -1))
                return True
            if key == Qt.Key.Key_Escape and self.list.isVisible():
                self._hide_list()
                return True
        return super().eventFilter(watched, event)
