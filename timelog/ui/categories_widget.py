"""
Categories Panel — edit ticket/description/non-work inline, add, delete,
and bulk-delete categories.
"""

from __future__ import annotations

import logging
from typing import Optional, Set

from PySide6.QtCore import Slot
from PySide6.QtWidgets import (
    QAbstractItemView, QCheckBox, QDialog, QDialogButtonBox, QFormLayout, QHBoxLayout,
    QHeaderView, QLabel, QLineEdit, QMessageBox, QPushButton, QTableWidget,
    QTableWidgetItem, QVBoxLayout, QWidget,
)

from timelog.data.models import Category
from timelog.services.log_service import LogService

logger = logging.getLogger(__name__)

COL_SELECT, COL_TICKET, COL_DESCRIPTION, COL_LABEL, COL_NON_WORK, COL_DELETE = range(6)


class CategoriesWidget(QWidget):
    """Category management tab."""

    def __init__(self, service: LogService, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.service = service
        self.bulk_mode = False
        self.selected: Set[str] = set()
        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 16, 20, 16)
        layout.setSpacing(12)

        header = QHBoxLayout()
        title = QLabel("Categories")
        title.setObjectName("title")
        header.addWidget(title)
        header.addStretch()

        self.btn_select_all = QPushButton("Select all")
        self.btn_select_all.clicked.connect(self._select_all)
        header.addWidget(self.btn_select_all)

        self.btn_select_none = QPushButton("Select none")
        self.btn_select_none.clicked.connect(self._select_none)
        header.addWidget(self.btn_select_none)

        self.btn_delete_selected = QPushButton("Delete selected")
        self.btn_delete_selected.setObjectName("danger")
        self.btn_delete_selected.clicked.connect(self._delete_selected)
        header.addWidget(self.btn_delete_selected)

        self.btn_bulk = QPushButton("Bulk delete")
        self.btn_bulk.clicked.connect(self._toggle_bulk_mode)
        header.addWidget(self.btn_bulk)

        btn_add = QPushButton("Add category")
        btn_add.setObjectName("primary")
        btn_add.clicked.connect(self._on_add)
        header.addWidget(btn_add)

        btn_reset = QPushButton("Reset all data")
        btn_reset.setObjectName("danger")
        btn_reset.clicked.connect(self._on_reset)
        header.addWidget(btn_reset)
        layout.addLayout(header)

        hint = QLabel("Deleting a category keeps its entries; they show as uncategorized.")
        hint.setObjectName("subtitle")
        layout.addWidget(hint)

        self.table = QTableWidget(0, 6)
        self.table.setHorizontalHeaderLabels(
            ["", "Ticket", "Description", "Label", "Non-work", ""])
        self.table.verticalHeader().setVisible(False)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        h = self.table.horizontalHeader()
        h.setSectionResizeMode(COL_DESCRIPTION, QHeaderView.ResizeMode.Stretch)
        h.setSectionResizeMode(COL_LABEL, QHeaderView.ResizeMode.Stretch)
        for col in (COL_SELECT, COL_NON_WORK, COL_DELETE):
            h.setSectionResizeMode(col, QHeaderView.ResizeMode.ResizeToContents)
        layout.addWidget(self.table)

        self._update_bulk_controls()

    # ── Refresh ─────────────────────────────────────────────────────────

    def refresh(self) -> None:
        cats = self.service.categories
        # Forget selections of categories deleted elsewhere
        self.selected &= {c.id for c in cats}
        self.table.setRowCount(len(cats))
        for i, cat in enumerate(cats):
            self._fill_row(i, cat)
        self._update_bulk_controls()

    def _fill_row(self, i: int, cat: Category) -> None:
        select = QCheckBox()
        select.setChecked(cat.id in self.selected)
        select.toggled.connect(lambda on, cid=cat.id: self._toggle_selected(cid, on))
        self.table.setCellWidget(i, COL_SELECT, select)

        ticket = QLineEdit(cat.ticket)
        ticket.setPlaceholderText("e.g., 85n, API")
        ticket.editingFinished.connect(
            lambda w=ticket, cid=cat.id: self._edit_field(cid, "ticket", w.text()))
        self.table.setCellWidget(i, COL_TICKET, ticket)

        desc = QLineEdit(cat.description)
        desc.setPlaceholderText("e.g., Work item, Meeting, Break")
        desc.editingFinished.connect(
            lambda w=desc, cid=cat.id: self._edit_field(cid, "description", w.text()))
        self.table.setCellWidget(i, COL_DESCRIPTION, desc)

        self.table.setItem(i, COL_LABEL, QTableWidgetItem(cat.label))

        non_work = QCheckBox()
        non_work.setChecked(cat.non_work)
        non_work.toggled.connect(
            lambda on, cid=cat.id: self.service.update_category(cid, non_work=on))
        self.table.setCellWidget(i, COL_NON_WORK, non_work)

        btn_delete = QPushButton("Delete")
        btn_delete.setObjectName("danger")
        btn_delete.clicked.connect(lambda _=False, c=cat: self._delete_one(c))
        self.table.setCellWidget(i, COL_DELETE, btn_delete)

    # ── Edits ───────────────────────────────────────────────────────────

    def _edit_field(self, category_id: str, field: str, value: str) -> None:
        current = self.service.get_category(category_id)
        if current is None or getattr(current, field) == value:
            return
        self.service.update_category(category_id, **{field: value})

    @Slot()
    def _on_add(self) -> None:
        dialog = AddCategoryDialog(self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        cat = self.service.add_category(dialog.ticket, dialog.description, dialog.non_work)
        if cat is None:
            QMessageBox.warning(self, "Missing Info", "Please enter a ticket code.")

    def _delete_one(self, cat: Category) -> None:
        reply = QMessageBox.question(
            self, "Delete category", f"Delete category \"{cat.label}\"?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.service.delete_category(cat.id)

    @Slot()
    def _on_reset(self) -> None:
        reply = QMessageBox.warning(
            self, "Reset all data",
            "This deletes every entry and restores the default categories. "
            "This cannot be undone.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.selected.clear()
            self.bulk_mode = False
            self.service.reset_all_data()
            self.refresh()

    # ── Bulk delete ─────────────────────────────────────────────────────

    @Slot()
    def _toggle_bulk_mode(self) -> None:
        self.bulk_mode = not self.bulk_mode
        self.selected.clear()
        self.refresh()

    def _toggle_selected(self, category_id: str, on: bool) -> None:
        if on:
            self.selected.add(category_id)
        else:
            self.selected.discard(category_id)
        self._update_bulk_controls()

    @Slot()
    def _select_all(self) -> None:
        self.selected = {c.id for c in self.service.categories}
        self.refresh()

    @Slot()
    def _select_none(self) -> None:
        self.selected.clear()
        self.refresh()

    @Slot()
    def _delete_selected(self) -> None:
        count = len(self.selected)
        if not count:
            return
        reply = QMessageBox.question(
            self, "Delete categories",
            f"Delete {count} selected categor{'y' if count == 1 else 'ies'}?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if reply != QMessageBox.StandardButton.Yes:
            return
        ids = set(self.selected)
        self.selected.clear()
        self.bulk_mode = False
        self.service.delete_categories(ids)
        self.refresh()

    def _update_bulk_controls(self) -> None:
        self.table.setColumnHidden(COL_SELECT, not self.bulk_mode)
        self.table.setColumnHidden(COL_DELETE, self.bulk_mode)
        for btn in (self.btn_select_all, self.btn_select_none, self.btn_delete_selected):
            btn.setVisible(self.bulk_mode)
        self.btn_delete_selected.setEnabled(bool(self.selected))
        self.btn_delete_selected.setText(f"Delete selected ({len(self.selected)})")
        self.btn_bulk.setText("Done" if self.bulk_mode else "Bulk delete")


class AddCategoryDialog(QDialog):
    """Ticket + description + non-work flag for a new category."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Add category")
        self.setMinimumWidth(380)

        layout = QFormLayout(self)
        self.ticket_input = QLineEdit()
        self.ticket_input.setPlaceholderText("e.g., 85n, API")
        layout.addRow("Ticket:", self.ticket_input)

        self.desc_input = QLineEdit()
        self.desc_input.setPlaceholderText("Custom category")
        layout.addRow("Description:", self.desc_input)

        self.non_work_check = QCheckBox("Non-work (excluded from work totals)")
        layout.addRow("", self.non_work_check)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    @property
    def ticket(self) -> str:
        return self.ticket_input.text()

    @property
    def description(self) -> str:
        return self.desc_input.text()

    @property
    def non_work(self) -> bool:
        return self.non_work_check.isChecked()
