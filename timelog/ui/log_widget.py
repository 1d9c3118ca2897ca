"""
Log Widget — entry form, entry list for the selected range, and totals.

Layout (top to bottom):
  - date + time pickers, free-text box with suggestions, Log / Save / Cancel
  - Day / Week / Month toggle and the entry table with per-entry minutes
  - Work only / All toggle, totals table and bar chart
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from PySide6.QtCore import QDate, QTime, Qt, Slot
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QAbstractItemView, QButtonGroup, QDateEdit, QFrame, QHBoxLayout, QHeaderView,
    QLabel, QMessageBox, QPushButton, QSplitter, QTableWidget, QTableWidgetItem,
    QTimeEdit, QVBoxLayout, QWidget,
)

from timelog.data.models import Category, DurationRow, Entry, LogView
from timelog.engine.aggregator import TotalsView, human_hm, to_local_hm
from timelog.engine.ranges import RangeUnit
from timelog.services.log_service import LogService
from timelog.ui import charts, styles
from timelog.ui.suggest_box import SuggestBox

logger = logging.getLogger(__name__)

UNCATEGORIZED = "(uncategorized)"


def _segment(labels: dict, parent_layout: QHBoxLayout, on_click) -> QButtonGroup:
    """Row of exclusive checkable buttons; each carries its key as a property."""
    group = QButtonGroup(parent_layout)
    group.setExclusive(True)
    for key, text in labels.items():
        btn = QPushButton(text)
        btn.setObjectName("segment")
        btn.setCheckable(True)
        btn.setProperty("key", key)
        group.addButton(btn)
        parent_layout.addWidget(btn)
    group.buttonClicked.connect(lambda b: on_click(b.property("key")))
    return group


class LogWidget(QWidget):
    """The main logging screen."""

    def __init__(self, service: LogService, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.service = service
        self.unit: str = service.config.get("default_range", RangeUnit.DAY)
        self.totals_view: str = service.config.get("default_totals_view", TotalsView.WORK)
        self._editing: Optional[Entry] = None
        self._view: Optional[LogView] = None
        self._build_ui()
        self.refresh()

    # ── UI Construction ─────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 16, 20, 16)
        layout.setSpacing(12)

        # ── Entry form ──────────────────────────────────────────────
        form = QHBoxLayout()
        form.setSpacing(8)

        self.date_edit = QDateEdit()
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDisplayFormat("yyyy-MM-dd")
        form.addWidget(self.date_edit, 0, Qt.AlignmentFlag.AlignTop)

        self.time_edit = QTimeEdit()
        self.time_edit.setDisplayFormat("HH:mm")
        form.addWidget(self.time_edit, 0, Qt.AlignmentFlag.AlignTop)

        self.suggest_box = SuggestBox(self.service, self.service.config["dropdown_max_items"])
        self.suggest_box.text_submitted.connect(self._on_text_submitted)
        self.suggest_box.category_picked.connect(self._on_category_picked)
        form.addWidget(self.suggest_box, 1)

        self.btn_submit = QPushButton("Log")
        self.btn_submit.setObjectName("primary")
        self.btn_submit.clicked.connect(self._on_submit_clicked)
        form.addWidget(self.btn_submit, 0, Qt.AlignmentFlag.AlignTop)

        self.btn_cancel = QPushButton("Cancel")
        self.btn_cancel.clicked.connect(self._cancel_edit)
        self.btn_cancel.hide()
        form.addWidget(self.btn_cancel, 0, Qt.AlignmentFlag.AlignTop)

        layout.addLayout(form)
        self._reset_form()

        splitter = QSplitter(Qt.Orientation.Vertical)
        layout.addWidget(splitter, 1)

        # ── Entries ─────────────────────────────────────────────────
        entries_panel = QWidget()
        ep = QVBoxLayout(entries_panel)
        ep.setContentsMargins(0, 0, 0, 0)

        range_row = QHBoxLayout()
        self.range_label = QLabel("")
        self.range_label.setObjectName("subtitle")
        range_row.addWidget(self.range_label)
        range_row.addStretch()
        self.range_group = _segment(
            {RangeUnit.DAY: "Day", RangeUnit.WEEK: "Week", RangeUnit.MONTH: "Month"},
            range_row, self._on_range_changed,
        )
        ep.addLayout(range_row)

        self.entry_table = QTableWidget(0, 5)
        self.entry_table.setHorizontalHeaderLabels(["When", "Activity", "Duration", "", ""])
        self.entry_table.verticalHeader().setVisible(False)
        self.entry_table.setAlternatingRowColors(True)
        self.entry_table.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        self.entry_table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        header = self.entry_table.horizontalHeader()
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        for col in (0, 2, 3, 4):
            header.setSectionResizeMode(col, QHeaderView.ResizeMode.ResizeToContents)
        ep.addWidget(self.entry_table)
        splitter.addWidget(entries_panel)

        # ── Totals ──────────────────────────────────────────────────
        totals_panel = QWidget()
        tp = QVBoxLayout(totals_panel)
        tp.setContentsMargins(0, 0, 0, 0)

        totals_row = QHBoxLayout()
        self.total_label = QLabel("0h 00m")
        self.total_label.setObjectName("total")
        totals_row.addWidget(self.total_label)
        totals_row.addStretch()
        self.totals_group = _segment(
            {TotalsView.WORK: "Work only", TotalsView.ALL: "All"},
            totals_row, self._on_totals_view_changed,
        )
        tp.addLayout(totals_row)

        body = QHBoxLayout()
        self.totals_table = QTableWidget(0, 2)
        self.totals_table.setHorizontalHeaderLabels(["Category", "Time"])
        self.totals_table.verticalHeader().setVisible(False)
        self.totals_table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.totals_table.horizontalHeader().setSectionResizeMode(
            0, QHeaderView.ResizeMode.Stretch)
        body.addWidget(self.totals_table, 1)

        self.chart_slot = QFrame()
        self._chart_layout = QVBoxLayout(self.chart_slot)
        self._chart_layout.setContentsMargins(0, 0, 0, 0)
        self._chart_view = None
        body.addWidget(self.chart_slot, 1)
        tp.addLayout(body)
        splitter.addWidget(totals_panel)

        self._check_segment(self.range_group, self.unit)
        self._check_segment(self.totals_group, self.totals_view)

    @staticmethod
    def _check_segment(group: QButtonGroup, key: str) -> None:
        for btn in group.buttons():
            btn.setChecked(btn.property("key") == key)

    # ── Refresh ─────────────────────────────────────────────────────────

    def refresh(self) -> None:
        """Recompute the view and redraw tables and chart."""
        self._view = self.service.view(datetime.now(), self.unit, self.totals_view)
        self._fill_entries(self._view)
        self._fill_totals(self._view)

    def _fill_entries(self, view: LogView) -> None:
        b = view.bounds
        if self.unit == RangeUnit.DAY:
            self.range_label.setText(b.start.strftime("%A %d %B %Y"))
        else:
            self.range_label.setText(
                f"{b.start.strftime('%d %b')} – {b.end.strftime('%d %b %Y')}")

        show_date = self.unit != RangeUnit.DAY
        self.entry_table.setRowCount(len(view.rows))
        for i, row in enumerate(view.rows):
            self._fill_entry_row(i, row, show_date)

    def _fill_entry_row(self, i: int, row: DurationRow, show_date: bool) -> None:
        cat = self.service.category_for(row.entry)
        when = to_local_hm(row.ts)
        if show_date:
            when = f"{row.ts.strftime('%a %d')}  {when}"

        label = cat.label if cat else f"{row.label} {UNCATEGORIZED}"
        items = [
            QTableWidgetItem(when),
            QTableWidgetItem(label),
            QTableWidgetItem(human_hm(row.minutes) if row.minutes else "—"),
        ]
        muted = cat is None or cat.non_work
        for col, item in enumerate(items):
            if muted:
                item.setForeground(QColor(styles.SUBTEXT))
            self.entry_table.setItem(i, col, item)

        entry_id = row.id
        btn_edit = QPushButton("Edit")
        btn_edit.clicked.connect(lambda _=False, eid=entry_id: self._start_edit(eid))
        self.entry_table.setCellWidget(i, 3, btn_edit)

        btn_delete = QPushButton("Delete")
        btn_delete.setObjectName("danger")
        btn_delete.clicked.connect(lambda _=False, eid=entry_id: self._delete_entry(eid))
        self.entry_table.setCellWidget(i, 4, btn_delete)

    def _fill_totals(self, view: LogView) -> None:
        totals = view.totals
        self.totals_table.setRowCount(len(totals.rows))
        for i, r in enumerate(totals.rows):
            self.totals_table.setItem(i, 0, QTableWidgetItem(r.label))
            hm = QTableWidgetItem(r.hm)
            hm.setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
            self.totals_table.setItem(i, 1, hm)
        self.total_label.setText(f"Total {human_hm(totals.total)}")

        if self._chart_view is not None:
            self._chart_layout.removeWidget(self._chart_view)
            self._chart_view.deleteLater()
        self._chart_view = charts.plot_totals(totals)
        self._chart_layout.addWidget(self._chart_view)

    # ── Form actions ────────────────────────────────────────────────────

    def _form_timestamp(self) -> datetime:
        d: QDate = self.date_edit.date()
        t: QTime = self.time_edit.time()
        return datetime(d.year(), d.month(), d.day(), t.hour(), t.minute())

    def _reset_form(self) -> None:
        now = datetime.now()
        self.date_edit.setDate(QDate(now.year, now.month, now.day))
        self.time_edit.setTime(QTime(now.hour, now.minute))
        self.suggest_box.clear()

    @Slot()
    def _on_submit_clicked(self) -> None:
        text = self.suggest_box.text()
        if text.strip():
            self._on_text_submitted(text)

    @Slot(str)
    def _on_text_submitted(self, text: str) -> None:
        ts = self._form_timestamp()
        if self._editing is not None:
            self.service.edit_entry(self._editing.id, text, ts)
            self._finish_edit()
        elif self.service.submit(text, ts) is not None:
            self._reset_form()
        self.suggest_box.focus()

    @Slot(object)
    def _on_category_picked(self, category: Category) -> None:
        if self._editing is not None:
            self.service.edit_entry_to(self._editing.id, category, self._form_timestamp())
            self._finish_edit()
            self.suggest_box.focus()
            return
        self.service.add_entry_for(category, self._form_timestamp())
        self._reset_form()
        self.suggest_box.focus()

    def _start_edit(self, entry_id: str) -> None:
        entry = next((e for e in self.service.entries if e.id == entry_id), None)
        if entry is None:
            return
        self._editing = entry
        self.date_edit.setDate(QDate(entry.ts.year, entry.ts.month, entry.ts.day))
        self.time_edit.setTime(QTime(entry.ts.hour, entry.ts.minute))
        self.suggest_box.set_text(entry.raw_text)
        self.btn_submit.setText("Save")
        self.btn_cancel.show()
        self.suggest_box.focus()

    @Slot()
    def _cancel_edit(self) -> None:
        self._finish_edit()

    def _finish_edit(self) -> None:
        self._editing = None
        self.btn_submit.setText("Log")
        self.btn_cancel.hide()
        self._reset_form()

    def _delete_entry(self, entry_id: str) -> None:
        reply = QMessageBox.question(
            self, "Delete entry", "Are you sure you want to delete this entry?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if reply == QMessageBox.StandardButton.Yes:
            if self._editing is not None and self._editing.id == entry_id:
                self._finish_edit()
            self.service.delete_entry(entry_id)

    # ── Toggles ─────────────────────────────────────────────────────────

    def _on_range_changed(self, unit: str) -> None:
        self.unit = unit
        self.refresh()

    def _on_totals_view_changed(self, view: str) -> None:
        self.totals_view = view
        self.refresh()
