"""
Main Window — the central hub of TimeLog.

Contains:
  - Log tab (entry form, entries for the selected range, totals)
  - Categories tab
  - System tray icon with Quick Entry
  - Quick-entry popup, opened from the tray or the keyboard shortcut
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Slot
from PySide6.QtGui import QCloseEvent, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QMenu, QStyle, QSystemTrayIcon, QTabWidget,
    QVBoxLayout, QWidget,
)

from timelog.config import db_path_from, load_config
from timelog.data.database import Database
from timelog.data.repository import Repository
from timelog.services.log_service import LogService
from timelog.ui.categories_widget import CategoriesWidget
from timelog.ui.log_widget import LogWidget
from timelog.ui.quick_entry import QuickEntryWindow

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """The main application window."""

    def __init__(self, config: Optional[dict] = None,
                 db_path: Optional[Path] = None) -> None:
        super().__init__()
        self.setWindowTitle("TimeLog")
        self.setMinimumSize(860, 620)
        self.resize(1000, 720)

        # ── Initialize core systems ─────────────────────────────────────
        self.config = config or load_config()
        self.db = Database(db_path or db_path_from(self.config))
        self.db.connect()
        self.repo = Repository(self.db.conn)

        # One service per window; the repository relays writes between them
        self.log_svc = LogService(self.repo, self.config, on_change=self._on_data_changed)
        self.quick_svc = LogService(self.repo, self.config)

        # ── Build UI ────────────────────────────────────────────────────
        self._build_ui()
        self.quick_entry = QuickEntryWindow(self.quick_svc)

        shortcut = QShortcut(QKeySequence(self.config["quick_entry_shortcut"]), self)
        shortcut.activated.connect(self._on_quick_entry)

        self._setup_tray()
        self._quitting = False

    # ── UI Construction ─────────────────────────────────────────────────

    def _build_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setSpacing(0)
        main_layout.setContentsMargins(0, 0, 0, 0)

        self.tabs = QTabWidget()
        main_layout.addWidget(self.tabs)

        self.log_widget = LogWidget(self.log_svc)
        self.tabs.addTab(self.log_widget, "Log")

        self.categories_widget = CategoriesWidget(self.log_svc)
        self.tabs.addTab(self.categories_widget, "Categories")

    def _setup_tray(self) -> None:
        """System tray icon for minimizing to tray."""
        self.tray = QSystemTrayIcon(self)
        self.tray.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_FileDialogDetailedView))
        self.tray.setToolTip("TimeLog")

        tray_menu = QMenu()
        quick_action = tray_menu.addAction(
            f"Quick Entry ({self.config['quick_entry_shortcut']})")
        quick_action.triggered.connect(self._on_quick_entry)
        show_action = tray_menu.addAction("Show Main Window")
        show_action.triggered.connect(self._show_main)
        tray_menu.addSeparator()
        quit_action = tray_menu.addAction("Quit")
        quit_action.triggered.connect(self._quit_app)
        self.tray.setContextMenu(tray_menu)

        self.tray.activated.connect(self._on_tray_activated)
        self.tray.show()

    # ── Actions ─────────────────────────────────────────────────────────

    @Slot()
    def _on_quick_entry(self) -> None:
        self.quick_entry.popup()

    @Slot()
    def _show_main(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    def _on_data_changed(self) -> None:
        self.log_widget.refresh()
        self.categories_widget.refresh()

    def _on_tray_activated(self, reason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.DoubleClick:
            self._show_main()

    @Slot()
    def _quit_app(self) -> None:
        logger.info("Quitting TimeLog.")
        self._quitting = True
        self.log_svc.close()
        self.quick_svc.close()
        self.db.close()
        self.tray.hide()
        QApplication.quit()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Hide to tray instead of quitting, unless the tray is unavailable."""
        if self._quitting or not QSystemTrayIcon.isSystemTrayAvailable():
            self.log_svc.close()
            self.quick_svc.close()
            self.db.close()
            event.accept()
            QApplication.quit()
            return
        event.ignore()
        self.hide()
        self.tray.showMessage("TimeLog", "Still running in the tray.",
                              QSystemTrayIcon.MessageIcon.Information, 2000)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Creates the database, repository and services, and hosts the two tabs,
#   the tray icon and the quick-entry popup.
#
# Key classes:
#   - MainWindow: owns Database, Repository, two LogService instances (main
#     window + quick entry), LogWidget, CategoriesWidget, QuickEntryWindow.
#
# Data flow:
#   Quick entry Enter → quick_svc.submit() → Repository.set() → notifies
#   log_svc → _on_data_changed() → both tabs redraw.
#
# Interviewer-friendly talking points:
#   1. The quick-entry popup is a separate observer, not a shortcut into the
#      main window's state. That is exactly the situation the repository's
#      subscribe/notify contract exists for.
#   2. Minimize-to-tray: closeEvent() hides instead of quitting so the
#      shortcut and tray keep working.
