"""
Dark mode stylesheet for the entire application.
Catppuccin Mocha-inspired palette.
"""

# Palette, also used by the chart and by per-row colouring in tables
BASE = "#1e1e2e"
MANTLE = "#181825"
SURFACE0 = "#313244"
SURFACE1 = "#45475a"
SURFACE2 = "#585b70"
TEXT = "#cdd6f4"
SUBTEXT = "#a6adc8"
BLUE = "#89b4fa"
SAPPHIRE = "#74c7ec"
RED = "#f38ba8"
PEACH = "#fab387"
GREEN = "#a6e3a1"
YELLOW = "#f9e2af"
MAUVE = "#cba6f7"

DARK_STYLESHEET = f"""
/* ── Base ────────────────────────────────────────────────────────── */
QWidget {{
    background-color: {BASE};
    color: {TEXT};
    font-family: "Segoe UI", "Inter", sans-serif;
    font-size: 13px;
}}

/* ── Buttons ─────────────────────────────────────────────────────── */
QPushButton {{
    background-color: {SURFACE0};
    color: {TEXT};
    border: 1px solid {SURFACE2};
    border-radius: 8px;
    padding: 6px 16px;
    font-weight: 600;
    min-height: 22px;
}}

QPushButton:hover {{
    background-color: {SURFACE1};
    border-color: {BLUE};
}}

QPushButton:disabled {{
    background-color: {MANTLE};
    color: {SURFACE2};
    border-color: {SURFACE0};
}}

QPushButton#primary {{
    background-color: {BLUE};
    color: {BASE};
    border: none;
}}

QPushButton#primary:hover {{
    background-color: {SAPPHIRE};
}}

QPushButton#danger {{
    background-color: {RED};
    color: {BASE};
    border: none;
}}

/* Segmented range / totals toggles */
QPushButton#segment {{
    border-radius: 6px;
    padding: 4px 14px;
}}

QPushButton#segment:checked {{
    background-color: {BLUE};
    color: {BASE};
    border-color: {BLUE};
}}

/* ── Inputs ──────────────────────────────────────────────────────── */
QLineEdit, QDateEdit, QTimeEdit {{
    background-color: {SURFACE0};
    color: {TEXT};
    border: 1px solid {SURFACE2};
    border-radius: 6px;
    padding: 6px 10px;
    selection-background-color: {BLUE};
    selection-color: {BASE};
}}

QLineEdit:focus, QDateEdit:focus, QTimeEdit:focus {{
    border-color: {BLUE};
}}

QLineEdit#quick_entry {{
    font-size: 16px;
    padding: 10px 14px;
}}

/* ── Suggestion dropdown ─────────────────────────────────────────── */
QListWidget#suggestions {{
    background-color: {SURFACE0};
    border: 1px solid {SURFACE2};
    border-radius: 6px;
}}

QListWidget#suggestions::item {{
    padding: 6px 10px;
}}

QListWidget#suggestions::item:selected {{
    background-color: {SURFACE1};
    color: {BLUE};
}}

/* ── Tables ──────────────────────────────────────────────────────── */
QTableWidget {{
    background-color: {MANTLE};
    alternate-background-color: {BASE};
    gridline-color: {SURFACE0};
    border: 1px solid {SURFACE0};
    border-radius: 8px;
}}

QHeaderView::section {{
    background-color: {SURFACE0};
    color: {SUBTEXT};
    padding: 6px;
    border: none;
    font-weight: 600;
}}

/* ── Labels ──────────────────────────────────────────────────────── */
QLabel {{
    background: transparent;
    color: {TEXT};
}}

QLabel#title {{
    font-size: 20px;
    font-weight: 700;
    color: {BLUE};
}}

QLabel#subtitle {{
    font-size: 13px;
    color: {SUBTEXT};
}}

QLabel#total {{
    font-size: 18px;
    font-weight: 700;
    font-family: "Consolas", "Courier New", monospace;
    color: {YELLOW};
}}

/* ── Tab Widget ──────────────────────────────────────────────────── */
QTabWidget::pane {{
    border: 1px solid {SURFACE0};
    background-color: {BASE};
    border-radius: 8px;
}}

QTabBar::tab {{
    background-color: {MANTLE};
    color: {SUBTEXT};
    padding: 10px 20px;
    margin-right: 2px;
    border-top-left-radius: 8px;
    border-top-right-radius: 8px;
    font-weight: 600;
}}

QTabBar::tab:selected {{
    background-color: {BASE};
    color: {BLUE};
    border-bottom: 2px solid {BLUE};
}}

/* ── CheckBox ────────────────────────────────────────────────────── */
QCheckBox {{
    color: {TEXT};
    spacing: 8px;
}}

QCheckBox::indicator {{
    width: 16px;
    height: 16px;
    border: 2px solid {SURFACE2};
    border-radius: 4px;
    background-color: {SURFACE0};
}}

QCheckBox::indicator:checked {{
    background-color: {BLUE};
    border-color: {BLUE};
}}

/* ── Tooltip ─────────────────────────────────────────────────────── */
QToolTip {{
    background-color: {SURFACE0};
    color: {TEXT};
    border: 1px solid {SURFACE2};
    border-radius: 4px;
    padding: 4px 8px;
}}
"""
