"""
Totals chart — horizontal bars per category for the selected range.

Uses PySide6.QtCharts so bars show a tooltip on hover.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt, QMargins
from PySide6.QtGui import QBrush, QColor, QCursor, QFont, QPainter
from PySide6.QtWidgets import QToolTip
from PySide6.QtCharts import (
    QBarCategoryAxis, QBarSet, QChart, QChartView, QHorizontalBarSeries, QValueAxis,
)

from timelog.data.models import Totals
from timelog.engine.aggregator import human_hm
from timelog.ui import styles

logger = logging.getLogger(__name__)

BG = QColor(styles.BASE)
MUTED = QColor(styles.SUBTEXT)
GRID_CLR = QColor(styles.SURFACE0)

MAX_BARS = 10


def _base_chart(title: str = "") -> QChart:
    chart = QChart()
    chart.setBackgroundBrush(QBrush(BG))
    chart.setBackgroundRoundness(0)
    chart.setMargins(QMargins(8, 8, 8, 8))
    if title:
        chart.setTitle(title)
        chart.setTitleFont(QFont("Segoe UI", 10))
        chart.setTitleBrush(QBrush(MUTED))
    chart.legend().setVisible(False)
    chart.setAnimationOptions(QChart.AnimationOption.SeriesAnimations)
    chart.setAnimationDuration(300)
    return chart


def _value_axis() -> QValueAxis:
    axis = QValueAxis()
    axis.setLabelsColor(MUTED)
    axis.setLabelsFont(QFont("Segoe UI", 8))
    axis.setGridLineColor(GRID_CLR)
    axis.setLineVisible(False)
    axis.setMinorGridLineVisible(False)
    axis.setLabelFormat("%d")
    axis.setTitleText("minutes")
    axis.setTitleBrush(QBrush(MUTED))
    axis.setTitleFont(QFont("Segoe UI", 8))
    return axis


def _cat_axis(labels: list) -> QBarCategoryAxis:
    axis = QBarCategoryAxis()
    axis.append(labels)
    axis.setLabelsColor(MUTED)
    axis.setLabelsFont(QFont("Segoe UI", 8))
    axis.setGridLineVisible(False)
    axis.setLineVisible(False)
    return axis


def make_chart_view(chart: QChart) -> QChartView:
    view = QChartView(chart)
    view.setRenderHint(QPainter.RenderHint.Antialiasing)
    view.setStyleSheet("background: transparent; border: none;")
    view.setMinimumHeight(180)
    return view


def plot_totals(totals: Totals) -> QChartView:
    """Horizontal bar per totals row, largest at the top."""
    chart = _base_chart("time by category")
    rows = totals.rows[:MAX_BARS]
    if not rows:
        chart.setTitle("time by category — nothing logged")
        return make_chart_view(chart)

    # QHorizontalBarSeries draws the first category at the bottom
    rows = list(reversed(rows))
    labels = [r.label for r in rows]

    bar_set = QBarSet("minutes")
    bar_set.setColor(QColor(styles.BLUE))
    bar_set.setBorderColor(QColor(0, 0, 0, 0))
    for r in rows:
        bar_set.append(r.minutes)

    series = QHorizontalBarSeries()
    series.append(bar_set)
    series.setBarWidth(0.6)

    def _hover(status, idx):
        if status and 0 <= idx < len(rows):
            QToolTip.showText(QCursor.pos(), f"{labels[idx]}: {human_hm(rows[idx].minutes)}")

    bar_set.hovered.connect(_hover)
    chart.addSeries(series)

    y_axis = _cat_axis(labels)
    x_axis = _value_axis()
    chart.addAxis(x_axis, Qt.AlignmentFlag.AlignBottom)
    chart.addAxis(y_axis, Qt.AlignmentFlag.AlignLeft)
    series.attachAxis(x_axis)
    series.attachAxis(y_axis)
    x_axis.setRange(0, max(r.minutes for r in rows) * 1.15 + 1)
    return make_chart_view(chart)
