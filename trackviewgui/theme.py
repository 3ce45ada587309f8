"""Viewer colours and the dark theme."""

from __future__ import annotations

from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import QApplication


COLORS = {
    "problems": "#ff4444",   # layout error text
    "dim": "#888888",        # placeholder text, status bar
    "text": "#dddddd",
    "bg": "#1e1e1e",         # behind the track strip
    "bg_alt": "#252525",
    "panel": "#2d2d2d",      # menus, toolbar, status bar
    "accent": "#3a3a3a",
    "border": "#555555",
    "highlight": "#2a6db5",
}

STYLESHEET = """
    QMainWindow, QScrollArea {{ background-color: {bg}; border: none; }}
    QMenuBar {{ background-color: {bg_alt}; color: {text}; }}
    QMenuBar::item:selected, QToolBar QToolButton:hover {{ background-color: {accent}; }}
    QMenu {{ background-color: {panel}; color: {text}; border: 1px solid {border}; }}
    QMenu::item:selected {{ background-color: {highlight}; }}
    QToolBar {{ background-color: {panel}; border-bottom: 1px solid {border}; spacing: 6px; }}
    QToolBar QToolButton, QToolBar QLabel {{ color: {text}; padding: 2px 6px; }}
    QStatusBar {{ background-color: {panel}; color: {dim}; }}
""".format(**COLORS)


def apply_dark_theme(window) -> None:
    """Set the dark palette on the application and the stylesheet on *window*."""
    roles = {
        QPalette.Window: COLORS["bg"],
        QPalette.WindowText: COLORS["text"],
        QPalette.Base: COLORS["bg_alt"],
        QPalette.Text: COLORS["text"],
        QPalette.Button: COLORS["accent"],
        QPalette.ButtonText: COLORS["text"],
        QPalette.Highlight: COLORS["highlight"],
        QPalette.HighlightedText: "#ffffff",
    }
    palette = QPalette()
    for role, color in roles.items():
        palette.setColor(role, QColor(color))
    QApplication.instance().setPalette(palette)
    window.setStyleSheet(STYLESHEET)
