"""Main application window for the TrackView GUI."""

from __future__ import annotations

import os
import sys
import time

from PySide6.QtCore import Qt, Slot, QSize
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QStatusBar,
    QToolBar,
)

from trackviewlib import __version__
from trackviewlib.config import ConfigError
from trackviewlib.document import (
    DOCUMENT_EXTENSION, DocumentError, load_track_document,
)
from trackviewlib.layout import track_extent

from .export import save_png
from .log import dbg
from .theme import apply_dark_theme
from .track import TrackWidget

_ZOOM_STEP = 2.0
_ZOOM_MIN = 1.0 / 64
_ZOOM_MAX = 64.0


class TrackViewWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("TrackView")
        self.resize(1200, 320)

        self._doc_path: str | None = None
        self._base_pixels_per_rms: float = 1.0

        self._track_widget = TrackWidget()
        self._track_widget.layout_failed.connect(self._on_layout_failed)
        self._track_widget.composited.connect(self._on_composited)

        self._scroll = QScrollArea()
        self._scroll.setWidget(self._track_widget)
        self._scroll.setWidgetResizable(False)
        self._scroll.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self._scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAsNeeded)
        self._scroll.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setCentralWidget(self._scroll)

        self._init_menus()
        self._init_toolbar()

        self._status_bar = QStatusBar()
        self._status_bar.setSizeGripEnabled(False)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage(
            f"Open a {DOCUMENT_EXTENSION} track document to begin.")

        apply_dark_theme(self)

    def _init_menus(self):
        file_menu = self.menuBar().addMenu("&File")

        open_action = QAction("&Open Track...", self)
        open_action.setShortcut(QKeySequence.Open)
        open_action.triggered.connect(self._on_open)
        file_menu.addAction(open_action)

        self._export_action = QAction("&Export PNG...", self)
        self._export_action.setShortcut("Ctrl+E")
        self._export_action.setEnabled(False)
        self._export_action.triggered.connect(self._on_export)
        file_menu.addAction(self._export_action)

        file_menu.addSeparator()

        about_action = QAction("&About TrackView", self)
        about_action.setMenuRole(QAction.MenuRole.AboutRole)
        about_action.triggered.connect(self._on_about)
        file_menu.addAction(about_action)

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def _init_toolbar(self):
        toolbar = QToolBar("View")
        toolbar.setIconSize(QSize(16, 16))
        toolbar.setMovable(False)
        toolbar.setFloatable(False)

        zoom_out = QAction("Zoom Out", self)
        zoom_out.setShortcut(QKeySequence.ZoomOut)
        zoom_out.triggered.connect(lambda: self._zoom_by(1.0 / _ZOOM_STEP))
        toolbar.addAction(zoom_out)

        zoom_in = QAction("Zoom In", self)
        zoom_in.setShortcut(QKeySequence.ZoomIn)
        zoom_in.triggered.connect(lambda: self._zoom_by(_ZOOM_STEP))
        toolbar.addAction(zoom_in)

        zoom_reset = QAction("Reset Zoom", self)
        zoom_reset.setShortcut("Ctrl+0")
        zoom_reset.triggered.connect(self._zoom_reset)
        toolbar.addAction(zoom_reset)

        toolbar.addSeparator()
        self._zoom_label = QLabel("")
        toolbar.addWidget(self._zoom_label)

        self.addToolBar(toolbar)

    # ── Document handling ─────────────────────────────────────────────────

    def open_document(self, path: str) -> bool:
        t0 = time.perf_counter()
        try:
            track = load_track_document(path)
        except (DocumentError, ConfigError) as e:
            QMessageBox.critical(self, "Cannot open track", str(e))
            return False
        dbg(f"load_track_document: {(time.perf_counter() - t0) * 1000:.1f} ms")
        self._doc_path = path
        self._base_pixels_per_rms = track.pixels_per_rms
        self.setWindowTitle(f"TrackView - {os.path.basename(path)}")
        self._track_widget.set_track(track)
        self._update_zoom_label()
        return True

    @Slot()
    def _on_open(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Track", os.path.dirname(self._doc_path or ""),
            f"Track documents (*{DOCUMENT_EXTENSION});;JSON (*.json);;All files (*)",
        )
        if path:
            self.open_document(path)

    @Slot()
    def _on_export(self):
        composited = self._track_widget.composited_track()
        if composited is None:
            return
        default = os.path.splitext(self._doc_path or "track")[0] + ".png"
        path, _ = QFileDialog.getSaveFileName(
            self, "Export PNG", default, "PNG images (*.png)")
        if not path:
            return
        try:
            save_png(composited, path, height=max(1, self._track_widget.height()))
        except OSError as e:
            QMessageBox.critical(self, "Export failed", str(e))
            return
        self._status_bar.showMessage(f"Exported {path}", 5000)

    @Slot()
    def _on_about(self):
        QMessageBox.about(
            self, "About TrackView",
            f"<b>TrackView</b> {__version__}<br/>"
            "Multi-segment RMS waveform track viewer.",
        )

    # ── Zoom ──────────────────────────────────────────────────────────────

    def _zoom_by(self, factor: float):
        track = self._track_widget.track()
        if track is None:
            return
        ratio = track.pixels_per_rms * factor / self._base_pixels_per_rms
        ratio = min(_ZOOM_MAX, max(_ZOOM_MIN, ratio))
        self._track_widget.set_pixels_per_rms(self._base_pixels_per_rms * ratio)
        self._update_zoom_label()

    def _zoom_reset(self):
        if self._track_widget.track() is None:
            return
        self._track_widget.set_pixels_per_rms(self._base_pixels_per_rms)
        self._update_zoom_label()

    def _update_zoom_label(self):
        track = self._track_widget.track()
        if track is None:
            self._zoom_label.setText("")
            return
        self._zoom_label.setText(f"  {track.pixels_per_rms:g} px / RMS  ")

    # ── Track widget signals ──────────────────────────────────────────────

    @Slot(str)
    def _on_layout_failed(self, message: str):
        self._export_action.setEnabled(False)
        self._status_bar.showMessage(f"Layout failed: {message}")

    @Slot(object)
    def _on_composited(self, composited):
        self._export_action.setEnabled(bool(composited.shapes))
        track = self._track_widget.track()
        fps = track.rms_frames_per_second if track else 0
        self._status_bar.showMessage(
            f"{len(composited)} segment(s) • "
            f"{track_extent(composited.shapes):.0f} px • {fps:g} RMS fps")


def main():
    t_main = time.perf_counter()
    app = QApplication(sys.argv)
    app.setStyle("Fusion")
    dbg(f"QApplication created: {(time.perf_counter() - t_main) * 1000:.1f} ms")

    window = TrackViewWindow()
    window.show()
    for arg in sys.argv[1:]:
        if not arg.startswith("-"):
            window.open_document(arg)
            break

    sys.exit(app.exec())
