"""Scrollable track display widget."""

from __future__ import annotations

import dataclasses
import math

from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QSizePolicy, QWidget

from trackviewlib.config import ConfigError
from trackviewlib.layout import LayoutError, track_extent
from trackviewlib.models import CompositedTrack, Track

from ..log import dbg
from ..theme import COLORS
from .renderer import TrackRenderCtx, TrackRenderer


class TrackWidget(QWidget):
    """Shows one :class:`Track` as a composited waveform strip.

    The track is composited again whenever it or the zoom changes.  A
    layout failure replaces the whole strip with the error text.
    """

    layout_failed = Signal(str)
    composited = Signal(object)  # CompositedTrack

    _MARGIN = 8
    _DEFAULT_HEIGHT = 120
    _PLACEHOLDER_WIDTH = 480

    def __init__(self, parent=None):
        super().__init__(parent)
        self._renderer = TrackRenderer()
        self._track: Track | None = None
        self._composited: CompositedTrack | None = None
        self._error: str | None = None
        self._extent: float = 0.0
        self.setMinimumHeight(60)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Expanding)

    # ── Data management ────────────────────────────────────────────────────

    def set_track(self, track: Track | None):
        self._track = track
        self._recomposite()

    def track(self) -> Track | None:
        return self._track

    def composited_track(self) -> CompositedTrack | None:
        return self._composited

    def error(self) -> str | None:
        return self._error

    def set_pixels_per_rms(self, pixels_per_rms: float):
        if self._track is None:
            return
        try:
            self._track = dataclasses.replace(self._track,
                                              pixels_per_rms=pixels_per_rms)
        except ConfigError as e:
            self._set_error(str(e))
            return
        dbg(f"Zoom changed: {pixels_per_rms:g} px/RMS")
        self._recomposite()

    def _set_error(self, message: str):
        self._error = message
        self._composited = None
        self._extent = 0.0
        self.layout_failed.emit(message)
        self._apply_geometry()

    def _recomposite(self):
        self._error = None
        self._composited = None
        self._extent = 0.0
        if self._track is not None:
            try:
                self._composited = self._track.composite()
            except LayoutError as e:
                self._set_error(str(e))
                return
            self._extent = track_extent(self._composited.shapes)
            dbg(f"Track composited: {len(self._composited)} shapes, "
                f"{self._extent:.1f} px")
            self.composited.emit(self._composited)
        self._apply_geometry()

    def _apply_geometry(self):
        if self._error is not None or self._extent <= 0:
            width = self._PLACEHOLDER_WIDTH
        else:
            width = max(1, math.ceil(self._extent)) + 2 * self._MARGIN
        self.setFixedWidth(width)
        self.updateGeometry()
        self.update()

    # ── Qt overrides ───────────────────────────────────────────────────────

    def sizeHint(self) -> QSize:
        return QSize(max(1, math.ceil(self._extent)) + 2 * self._MARGIN,
                     self._DEFAULT_HEIGHT)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(COLORS["bg"]))

        if self._error is not None:
            painter.setPen(QPen(QColor(COLORS["problems"])))
            painter.drawText(self.rect(), Qt.AlignCenter | Qt.TextWordWrap,
                             self._error)
            painter.end()
            return

        if self._composited is None or not self._composited.shapes:
            painter.setPen(QPen(QColor(COLORS["dim"])))
            painter.drawText(self.rect(), Qt.AlignCenter, "No segments")
            painter.end()
            return

        m = self._MARGIN
        ctx = TrackRenderCtx(
            x0=m, y0=m,
            draw_w=self._extent,
            draw_h=max(1, self.height() - 2 * m),
        )
        self._renderer.paint(painter, self._composited, ctx)
        painter.end()
