"""Offscreen rendering of a composited track to an image file."""

from __future__ import annotations

import math

from PySide6.QtCore import Qt
from PySide6.QtGui import QGuiApplication, QImage, QPainter

from trackviewlib.layout import track_extent
from trackviewlib.models import CompositedTrack

from .track.renderer import TrackRenderCtx, TrackRenderer


def ensure_gui_application() -> QGuiApplication:
    """Return the running Qt application, creating a bare one if needed.

    ``QPainter`` on a ``QImage`` needs a ``QGuiApplication`` for fonts and
    colour handling.  Set ``QT_QPA_PLATFORM=offscreen`` before calling this
    on machines without a display.
    """
    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication([])
    return app


def render_image(track: CompositedTrack, height: int, *,
                 width: int | None = None,
                 antialias: bool = True) -> QImage:
    """Paint *track* into a transparent ARGB image.

    *width* defaults to the track extent rounded up (at least one pixel).
    """
    if height <= 0:
        raise ValueError(f"height must be > 0, got {height}")
    if width is None:
        width = max(1, math.ceil(track_extent(track.shapes)))
    ensure_gui_application()
    image = QImage(width, height, QImage.Format_ARGB32_Premultiplied)
    image.fill(Qt.transparent)
    painter = QPainter(image)
    try:
        TrackRenderer().paint(painter, track, TrackRenderCtx(
            x0=0, y0=0, draw_w=width, draw_h=height, antialias=antialias,
        ))
    finally:
        painter.end()
    return image


def save_png(track: CompositedTrack, path: str, height: int, *,
             width: int | None = None) -> None:
    """Render *track* and write it to *path* as PNG.  Raises OSError on failure."""
    image = render_image(track, height, width=width)
    if not image.save(path, "PNG"):
        raise OSError(f"Cannot write image {path}")
