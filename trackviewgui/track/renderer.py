"""Track renderer: background plus one filled waveform per segment."""

from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPolygonF

from trackviewlib.models import CompositedShape, CompositedTrack
from trackviewlib.shape import waveform_polygon


@dataclass
class TrackRenderCtx:
    """Where and how to paint a composited track."""
    x0: float
    y0: float
    draw_w: float
    draw_h: float
    antialias: bool = True


class TrackRenderer:
    """Paints a :class:`CompositedTrack` with a ``QPainter``.

    Shapes are painted in track order so later segments cover earlier ones
    where they overlap.
    """

    def paint(self, painter: QPainter, track: CompositedTrack,
              ctx: TrackRenderCtx) -> None:
        painter.save()
        painter.setRenderHint(QPainter.Antialiasing, ctx.antialias)
        painter.fillRect(QRectF(ctx.x0, ctx.y0, ctx.draw_w, ctx.draw_h),
                         QColor(track.background_color))
        for shape in track.shapes:
            self._draw_shape(painter, shape, ctx)
        painter.restore()

    @staticmethod
    def shape_polygon(shape: CompositedShape, ctx: TrackRenderCtx) -> QPolygonF:
        points = waveform_polygon(
            shape.amplitudes, shape.pixel_width, ctx.draw_h,
            x=ctx.x0 + shape.pixel_offset, y=ctx.y0,
        )
        return QPolygonF([QPointF(px, py) for px, py in points])

    def _draw_shape(self, painter: QPainter, shape: CompositedShape,
                    ctx: TrackRenderCtx) -> None:
        painter.fillRect(
            QRectF(ctx.x0 + shape.pixel_offset, ctx.y0,
                   shape.pixel_width, ctx.draw_h),
            QColor(shape.background_color),
        )
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(shape.fill_color))
        painter.drawPolygon(self.shape_polygon(shape, ctx))
