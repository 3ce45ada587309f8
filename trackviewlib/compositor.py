from __future__ import annotations

import logging
from typing import Iterable

from .layout import TrackLayoutEngine
from .models import CompositedShape, CompositedTrack, TrackParams

log = logging.getLogger(__name__)


class TrackCompositor:
    """Assembles laid-out segments into one paintable track description.

    Input order is paint order: later segments are drawn over earlier ones.
    Overlapping playback ranges are neither detected nor resolved, and no
    viewport clipping happens here.
    """

    def __init__(self, params: TrackParams | None = None):
        self.params = params or TrackParams()
        self._engine = TrackLayoutEngine(
            self.params.rms_frames_per_second, self.params.pixels_per_rms,
        )

    def composite(self, segments: Iterable) -> CompositedTrack:
        """Lay out every segment and return the composited track.

        Any :class:`~trackviewlib.layout.LayoutError` propagates unchanged;
        a single bad segment aborts the whole track.
        """
        shapes = tuple(
            CompositedShape(
                segment_id=window.segment_id,
                amplitudes=window.rms_values,
                pixel_width=window.pixel_width,
                pixel_offset=window.pixel_offset,
                fill_color=self.params.fill_color,
                background_color=self.params.track_background_color,
            )
            for window in self._engine.layout(segments)
        )
        log.debug("composited %d segment(s)", len(shapes))
        return CompositedTrack(
            background_color=self.params.track_background_color,
            shapes=shapes,
        )


def composite(segments: Iterable, params: TrackParams | None = None) -> CompositedTrack:
    """Composite *segments* with *params* (defaults when omitted)."""
    return TrackCompositor(params).composite(segments)
