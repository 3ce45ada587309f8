"""Segment layout: visible RMS window and pixel placement per segment.

Every conversion from time to sample index is a single ``floor`` of
``time * rms_frames_per_second``; nothing is interpolated or resampled.
Windows are inclusive index ranges and are validated against the RMS
array before any slicing happens.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from .models import DEFAULT_PIXELS_PER_RMS, DEFAULT_RMS_FRAMES_PER_SECOND

log = logging.getLogger(__name__)

# Relative tolerance when comparing a segment's own RMS rate to the track's.
_RATE_REL_TOL = 1e-9


class LayoutError(Exception):
    """Base class for segment layout failures."""
    pass


class InvalidWindowRange(LayoutError):
    """The file-time bounds give an empty or inverted sample window."""
    pass


class IndexOutOfRange(LayoutError):
    """A computed sample index falls outside the segment's RMS array."""
    pass


class SampleRateMismatch(LayoutError):
    """The segment's RMS values were produced at a different rate."""
    pass


@dataclass(frozen=True)
class SampleRange:
    """Inclusive range of RMS sample indices ``[start, end]``.

    Construction never fails; :meth:`validate` checks the range against an
    array length and :meth:`take` only slices after validating.
    """
    start: int
    end: int

    def __len__(self) -> int:
        return max(0, self.end - self.start + 1)

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def validate(self, length: int) -> None:
        if self.start < 0 or self.start >= length:
            raise IndexOutOfRange(
                f"start index {self.start} outside RMS array of length {length}"
            )
        if self.end >= length:
            raise IndexOutOfRange(
                f"end index {self.end} outside RMS array of length {length}"
            )
        if self.is_empty:
            raise InvalidWindowRange(
                f"sample window [{self.start}, {self.end}] is empty or inverted"
            )

    def take(self, values: np.ndarray) -> np.ndarray:
        """Return a read-only view of the samples covered by this range."""
        self.validate(len(values))
        window = values[self.start:self.end + 1]
        window.setflags(write=False)
        return window


@dataclass(frozen=True, eq=False)
class SegmentWindow:
    """Visible part of one segment, positioned in pixel space."""
    segment_id: str
    sample_range: SampleRange
    rms_values: np.ndarray
    pixel_width: float
    pixel_offset: float

    @property
    def pixel_end(self) -> float:
        return self.pixel_offset + self.pixel_width


def sample_range_for(segment, rms_frames_per_second: float) -> SampleRange:
    """Inclusive sample range a segment plays, clamped to its RMS array.

    The end index is clamped to ``len(rms_values) - 1``; the start index is
    not, so a start beyond the data is reported by :meth:`SampleRange.validate`.
    """
    start = math.floor(segment.file_start_time * rms_frames_per_second)
    end = min(len(segment.rms_values),
              math.floor(segment.file_end_time * rms_frames_per_second)) - 1
    return SampleRange(start, end)


def _check_sample_rate(segment, rms_frames_per_second: float) -> None:
    own_rate = getattr(segment, "rms_frames_per_second", None)
    if own_rate is None:
        return
    if not math.isclose(own_rate, rms_frames_per_second, rel_tol=_RATE_REL_TOL):
        raise SampleRateMismatch(
            f"segment {segment.id}: RMS values sampled at {own_rate} fps, "
            f"track lays out at {rms_frames_per_second} fps"
        )


def compute_visible_window(
    segment,
    rms_frames_per_second: float = DEFAULT_RMS_FRAMES_PER_SECOND,
    pixels_per_rms: float = DEFAULT_PIXELS_PER_RMS,
) -> SegmentWindow:
    """Visible RMS window of *segment* and where to draw it.

    Raises :class:`IndexOutOfRange` when the start index is outside the RMS
    array, :class:`InvalidWindowRange` when the window is empty or inverted
    (e.g. zero-duration segments), and :class:`SampleRateMismatch` when the
    segment declares a different RMS rate.
    """
    if not rms_frames_per_second > 0:
        raise ValueError(
            f"rms_frames_per_second must be > 0, got {rms_frames_per_second}"
        )
    if not pixels_per_rms > 0:
        raise ValueError(f"pixels_per_rms must be > 0, got {pixels_per_rms}")
    _check_sample_rate(segment, rms_frames_per_second)

    values = np.asarray(segment.rms_values, dtype=np.float32)
    sample_range = sample_range_for(segment, rms_frames_per_second)
    try:
        window = sample_range.take(values)
    except LayoutError as e:
        log.debug("segment %s rejected: %s", segment.id, e)
        raise

    return SegmentWindow(
        segment_id=segment.id,
        sample_range=sample_range,
        rms_values=window,
        pixel_width=pixels_per_rms * len(window),
        pixel_offset=segment.playback_start_time * rms_frames_per_second * pixels_per_rms,
    )


def track_extent(items: Iterable) -> float:
    """Total pixel width needed to show every window or shape in *items*."""
    return max((item.pixel_offset + item.pixel_width for item in items),
               default=0.0)


class TrackLayoutEngine:
    """Lays out segments at one RMS rate and zoom level.

    Stateless apart from its two parameters; safe to share across threads.
    """

    def __init__(self,
                 rms_frames_per_second: float = DEFAULT_RMS_FRAMES_PER_SECOND,
                 pixels_per_rms: float = DEFAULT_PIXELS_PER_RMS):
        if not rms_frames_per_second > 0:
            raise ValueError(
                f"rms_frames_per_second must be > 0, got {rms_frames_per_second}"
            )
        if not pixels_per_rms > 0:
            raise ValueError(f"pixels_per_rms must be > 0, got {pixels_per_rms}")
        self.rms_frames_per_second = rms_frames_per_second
        self.pixels_per_rms = pixels_per_rms

    def window(self, segment) -> SegmentWindow:
        return compute_visible_window(
            segment, self.rms_frames_per_second, self.pixels_per_rms,
        )

    def layout(self, segments: Iterable) -> list[SegmentWindow]:
        """Windows for *segments* in input order.  The first failure aborts."""
        return [self.window(seg) for seg in segments]
