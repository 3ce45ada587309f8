from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence, runtime_checkable
from uuid import uuid4

import numpy as np

from .config import validate_config

DEFAULT_RMS_FRAMES_PER_SECOND = 50.0
DEFAULT_PIXELS_PER_RMS = 1.0
DEFAULT_TRACK_BACKGROUND_COLOR = "#1a808080"  # grey, 10 % opacity
DEFAULT_FILL_COLOR = "#ff000000"


class SegmentError(ValueError):
    """Raised when a segment cannot be constructed from the given values."""
    pass


@runtime_checkable
class ViewableSegment(Protocol):
    """Anything that can report its time placement and RMS values.

    Times are in seconds.  ``rms_values`` index ``i`` corresponds to file
    time ``i / rms_frames_per_second``.
    """
    id: str
    playback_start_time: float
    playback_end_time: float
    file_start_time: float
    file_end_time: float
    rms_values: Sequence[float]


def _as_rms_array(values: Any) -> np.ndarray:
    try:
        arr = np.array(values, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise SegmentError(f"RMS values are not numeric: {e}")
    if arr.ndim != 1:
        raise SegmentError(
            f"RMS values must be one-dimensional, got shape {arr.shape}"
        )
    if arr.size == 0:
        raise SegmentError("RMS values must not be empty")
    if not np.all(np.isfinite(arr)):
        raise SegmentError("RMS values must be finite")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class AudioSegment:
    """An independently placed excerpt of an audio source.

    Attributes:
        playback_start_time: Where on the track timeline the segment begins.
        file_start_time:     Start of the played range inside the source file.
        file_end_time:       End of the played range inside the source file.
        rms_values:          Full-file RMS samples (read-only float32 array).
        rms_frames_per_second: Rate the RMS values were produced at, if known.
        source:              Path or label of the audio source.
        id:                  Stable identifier, used for rendering identity only.
    """
    playback_start_time: float
    file_start_time: float
    file_end_time: float
    rms_values: np.ndarray
    rms_frames_per_second: float | None = None
    source: str = ""
    id: str = field(default_factory=lambda: uuid4().hex)

    def __post_init__(self):
        for name in ("playback_start_time", "file_start_time", "file_end_time"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise SegmentError(
                    f"{name} must be a number, got {type(value).__name__}"
                )
            if not math.isfinite(value):
                raise SegmentError(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, float(value))
        if self.file_start_time < 0:
            raise SegmentError(
                f"file_start_time must be >= 0, got {self.file_start_time}"
            )
        if self.file_end_time < self.file_start_time:
            raise SegmentError(
                f"file_end_time ({self.file_end_time}) precedes "
                f"file_start_time ({self.file_start_time})"
            )
        if self.rms_frames_per_second is not None:
            rate = self.rms_frames_per_second
            if isinstance(rate, bool) or not isinstance(rate, (int, float)) \
                    or not rate > 0:
                raise SegmentError(
                    f"rms_frames_per_second must be > 0, got {rate!r}"
                )
            object.__setattr__(self, "rms_frames_per_second", float(rate))
        object.__setattr__(self, "rms_values", _as_rms_array(self.rms_values))

    @property
    def duration(self) -> float:
        return self.file_end_time - self.file_start_time

    @property
    def playback_end_time(self) -> float:
        return self.playback_start_time + self.duration


@dataclass(frozen=True)
class TrackParams:
    """Track-wide rendering parameters."""
    rms_frames_per_second: float = DEFAULT_RMS_FRAMES_PER_SECOND
    pixels_per_rms: float = DEFAULT_PIXELS_PER_RMS
    track_background_color: str = DEFAULT_TRACK_BACKGROUND_COLOR
    fill_color: str = DEFAULT_FILL_COLOR

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> TrackParams:
        return cls(
            rms_frames_per_second=float(config.get(
                "rms_frames_per_second", DEFAULT_RMS_FRAMES_PER_SECOND)),
            pixels_per_rms=float(config.get(
                "pixels_per_rms", DEFAULT_PIXELS_PER_RMS)),
            track_background_color=config.get(
                "track_background_color", DEFAULT_TRACK_BACKGROUND_COLOR),
            fill_color=config.get("fill_color", DEFAULT_FILL_COLOR),
        )

    def to_config(self) -> dict[str, Any]:
        return {
            "rms_frames_per_second": self.rms_frames_per_second,
            "pixels_per_rms": self.pixels_per_rms,
            "track_background_color": self.track_background_color,
            "fill_color": self.fill_color,
        }


@dataclass(frozen=True, eq=False)
class CompositedShape:
    """One positioned waveform shape, in paint order within its track."""
    segment_id: str
    amplitudes: np.ndarray
    pixel_width: float
    pixel_offset: float
    fill_color: str
    background_color: str

    @property
    def pixel_end(self) -> float:
        return self.pixel_offset + self.pixel_width

    def __eq__(self, other):
        if not isinstance(other, CompositedShape):
            return NotImplemented
        return (
            self.segment_id == other.segment_id
            and np.array_equal(self.amplitudes, other.amplitudes)
            and self.pixel_width == other.pixel_width
            and self.pixel_offset == other.pixel_offset
            and self.fill_color == other.fill_color
            and self.background_color == other.background_color
        )

    __hash__ = None


@dataclass(frozen=True)
class CompositedTrack:
    """Background colour plus the ordered shapes to paint over it."""
    background_color: str
    shapes: tuple[CompositedShape, ...] = ()

    def __len__(self) -> int:
        return len(self.shapes)

    def __iter__(self):
        return iter(self.shapes)


@dataclass
class Track:
    """Ordered segments plus rendering parameters.

    Holds no derived state: every :meth:`composite` call lays the segments
    out again.
    """
    segments: list = field(default_factory=list)
    rms_frames_per_second: float = DEFAULT_RMS_FRAMES_PER_SECOND
    pixels_per_rms: float = DEFAULT_PIXELS_PER_RMS
    track_background_color: str = DEFAULT_TRACK_BACKGROUND_COLOR
    fill_color: str = DEFAULT_FILL_COLOR

    def __post_init__(self):
        validate_config(self.params.to_config())
        self.segments = list(self.segments)

    @classmethod
    def from_config(cls, segments, config: dict[str, Any]) -> Track:
        params = TrackParams.from_config(config)
        return cls(segments, **params.to_config())

    @property
    def params(self) -> TrackParams:
        return TrackParams(
            rms_frames_per_second=self.rms_frames_per_second,
            pixels_per_rms=self.pixels_per_rms,
            track_background_color=self.track_background_color,
            fill_color=self.fill_color,
        )

    def composite(self) -> CompositedTrack:
        from .compositor import TrackCompositor
        return TrackCompositor(self.params).composite(self.segments)
