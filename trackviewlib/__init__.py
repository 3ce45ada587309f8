from ._version import __version__
from .models import (
    ViewableSegment,
    AudioSegment,
    SegmentError,
    TrackParams,
    Track,
    CompositedShape,
    CompositedTrack,
)
from .layout import (
    TrackLayoutEngine,
    SampleRange,
    SegmentWindow,
    compute_visible_window,
    track_extent,
    LayoutError,
    InvalidWindowRange,
    IndexOutOfRange,
    SampleRateMismatch,
)
from .compositor import TrackCompositor, composite
from .shape import waveform_polygon
from .config import (
    default_config,
    merge_configs,
    validate_config,
    validate_config_fields,
    load_preset,
    save_preset,
    ConfigError,
    ConfigFieldError,
    ParamSpec,
    TRACK_PARAMS,
)
from .audio import file_duration, segment_from_file
from .document import DocumentError, load_track_document, save_track_document

__all__ = [
    "__version__",
    "ViewableSegment",
    "AudioSegment",
    "SegmentError",
    "TrackParams",
    "Track",
    "CompositedShape",
    "CompositedTrack",
    "TrackLayoutEngine",
    "SampleRange",
    "SegmentWindow",
    "compute_visible_window",
    "track_extent",
    "LayoutError",
    "InvalidWindowRange",
    "IndexOutOfRange",
    "SampleRateMismatch",
    "TrackCompositor",
    "composite",
    "waveform_polygon",
    "default_config",
    "merge_configs",
    "validate_config",
    "validate_config_fields",
    "load_preset",
    "save_preset",
    "ConfigError",
    "ConfigFieldError",
    "ParamSpec",
    "TRACK_PARAMS",
    "file_duration",
    "segment_from_file",
    "DocumentError",
    "load_track_document",
    "save_track_document",
]
