"""Track document save / load.

A track document is a ``.tvtrack`` JSON file holding the track parameters
and, per segment, its placement plus its precomputed RMS values (inline or
as a ``.npy`` file next to the document).

Documents carry a ``version``.  Older documents are upgraded one step at a
time through ``_MIGRATIONS`` when loaded; documents from a newer TrackView
are refused.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable

import numpy as np

from .audio import file_duration
from .config import default_config, merge_configs, validate_config
from .models import AudioSegment, SegmentError, Track

log = logging.getLogger(__name__)

DOCUMENT_EXTENSION = ".tvtrack"

# ---------------------------------------------------------------------------
# Version & migration table
# ---------------------------------------------------------------------------

CURRENT_VERSION: int = 2

# version N -> upgrader producing version N + 1
_MIGRATIONS: dict[int, Callable[[dict], dict]] = {
    # v1 stored the track parameters at top level.
    1: lambda d: {
        **{k: v for k, v in d.items() if k not in default_config()},
        "params": {k: d[k] for k in default_config() if k in d},
        "version": 2,
    },
}


class DocumentError(Exception):
    """Raised when a track document cannot be read, parsed or written."""
    pass


def _migrate(data: dict) -> dict:
    """Upgrade *data* from its stored version to CURRENT_VERSION."""
    v = data.get("version", 1)
    if not isinstance(v, int) or v < 1:
        raise DocumentError(f"Invalid document version: {v!r}")
    if v > CURRENT_VERSION:
        raise DocumentError(
            f"Track document was saved with a newer version of TrackView "
            f"(file version {v}, this build supports up to {CURRENT_VERSION}). "
            f"Please upgrade TrackView."
        )
    while v < CURRENT_VERSION:
        fn = _MIGRATIONS.get(v)
        if fn is None:
            raise DocumentError(
                f"No migration path from version {v} to {v + 1}."
            )
        data = fn(data)
        v += 1
    return data


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _ser_segment(seg) -> dict:
    d = {
        "id": seg.id,
        "playback_start_time": seg.playback_start_time,
        "file_start_time": seg.file_start_time,
        "file_end_time": seg.file_end_time,
        "rms_values": [float(v) for v in seg.rms_values],
    }
    rate = getattr(seg, "rms_frames_per_second", None)
    if rate is not None:
        d["rms_frames_per_second"] = rate
    source = getattr(seg, "source", "")
    if source:
        d["audio_file"] = source
    return d


def _resolve(base_dir: str, path: str) -> str:
    return path if os.path.isabs(path) else os.path.join(base_dir, path)


def _load_rms(d: dict, base_dir: str, index: int):
    if "rms_values" in d:
        return d["rms_values"]
    rms_file = d.get("rms_file")
    if not rms_file:
        raise DocumentError(
            f"Segment {index}: needs either 'rms_values' or 'rms_file'"
        )
    path = _resolve(base_dir, rms_file)
    try:
        return np.load(path, allow_pickle=False)
    except (OSError, ValueError) as e:
        raise DocumentError(f"Segment {index}: cannot load RMS file {path}: {e}")


def _deser_segment(d: Any, base_dir: str, index: int) -> AudioSegment:
    if not isinstance(d, dict):
        raise DocumentError(f"Segment {index}: expected an object, got {type(d).__name__}")
    rms_values = _load_rms(d, base_dir, index)
    audio_file = d.get("audio_file") or ""
    file_end_time = d.get("file_end_time")
    try:
        if file_end_time is None:
            if not audio_file:
                raise DocumentError(
                    f"Segment {index}: 'file_end_time' is required when no "
                    f"'audio_file' is given"
                )
            file_end_time = file_duration(_resolve(base_dir, audio_file))
        kwargs = {"id": str(d["id"])} if d.get("id") is not None else {}
        return AudioSegment(
            playback_start_time=d.get("playback_start_time", 0.0),
            file_start_time=d.get("file_start_time", 0.0),
            file_end_time=file_end_time,
            rms_values=rms_values,
            rms_frames_per_second=d.get("rms_frames_per_second"),
            source=audio_file,
            **kwargs,
        )
    except SegmentError as e:
        raise DocumentError(f"Segment {index}: {e}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def save_track_document(track: Track, path: str) -> None:
    """Write *track* to *path* with all RMS values inline."""
    data = {
        "version": CURRENT_VERSION,
        "params": track.params.to_config(),
        "segments": [_ser_segment(s) for s in track.segments],
    }
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise DocumentError(f"Cannot write track document {path}: {e}")
    log.debug("saved %d segment(s) to %s", len(track.segments), path)


def load_track_document(path: str,
                        overrides: dict[str, Any] | None = None) -> Track:
    """Read a track document and build its :class:`Track`.

    *overrides* are merged over the document's parameters (e.g. CLI
    options).  Raises :class:`DocumentError` or :class:`ConfigError`.
    """
    if not os.path.isfile(path):
        raise DocumentError(f"Track document not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DocumentError(f"Invalid JSON in track document {path}: {e}")
    except OSError as e:
        raise DocumentError(f"Cannot read track document {path}: {e}")
    if not isinstance(data, dict):
        raise DocumentError(
            f"Track document must contain a JSON object, got {type(data).__name__}"
        )

    data = _migrate(data)
    params = data.get("params") or {}
    if not isinstance(params, dict):
        raise DocumentError("'params' must be an object")
    config = merge_configs(default_config(), params, overrides or {})
    validate_config(config)

    raw_segments = data.get("segments") or []
    if not isinstance(raw_segments, list):
        raise DocumentError("'segments' must be a list")
    base_dir = os.path.dirname(os.path.abspath(path))
    segments = [_deser_segment(d, base_dir, i) for i, d in enumerate(raw_segments)]
    log.debug("loaded %d segment(s) from %s", len(segments), path)
    return Track.from_config(segments, config)
