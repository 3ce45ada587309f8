from __future__ import annotations

import os

import soundfile as sf

from .models import AudioSegment, SegmentError

AUDIO_EXTENSIONS = (".wav", ".aif", ".aiff", ".flac", ".ogg")


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_time(seconds: float) -> str:
    """``mm:ss.mmm`` for a non-negative time in seconds."""
    if seconds < 0:
        return "-" + format_time(-seconds)
    m = int(seconds // 60)
    s = int(seconds % 60)
    ms = int(round((seconds % 1) * 1000))
    if ms == 1000:
        s, ms = s + 1, 0
        if s == 60:
            m, s = m + 1, 0
    return f"{m:02d}:{s:02d}.{ms:03d}"


# ---------------------------------------------------------------------------
# File metadata
# ---------------------------------------------------------------------------

def is_audio_file(filepath: str) -> bool:
    return os.path.splitext(filepath)[1].lower() in AUDIO_EXTENSIONS


def file_duration(filepath: str) -> float:
    """Duration of an audio file in seconds, read from its header only."""
    try:
        info = sf.info(filepath)
    except RuntimeError as e:
        raise SegmentError(f"Cannot read audio file {filepath}: {e}")
    return float(info.duration)


def segment_from_file(
    filepath: str,
    rms_values,
    playback_start_time: float,
    *,
    rms_frames_per_second: float | None = None,
    file_start_time: float = 0.0,
    file_end_time: float | None = None,
    segment_id: str | None = None,
) -> AudioSegment:
    """Build an :class:`AudioSegment` for *filepath* from precomputed RMS values.

    *file_end_time* defaults to the file's full duration.
    """
    if file_end_time is None:
        file_end_time = file_duration(filepath)
    kwargs = {} if segment_id is None else {"id": segment_id}
    return AudioSegment(
        playback_start_time=playback_start_time,
        file_start_time=file_start_time,
        file_end_time=file_end_time,
        rms_values=rms_values,
        rms_frames_per_second=rms_frames_per_second,
        source=filepath,
        **kwargs,
    )
