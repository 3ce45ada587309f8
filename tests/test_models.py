from __future__ import annotations

import numpy as np
import pytest

from trackviewlib.config import ConfigError
from trackviewlib.models import (
    AudioSegment,
    SegmentError,
    Track,
    TrackParams,
    ViewableSegment,
)


def test_playback_end_time_is_derived() -> None:
    seg = AudioSegment(playback_start_time=2.0, file_start_time=1.0,
                       file_end_time=4.5, rms_values=[0.1, 0.2])
    assert seg.duration == 3.5
    assert seg.playback_end_time == 5.5
    assert seg.playback_end_time >= seg.playback_start_time


def test_rms_values_are_frozen_float32() -> None:
    source = [0.1, 0.2, 0.3]
    seg = AudioSegment(0.0, 0.0, 0.06, source)
    assert seg.rms_values.dtype == np.float32
    assert not seg.rms_values.flags.writeable
    source[0] = 9.0
    assert seg.rms_values[0] == pytest.approx(0.1)


def test_segment_is_immutable() -> None:
    seg = AudioSegment(0.0, 0.0, 1.0, [0.5])
    with pytest.raises(AttributeError):
        seg.playback_start_time = 3.0


def test_ids_are_unique_unless_given() -> None:
    a = AudioSegment(0.0, 0.0, 1.0, [0.5])
    b = AudioSegment(0.0, 0.0, 1.0, [0.5])
    assert a.id != b.id
    assert AudioSegment(0.0, 0.0, 1.0, [0.5], id="kick").id == "kick"


@pytest.mark.parametrize("kwargs", [
    {"file_start_time": -0.1},
    {"file_start_time": 2.0, "file_end_time": 1.0},
    {"rms_values": []},
    {"rms_values": [[0.1, 0.2]]},
    {"rms_values": [0.1, float("nan")]},
    {"rms_values": ["loud"]},
    {"playback_start_time": "soon"},
    {"file_end_time": float("inf")},
    {"rms_frames_per_second": 0},
])
def test_invalid_segments_fail_construction(kwargs) -> None:
    base = {"playback_start_time": 0.0, "file_start_time": 0.0,
            "file_end_time": 1.0, "rms_values": [0.1, 0.2]}
    base.update(kwargs)
    with pytest.raises(SegmentError):
        AudioSegment(**base)


def test_zero_duration_segment_can_be_constructed() -> None:
    seg = AudioSegment(0.0, 1.0, 1.0, [0.1])
    assert seg.duration == 0.0


def test_audio_segment_satisfies_viewable_protocol() -> None:
    seg = AudioSegment(0.0, 0.0, 1.0, [0.5])
    assert isinstance(seg, ViewableSegment)


def test_track_defaults() -> None:
    track = Track()
    assert track.segments == []
    assert track.params == TrackParams()
    assert track.rms_frames_per_second == 50.0
    assert track.pixels_per_rms == 1.0


def test_track_rejects_invalid_params() -> None:
    with pytest.raises(ConfigError):
        Track([], rms_frames_per_second=0)
    with pytest.raises(ConfigError):
        Track([], fill_color="black")


def test_track_from_config() -> None:
    track = Track.from_config([], {"pixels_per_rms": 4, "fill_color": "#123456"})
    assert track.pixels_per_rms == 4.0
    assert track.fill_color == "#123456"
    assert track.rms_frames_per_second == 50.0


def test_track_params_config_round_trip() -> None:
    params = TrackParams(rms_frames_per_second=100.0, pixels_per_rms=0.5)
    assert TrackParams.from_config(params.to_config()) == params
