from __future__ import annotations

from types import SimpleNamespace

import numpy as np
import pytest

from trackviewlib.layout import (
    IndexOutOfRange,
    InvalidWindowRange,
    LayoutError,
    SampleRange,
    SampleRateMismatch,
    TrackLayoutEngine,
    compute_visible_window,
    sample_range_for,
    track_extent,
)


def test_full_file_window_is_whole_array(segment_factory) -> None:
    seg = segment_factory(500, playback_start_time=5.0)
    win = compute_visible_window(seg, 50.0, 1.0)
    assert len(win.rms_values) == 500
    assert np.array_equal(win.rms_values, seg.rms_values)
    assert win.pixel_width == 500
    assert win.pixel_offset == 250
    assert win.sample_range == SampleRange(0, 499)
    assert win.segment_id == seg.id


def test_partial_file_range_selects_inclusive_slice(segment_factory) -> None:
    seg = segment_factory(500, file_start_time=1.0, file_end_time=3.0)
    win = compute_visible_window(seg, 50.0, 2.0)
    # floor(1.0 * 50) = 50, floor(3.0 * 50) - 1 = 149
    assert win.sample_range == SampleRange(50, 149)
    assert len(win.rms_values) == 100
    assert np.array_equal(win.rms_values, seg.rms_values[50:150])
    assert win.pixel_width == 200
    assert win.pixel_offset == 0


def test_pixel_width_matches_sample_count(segment_factory) -> None:
    for start, end, ppr in [(0.0, 1.0, 1.0), (0.5, 7.25, 3.0), (2.02, 2.1, 0.5)]:
        seg = segment_factory(500, file_start_time=start, file_end_time=end)
        win = compute_visible_window(seg, 50.0, ppr)
        rng = win.sample_range
        assert win.pixel_width == ppr * (rng.end - rng.start + 1)
        assert win.pixel_width > 0


def test_end_index_clamped_to_last_sample(segment_factory) -> None:
    seg = segment_factory(500, file_end_time=10.0)
    assert compute_visible_window(seg, 50.0).sample_range.end == 499

    longer = segment_factory(500, file_end_time=12.0)
    win = compute_visible_window(longer, 50.0)
    assert win.sample_range == SampleRange(0, 499)
    assert len(win.rms_values) == 500


def test_zero_duration_segment_is_invalid_range(segment_factory) -> None:
    seg = segment_factory(500, file_start_time=2.0, file_end_time=2.0)
    with pytest.raises(InvalidWindowRange):
        compute_visible_window(seg, 50.0)


def test_end_before_first_sample_is_invalid_range(segment_factory) -> None:
    # floor(0.01 * 50) = 0 -> end index -1
    seg = segment_factory(500, file_end_time=0.01)
    with pytest.raises(InvalidWindowRange):
        compute_visible_window(seg, 50.0)


def test_start_beyond_data_is_index_out_of_range(segment_factory) -> None:
    seg = segment_factory(500, file_start_time=11.0, file_end_time=12.0)
    with pytest.raises(IndexOutOfRange):
        compute_visible_window(seg, 50.0)


def test_negative_start_index_is_index_out_of_range() -> None:
    seg = SimpleNamespace(
        id="neg", playback_start_time=0.0, playback_end_time=1.0,
        file_start_time=-1.0, file_end_time=1.0, rms_values=[0.1] * 100,
    )
    with pytest.raises(IndexOutOfRange):
        compute_visible_window(seg, 50.0)


def test_empty_rms_values_is_index_out_of_range() -> None:
    seg = SimpleNamespace(
        id="empty", playback_start_time=0.0, playback_end_time=1.0,
        file_start_time=0.0, file_end_time=1.0, rms_values=[],
    )
    with pytest.raises(IndexOutOfRange):
        compute_visible_window(seg, 50.0)


def test_layout_errors_share_a_base_class() -> None:
    for exc in (InvalidWindowRange, IndexOutOfRange, SampleRateMismatch):
        assert issubclass(exc, LayoutError)


def test_times_flooring_to_same_index_give_identical_windows(segment_factory) -> None:
    a = segment_factory(500, file_start_time=1.0, file_end_time=4.0)
    b = segment_factory(500, file_start_time=1.019, file_end_time=4.019)
    wa = compute_visible_window(a, 50.0)
    wb = compute_visible_window(b, 50.0)
    assert wa.sample_range == wb.sample_range
    assert np.array_equal(wa.rms_values, wb.rms_values)


def test_pixel_offset_monotonic_in_playback_start(segment_factory) -> None:
    starts = [0.0, 0.01, 0.5, 1.0, 2.5, 2.5, 10.0, 123.456]
    offsets = [
        compute_visible_window(segment_factory(100, playback_start_time=s), 50.0, 1.5).pixel_offset
        for s in starts
    ]
    assert offsets == sorted(offsets)
    assert offsets[0] == 0.0


def test_duck_typed_segment_with_list_values() -> None:
    seg = SimpleNamespace(
        id="duck", playback_start_time=1.0, playback_end_time=2.0,
        file_start_time=0.0, file_end_time=1.0, rms_values=[0.25] * 60,
    )
    win = compute_visible_window(seg, 50.0, 1.0)
    assert len(win.rms_values) == 50
    assert win.pixel_offset == 50.0


def test_window_is_read_only(segment_factory) -> None:
    win = compute_visible_window(segment_factory(100), 50.0)
    with pytest.raises(ValueError):
        win.rms_values[0] = 1.0


def test_sample_rate_mismatch_detected(segment_factory) -> None:
    seg = segment_factory(500, rms_frames_per_second=100.0)
    with pytest.raises(SampleRateMismatch):
        compute_visible_window(seg, 50.0)


def test_matching_declared_sample_rate_is_accepted(segment_factory) -> None:
    seg = segment_factory(500, rms_frames_per_second=50)
    assert len(compute_visible_window(seg, 50.0).rms_values) == 500


def test_non_positive_parameters_rejected(segment_factory) -> None:
    seg = segment_factory(10)
    with pytest.raises(ValueError):
        compute_visible_window(seg, 0.0)
    with pytest.raises(ValueError):
        compute_visible_window(seg, 50.0, 0.0)
    with pytest.raises(ValueError):
        TrackLayoutEngine(-1.0)


def test_sample_range_validation_never_slices_backwards() -> None:
    values = np.arange(10, dtype=np.float32)
    assert len(SampleRange(3, 2)) == 0
    with pytest.raises(InvalidWindowRange):
        SampleRange(3, 2).take(values)
    with pytest.raises(IndexOutOfRange):
        SampleRange(5, 10).take(values)
    with pytest.raises(IndexOutOfRange):
        SampleRange(10, 12).take(values)
    assert list(SampleRange(8, 9).take(values)) == [8.0, 9.0]


def test_sample_range_for_uses_floor(segment_factory) -> None:
    seg = segment_factory(500, file_start_time=0.099, file_end_time=0.201)
    # floor(4.95) = 4, floor(10.05) - 1 = 9
    assert sample_range_for(seg, 50.0) == SampleRange(4, 9)


def test_engine_layout_preserves_order_and_aborts_on_error(segment_factory) -> None:
    engine = TrackLayoutEngine(50.0, 1.0)
    segs = [segment_factory(100, playback_start_time=t) for t in (3.0, 0.0, 1.0)]
    windows = engine.layout(segs)
    assert [w.segment_id for w in windows] == [s.id for s in segs]

    bad = segment_factory(100, file_start_time=1.0, file_end_time=1.0)
    with pytest.raises(InvalidWindowRange):
        engine.layout(segs + [bad])


def test_track_extent(segment_factory) -> None:
    engine = TrackLayoutEngine(50.0, 1.0)
    windows = engine.layout([
        segment_factory(500, playback_start_time=0.0),
        segment_factory(500, playback_start_time=5.0),
    ])
    assert track_extent(windows) == 750.0
    assert track_extent([]) == 0.0
