from __future__ import annotations

import os

import numpy as np
import pytest

# GUI tests paint offscreen; must be set before Qt is imported.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from trackviewlib.models import AudioSegment


def make_segment(n: int = 500, *, playback_start_time: float = 0.0,
                 file_start_time: float = 0.0, file_end_time: float | None = None,
                 fps: float = 50.0, **kwargs) -> AudioSegment:
    """Segment with ``n`` ramp RMS values covering ``n / fps`` seconds."""
    if file_end_time is None:
        file_end_time = n / fps
    return AudioSegment(
        playback_start_time=playback_start_time,
        file_start_time=file_start_time,
        file_end_time=file_end_time,
        rms_values=np.linspace(0.0, 1.0, n, dtype=np.float32),
        **kwargs,
    )


@pytest.fixture
def segment_factory():
    return make_segment


@pytest.fixture(scope="session")
def qapp():
    QtWidgets = pytest.importorskip("PySide6.QtWidgets")
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    return app
