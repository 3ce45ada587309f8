"""Amplitude sequence to mirrored waveform outline.

Pure numpy so the core stays free of any drawing toolkit; the GUI turns
the returned points into a ``QPolygonF``.
"""

from __future__ import annotations

import numpy as np


def waveform_polygon(amplitudes, width: float, height: float, *,
                     x: float = 0.0, y: float = 0.0) -> np.ndarray:
    """Closed outline of a waveform mirrored around its centre line.

    Each amplitude occupies one cell of ``width / n`` pixels and is placed at
    the cell centre; the outline is extended to both edges so its horizontal
    extent is exactly ``[x, x + width]``.  Amplitudes are clipped to
    ``[0, 1]``; 1.0 reaches the top and bottom of the ``height`` box.

    Returns a float64 array of shape ``(2 * (n + 2), 2)``: the upper edge
    left to right followed by the lower edge right to left.
    """
    amps = np.clip(np.asarray(amplitudes, dtype=np.float64), 0.0, 1.0)
    if amps.ndim != 1 or amps.size == 0:
        raise ValueError("amplitudes must be a non-empty 1-D sequence")
    if not width > 0:
        raise ValueError(f"width must be > 0, got {width}")
    if height < 0:
        raise ValueError(f"height must be >= 0, got {height}")

    n = amps.size
    cell = width / n
    xs = np.concatenate(([0.0], (np.arange(n) + 0.5) * cell, [width])) + x
    levels = np.concatenate(([amps[0]], amps, [amps[-1]]))

    half = height / 2.0
    mid_y = y + half
    ys_top = mid_y - levels * half
    ys_bot = mid_y + levels * half

    return np.column_stack([
        np.concatenate([xs, xs[::-1]]),
        np.concatenate([ys_top, ys_bot[::-1]]),
    ])
