"""
TrackView GUI: PySide6 viewer for multi-segment RMS waveform tracks.

Usage:
    python trackview-gui.py [track.tvtrack]

Requires: PySide6 (install via `pip install PySide6`)
"""

from trackviewgui import main

if __name__ == "__main__":
    main()
