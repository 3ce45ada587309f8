"""PySide6 rendering surface and viewer for TrackView tracks."""


def main():
    from .mainwindow import main as _main
    _main()


__all__ = ["main"]
