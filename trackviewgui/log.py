"""Debug logging for the TrackView GUI.

Usage::

    from trackviewgui.log import dbg

    dbg(f"Track composited: {len(shapes)} shapes")

Messages go to the ``trackviewgui`` logger.  A stderr handler is attached
only when the environment variable ``TV_DEBUG`` is ``1`` or ``true``
(case-insensitive); library loggers under ``trackviewlib`` are raised to
DEBUG at the same time.  Each line carries a timestamp and the calling
class or module.
"""

from __future__ import annotations

import inspect
import logging
import os

_logger = logging.getLogger("trackviewgui")
_configured = False


def _setup() -> bool:
    global _configured
    if not _configured:
        _configured = True
        val = os.environ.get("TV_DEBUG", "").strip().lower()
        if val in ("1", "true"):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                "[%(asctime)s.%(msecs)03d %(caller)s] %(message)s",
                datefmt="%H:%M:%S",
            ))
            _logger.addHandler(handler)
            _logger.setLevel(logging.DEBUG)
            lib = logging.getLogger("trackviewlib")
            lib.addHandler(logging.StreamHandler())
            lib.setLevel(logging.DEBUG)
    return _logger.isEnabledFor(logging.DEBUG)


def _caller_name() -> str:
    """Class name (or module name) of the code that called :func:`dbg`."""
    frame = inspect.currentframe()
    try:
        caller = frame.f_back.f_back if frame and frame.f_back else None
        if caller is None:
            return "?"
        self_obj = caller.f_locals.get("self")
        if self_obj is not None:
            return type(self_obj).__name__
        mod = caller.f_globals.get("__name__", "")
        return mod.rsplit(".", 1)[-1] if mod else "?"
    finally:
        del frame


def dbg(msg: str) -> None:
    """Log a debug line tagged with the calling class or module."""
    if not _setup():
        return
    _logger.debug(msg, extra={"caller": _caller_name()})
