"""Track display subpackage."""

from .renderer import TrackRenderCtx, TrackRenderer
from .widget import TrackWidget

__all__ = ["TrackRenderCtx", "TrackRenderer", "TrackWidget"]
