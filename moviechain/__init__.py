"""
moviechain: chainable, lazily rendered video edits on top of ffmpeg.

Edits are staged on immutable clip values and handed to ffmpeg only when
a render is requested.

Example usage:
    - load("in.mp4").resize_by_width(640).output("out.mp4").run()
    - load("in.mp4").subclip(2.0, 5.0).screenshot(1.0, "frame.png")
    - concatenate([load("a.mp4"), load("b.mp4").fade_in(0, 1)])
"""

__version__ = "1.0.0"

from .clip import VideoClip, load
from .concat import concatenate
from .config import EngineConfig
from .engine import MediaEngine, get_default_engine, set_default_engine
from .errors import LoadError, MovieChainError, RangeError, RenderError, ResourceError
from .render import RenderRequest

__all__ = [
    "VideoClip",
    "load",
    "concatenate",
    "EngineConfig",
    "MediaEngine",
    "get_default_engine",
    "set_default_engine",
    "RenderRequest",
    "MovieChainError",
    "LoadError",
    "RangeError",
    "RenderError",
    "ResourceError",
]
