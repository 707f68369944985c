"""Collaborators shared by every clip in an edit chain."""

import logging
from typing import Optional

from .config import EngineConfig
from .executor.process_manager import ProcessManager
from .video.analyzer import VideoAnalyzer

logger = logging.getLogger("moviechain")


class MediaEngine:
    """Bundles configuration with the ffmpeg runner and the ffprobe analyzer."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        process_manager: Optional[ProcessManager] = None,
        analyzer: Optional[VideoAnalyzer] = None,
    ):
        """Initialize the engine.

        Args:
            config: Engine configuration. Defaults to ``EngineConfig()``.
            process_manager: ffmpeg runner. Built from config if not provided.
            analyzer: ffprobe wrapper. Built from config if not provided.
        """
        self.config = config or EngineConfig()
        self.process_manager = process_manager or ProcessManager(
            ffmpeg_path=self.config.ffmpeg_path,
            timeout=self.config.timeout,
        )
        self.analyzer = analyzer or VideoAnalyzer(
            ffprobe_path=self.config.ffprobe_path,
            timeout=self.config.timeout,
        )

    def __repr__(self) -> str:
        return f"MediaEngine(config={self.config!r})"


_default_engine: Optional[MediaEngine] = None


def get_default_engine() -> MediaEngine:
    """Return the process-wide engine, creating it on first use."""
    global _default_engine
    if _default_engine is None:
        _default_engine = MediaEngine()
        logger.debug("Created default engine %r", _default_engine)
    return _default_engine


def set_default_engine(engine: Optional[MediaEngine]) -> None:
    """Replace the process-wide engine. Pass None to reset it."""
    global _default_engine
    _default_engine = engine
