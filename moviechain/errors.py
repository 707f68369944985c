"""Exception types raised by moviechain operations."""

from typing import Optional


class MovieChainError(Exception):
    """Base class for all moviechain errors."""


class LoadError(MovieChainError):
    """A source could not be loaded or inspected."""


class RangeError(MovieChainError, ValueError):
    """Trim or seek bounds fall outside the clip."""


class RenderError(MovieChainError):
    """ffmpeg failed to produce an output artifact."""

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        stderr: Optional[str] = None,
    ):
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class ResourceError(MovieChainError, OSError):
    """A temporary artifact could not be allocated."""
