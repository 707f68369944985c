"""Path validation and temporary artifact handling.

Source paths are validated before probing, destinations are resolved to
absolute paths, and intermediate renders are allocated with
``tempfile.mkstemp`` so independent edit chains never collide.
"""

import logging
import os
import tempfile
import weakref
from pathlib import Path
from typing import Optional

from .errors import LoadError, ResourceError

logger = logging.getLogger("moviechain")


def resolve_source_path(path: str | Path) -> tuple[str, str]:
    """Validate and resolve a media source path.

    Args:
        path: The path to validate.

    Returns:
        Tuple of (absolute path, extension without the leading dot).

    Raises:
        LoadError: If the path is empty, missing, a directory, or has no
            extension.
    """
    if not path or not str(path).strip():
        raise LoadError("Path cannot be empty")

    resolved = Path(path).resolve()

    if not resolved.exists():
        raise LoadError(f"File not found: {resolved}")
    if resolved.is_dir():
        raise LoadError(f"Path is a directory: {resolved}")

    extension = resolved.suffix.lstrip(".")
    if not extension:
        raise LoadError(f"File '{resolved}' does not have an extension")

    return str(resolved), extension


def resolve_destination_path(path: str | Path) -> str:
    """Resolve an output path to an absolute path string.

    Raises:
        ValueError: If the path is empty.
    """
    if not path or not str(path).strip():
        raise ValueError("Output path cannot be empty")
    return str(Path(path).resolve())


def allocate_temp_path(prefix: str, suffix: str, temp_dir: Optional[str] = None) -> str:
    """Create an empty, uniquely named temp file and return its path.

    Raises:
        ResourceError: If the file cannot be created.
    """
    try:
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=temp_dir)
    except OSError as e:
        raise ResourceError(e.errno, f"Cannot allocate temp file: {e.strerror}") from e
    os.close(fd)
    return name


def remove_file(path: str) -> None:
    """Delete a file if it exists, logging instead of raising on failure."""
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)


def concat_list_entry(path: str) -> str:
    """Format one line of an ffmpeg concat demuxer list.

    Single quotes inside the path are not escaped.
    """
    return f"file '{path}'\n"


class TransientArtifact:
    """Ownership handle for a temp file backing one or more clips.

    The file is removed exactly once: on the first ``release()`` call, or
    when the handle is garbage-collected, whichever comes first.
    """

    def __init__(self, path: str):
        self.path = path
        self._finalizer = weakref.finalize(self, remove_file, path)

    @property
    def released(self) -> bool:
        return not self._finalizer.alive

    def release(self) -> None:
        if self._finalizer.alive:
            logger.debug("Releasing transient artifact %s", self.path)
            self._finalizer()

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"TransientArtifact({self.path!r}, {state})"
