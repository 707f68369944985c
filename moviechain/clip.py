"""Immutable clip values and the edit operations that derive new ones.

Every operation returns a new ``VideoClip``; pending instructions are
only handed to ffmpeg by ``output().run()``, ``screenshot``, ``subclip``
(which renders straight away) or ``concatenate``.

Example::

    clip = load("input.mp4").resize_by_width(640).fade_out(1.5)
    clip.output("small.mp4").run()
"""

import logging
import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .compiler import compile_arguments, freeze_pending, stage_argument
from .engine import MediaEngine, get_default_engine
from .errors import LoadError, RangeError
from .executor.command_builder import Filter
from .paths import TransientArtifact, resolve_destination_path, resolve_source_path
from .render import RenderRequest, build_render_command, execute_command, temp_render
from .video.analyzer import VideoMetadata
from .video.formats import (
    AUDIO_FILTER,
    FRAME_LIMIT,
    SCREENSHOT_EXCLUDED,
    SEEK_END,
    SEEK_START,
    VIDEO_FILTER,
)

logger = logging.getLogger("moviechain")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _make_even(value: int) -> int:
    return value + 1 if value % 2 != 0 else value


def _fade_filter(name: str, kind: str, start: float, duration: float) -> str:
    return Filter(name, {"t": kind, "st": f"{start:.3f}", "d": f"{duration:.3f}"}).to_string()


@dataclass(frozen=True)
class VideoClip:
    """A clip and the instructions staged against it."""
    source_path: str
    width: int
    height: int
    duration: float
    extension: str
    pending: Mapping[str, tuple[str, ...]] = field(default_factory=dict, hash=False)
    has_pending_edits: bool = False
    artifact: Optional[TransientArtifact] = field(default=None, compare=False)
    probe: Optional[VideoMetadata] = field(default=None, repr=False, compare=False)
    engine: Optional[MediaEngine] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.pending, MappingProxyType):
            object.__setattr__(self, "pending", freeze_pending(self.pending))

    @classmethod
    def from_file(cls, path: str | Path, engine: Optional[MediaEngine] = None) -> "VideoClip":
        """Probe a media file and wrap it in a clip with nothing staged.

        Raises:
            LoadError: If the path is invalid or the file cannot be probed.
        """
        source_path, extension = resolve_source_path(path)
        engine = engine or get_default_engine()

        probe = engine.analyzer.analyze(source_path)
        video = probe.primary_video
        if video is None:
            raise LoadError(f"No video stream found in {source_path}")

        logger.debug(
            "Loaded %s (%dx%d, %.3fs)",
            source_path, video.width, video.height, probe.duration,
        )
        return cls(
            source_path=source_path,
            width=video.width,
            height=video.height,
            duration=probe.duration,
            extension=extension,
            probe=probe,
            engine=engine,
        )

    @property
    def is_transient(self) -> bool:
        return self.artifact is not None

    def filename(self) -> str:
        """Path of the file backing this clip."""
        return self.source_path

    def stage(self, keyword: str, value: str) -> "VideoClip":
        """Return a copy with ``value`` appended to the ``keyword`` instruction.

        Any staged instruction counts as an edit, so the copy is rendered
        before it is concatenated.
        """
        return replace(
            self,
            pending=stage_argument(self.pending, keyword, value),
            has_pending_edits=True,
        )

    def compile(self, exclude: Iterable[str] = ()) -> dict[str, str]:
        """Compile pending instructions into ffmpeg keyword arguments."""
        return compile_arguments(
            self.pending,
            self.width,
            self.height,
            exclude=exclude,
            default_codec_copy=self.engine.config.default_codec_copy,
        )

    # Resize

    def resize_by_width(self, width: int) -> "VideoClip":
        """Scale to ``width``, keeping the aspect ratio with an even height."""
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        height = _make_even(_round_half_up(self.height / self.width * width))
        return replace(self, width=width, height=height, has_pending_edits=True)

    def resize_by_height(self, height: int) -> "VideoClip":
        """Scale to ``height``, keeping the aspect ratio with an even width."""
        if height <= 0:
            raise ValueError(f"height must be positive, got {height}")
        width = _make_even(_round_half_up(self.width / self.height * height))
        return replace(self, width=width, height=height, has_pending_edits=True)

    def resize(self, width: int, height: int) -> "VideoClip":
        """Scale to exactly ``width`` x ``height``."""
        if width <= 0 or height <= 0:
            raise ValueError(f"dimensions must be positive, got {width}x{height}")
        return replace(self, width=width, height=height, has_pending_edits=True)

    # Trim

    def _check_range(self, start: float, end: float) -> None:
        if start < 0:
            raise RangeError("The `start` of the clip can't be negative.")
        if start > end:
            raise RangeError("The `start` of the clip can't be bigger than its `end`.")
        if start > self.duration:
            raise RangeError("The `start` cannot be bigger than the length of the main video.")
        if end > self.duration:
            raise RangeError("The `end` cannot be bigger than the length of the main video.")

    def subclip(self, start: float, end: float) -> "VideoClip":
        """Cut the clip to ``[start, end]`` seconds and render it right away.

        The result is backed by a transient file whose probed length
        matches the cut, so it can be concatenated without re-encoding.

        Raises:
            RangeError: If the bounds fall outside the clip.
        """
        self._check_range(start, end)

        trimmed = replace(
            self.stage(SEEK_START, f"{start:f}").stage(SEEK_END, f"{end:f}"),
            duration=end - start,
        )
        rendered = temp_render(trimmed)
        return replace(rendered, duration=trimmed.duration)

    # Fades

    def fade_in(self, start: float, duration: float) -> "VideoClip":
        if duration < 0:
            raise ValueError("fade duration can't be negative")
        return self.stage(VIDEO_FILTER, _fade_filter("fade", "in", start, duration))

    def fade_out(self, duration: float) -> "VideoClip":
        """Fade to black over the last ``duration`` seconds."""
        if duration < 0:
            raise ValueError("fade duration can't be negative")
        start = self.duration - duration
        return self.stage(VIDEO_FILTER, _fade_filter("fade", "out", start, duration))

    def audio_fade_in(self, start: float, duration: float) -> "VideoClip":
        if duration < 0:
            raise ValueError("fade duration can't be negative")
        return self.stage(AUDIO_FILTER, _fade_filter("afade", "in", start, duration))

    def audio_fade_out(self, duration: float) -> "VideoClip":
        """Fade the audio to silence over the last ``duration`` seconds."""
        if duration < 0:
            raise ValueError("fade duration can't be negative")
        start = self.duration - duration
        return self.stage(AUDIO_FILTER, _fade_filter("afade", "out", start, duration))

    # Rendering

    def output(self, destination: str | Path) -> RenderRequest:
        """Bind the compiled instructions to ``destination``.

        Nothing runs until ``RenderRequest.run`` is called. Running it
        releases this clip's transient artifact, if any.
        """
        return RenderRequest(self, str(destination))

    def screenshot(self, timestamp: float, destination: str | Path) -> str:
        """Save a single frame at ``timestamp`` seconds.

        Codec-copy and audio filter instructions are left out, since a
        still image has no audio and must be encoded.

        Returns:
            Absolute path of the written image.

        Raises:
            RangeError: If ``timestamp`` falls outside the clip.
            RenderError: If ffmpeg fails.
        """
        if timestamp < 0 or timestamp > self.duration:
            raise RangeError(
                f"Screenshot time {timestamp} is outside the clip (0-{self.duration})."
            )

        kwargs = self.compile(exclude=SCREENSHOT_EXCLUDED)
        kwargs[SEEK_START] = f"{timestamp:f}"
        kwargs[FRAME_LIMIT] = "1"

        destination = resolve_destination_path(destination)
        execute_command(
            self.engine, build_render_command(self.source_path, destination, kwargs)
        )
        return destination

    # Lifetime

    def close(self) -> None:
        """Delete the transient file backing this clip, if any."""
        if self.artifact is not None:
            self.artifact.release()

    def __enter__(self) -> "VideoClip":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def load(path: str | Path, engine: Optional[MediaEngine] = None) -> VideoClip:
    """Load a media file as a clip.

    Args:
        path: Path to a media file with an extension.
        engine: Collaborators to use. Defaults to the process-wide engine.

    Raises:
        LoadError: If the file is missing, a directory, has no extension,
            or ffprobe cannot read it.
    """
    return VideoClip.from_file(path, engine=engine)
