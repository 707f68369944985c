"""Render requests and temporary intermediate renders."""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Mapping

from .engine import MediaEngine
from .errors import RenderError
from .executor.command_builder import CommandBuilder, FFMPEGCommand
from .paths import (
    TransientArtifact,
    allocate_temp_path,
    remove_file,
    resolve_destination_path,
)

if TYPE_CHECKING:
    from .clip import VideoClip

logger = logging.getLogger("moviechain")


def build_render_command(
    source_path: str,
    destination: str,
    kwargs: Mapping[str, object],
) -> FFMPEGCommand:
    """Build an overwriting ffmpeg command from compiled keyword arguments."""
    return (
        CommandBuilder()
        .input(source_path)
        .output_kwargs(kwargs)
        .output(destination)
        .overwrite(True)
        .build()
    )


def execute_command(engine: MediaEngine, command: FFMPEGCommand) -> None:
    """Run a command through the engine's process manager.

    Raises:
        RenderError: If the command is invalid or ffmpeg fails.
    """
    process_manager = engine.process_manager
    cmd_string = command.to_string()

    is_valid, problem = process_manager.validate_command(command)
    if not is_valid:
        raise RenderError(f"Cannot render: {problem}", command=cmd_string)

    result = process_manager.execute(command)
    if not result.success:
        raise RenderError(
            f"ffmpeg failed: {result.error_message}",
            command=result.command,
            stderr=result.stderr,
        )
    logger.info("Rendered %s", result.output_path)


class RenderRequest:
    """A compiled render of one clip, bound to a destination.

    Created by ``VideoClip.output``. ``run`` may be called once.
    """

    def __init__(self, clip: "VideoClip", destination: str, release_source: bool = True):
        """Compile the clip's pending instructions for ``destination``.

        Args:
            clip: Clip to render.
            destination: Output path; resolved to an absolute path.
            release_source: Release the clip's transient artifact after
                running. Intermediate renders keep it alive.
        """
        self.clip = clip
        self.destination = resolve_destination_path(destination)
        self.release_source = release_source
        self.command = build_render_command(
            clip.source_path, self.destination, clip.compile()
        )
        self._executed = False

    @property
    def executed(self) -> bool:
        return self._executed

    def command_line(self) -> str:
        """Return the shell-quoted ffmpeg command."""
        return self.command.to_string()

    def run(self) -> None:
        """Execute the render.

        Raises:
            RenderError: If ffmpeg fails or the request already ran.
        """
        if self._executed:
            raise RenderError(
                f"Render to {self.destination} already executed",
                command=self.command_line(),
            )
        self._executed = True

        try:
            execute_command(self.clip.engine, self.command)
        finally:
            # The render is the last read of a transient source.
            if self.release_source and self.clip.artifact is not None:
                self.clip.artifact.release()

    def __repr__(self) -> str:
        return f"RenderRequest({self.clip.source_path!r} -> {self.destination!r})"


def temp_render(clip: "VideoClip", prefix: str = "video-") -> "VideoClip":
    """Materialize a clip's pending instructions into a transient clip.

    The artifact is named after the clip's container extension, rendered,
    then probed again. Any failure removes the artifact before the error
    propagates; the input clip is left untouched.

    Raises:
        ResourceError: If the temp file cannot be allocated.
        RenderError: If ffmpeg fails.
        LoadError: If the rendered file cannot be probed.
    """
    path = allocate_temp_path(
        prefix, f".{clip.extension}", clip.engine.config.temp_dir
    )
    try:
        RenderRequest(clip, path, release_source=False).run()
        rendered = type(clip).from_file(path, engine=clip.engine)
    except Exception:
        remove_file(path)
        raise

    return replace(rendered, artifact=TransientArtifact(rendered.source_path))
