"""Joining clips end to end with the ffmpeg concat demuxer."""

import logging
from dataclasses import replace
from typing import Optional, Sequence

from .clip import VideoClip
from .engine import MediaEngine
from .errors import ResourceError
from .executor.command_builder import CommandBuilder
from .paths import (
    TransientArtifact,
    allocate_temp_path,
    concat_list_entry,
    remove_file,
)
from .render import RenderRequest, execute_command

logger = logging.getLogger("moviechain")

CONCAT_INPUT_OPTIONS = ["-f", "concat", "-safe", "0"]


def concatenate(
    clips: Sequence[VideoClip],
    engine: Optional[MediaEngine] = None,
) -> VideoClip:
    """Join clips in order into a new transient clip.

    Unedited clips are referenced by their existing file. Clips with
    pending edits are rendered to temp files first, one at a time. The
    parts are then merged in a single stream-copy pass.

    Args:
        clips: Non-empty sequence of clips, in playback order.
        engine: Collaborators for the merge. Defaults to the last clip's.

    Returns:
        Transient clip backed by the merged file, named after the last
        clip's extension.

    Raises:
        ValueError: If ``clips`` is empty.
        RenderError: If staging or merging fails.
    """
    clips = list(clips)
    if not clips:
        raise ValueError("concatenate needs at least one clip")

    engine = engine or clips[-1].engine
    temp_dir = engine.config.temp_dir
    staged_files = []

    try:
        parts = []
        for index, clip in enumerate(clips):
            if not clip.has_pending_edits:
                parts.append(clip.source_path)
                continue

            path = allocate_temp_path(f"video-{index}-", f".{clip.extension}", temp_dir)
            staged_files.append(path)
            RenderRequest(clip, path, release_source=False).run()
            logger.info("Done: %s", path)
            parts.append(path)

        merged = _merge(parts, clips[-1].extension, engine)
    finally:
        for path in staged_files:
            remove_file(path)

    return replace(merged, artifact=TransientArtifact(merged.source_path))


def _write_manifest(parts: list[str], temp_dir: Optional[str]) -> str:
    manifest = allocate_temp_path("list-", ".txt", temp_dir)
    try:
        with open(manifest, "w", encoding="utf-8") as f:
            f.writelines(concat_list_entry(part) for part in parts)
    except OSError as e:
        remove_file(manifest)
        raise ResourceError(e.errno, f"Cannot write concat list: {e.strerror}") from e
    return manifest


def _merge(parts: list[str], extension: str, engine: MediaEngine) -> VideoClip:
    temp_dir = engine.config.temp_dir
    manifest = _write_manifest(parts, temp_dir)

    try:
        final = allocate_temp_path("final-", f".{extension}", temp_dir)
        try:
            command = (
                CommandBuilder()
                .input(manifest, CONCAT_INPUT_OPTIONS)
                .output_kwargs({"c": "copy"})
                .output(final)
                .overwrite(True)
                .build()
            )
            execute_command(engine, command)
            merged = VideoClip.from_file(final, engine=engine)
        except Exception:
            remove_file(final)
            raise
    finally:
        remove_file(manifest)

    logger.info("Concatenated %d parts into %s", len(parts), merged.source_path)
    return merged
