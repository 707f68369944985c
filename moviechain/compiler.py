"""Staging and compilation of pending ffmpeg instructions.

Pending instructions are a read-only mapping of keyword to a tuple of
values. Staging never mutates an existing mapping: it returns a new,
read-only one, so clips derived from a common parent cannot alter each
other's instructions.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from .executor.command_builder import Filter
from .video.formats import (
    AUDIO_CODEC,
    AUDIO_FILTER,
    VIDEO_FILTER,
    AudioCodec,
    PixelFormat,
)

PendingArguments = Mapping[str, tuple[str, ...]]

VALUE_SEPARATOR = ","

def freeze_pending(pending: PendingArguments) -> PendingArguments:
    """Return a read-only copy of ``pending`` with tuple values."""
    return MappingProxyType({keyword: tuple(values) for keyword, values in pending.items()})


def stage_argument(pending: PendingArguments, keyword: str, value: str) -> PendingArguments:
    """Return a read-only copy of ``pending`` with ``value`` appended under ``keyword``."""
    staged = dict(pending)
    staged[keyword] = tuple(staged.get(keyword, ())) + (str(value),)
    return MappingProxyType(staged)


def scale_instruction(width: int, height: int) -> str:
    """Build the scale filter for the given dimensions.

    Odd dimensions are prefixed with a yuv444p conversion, since 4:2:0
    encoders reject sizes not divisible by 2.
    """
    scale = Filter("scale", {"": f"{width}:{height}"}).to_string()
    if width % 2 != 0 or height % 2 != 0:
        pixel_format = Filter("format", {"": PixelFormat.YUV444P.value}).to_string()
        return f"{pixel_format}{VALUE_SEPARATOR}{scale}"
    return scale


def apply_default_arguments(pending: PendingArguments) -> PendingArguments:
    """Stage audio stream copy when nothing touches the audio track.

    Video copy is never added: the compiled instruction set always carries
    a scale filter, which requires a re-encode.
    """
    if AUDIO_CODEC in pending or AUDIO_FILTER in pending:
        return pending
    return stage_argument(pending, AUDIO_CODEC, AudioCodec.COPY.value)


def compile_arguments(
    pending: PendingArguments,
    width: int,
    height: int,
    exclude: Iterable[str] = (),
    default_codec_copy: bool = False,
) -> dict[str, str]:
    """Merge pending instructions into the keyword arguments passed to ffmpeg.

    Args:
        pending: Staged instructions, keyword to values.
        width: Current clip width.
        height: Current clip height.
        exclude: Keywords to leave out of the result.
        default_codec_copy: Apply ``apply_default_arguments`` first.

    Returns:
        Ordered dict of keyword to comma-joined value. The scale instruction
        for ``width`` x ``height`` is always the last video filter.
    """
    if default_codec_copy:
        pending = apply_default_arguments(pending)
    pending = stage_argument(pending, VIDEO_FILTER, scale_instruction(width, height))

    excluded = set(exclude)
    return {
        keyword: VALUE_SEPARATOR.join(values)
        for keyword, values in pending.items()
        if keyword not in excluded
    }
