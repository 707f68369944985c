"""Codec, pixel format and instruction keyword definitions."""

from enum import Enum


class AudioCodec(str, Enum):
    """Audio codec values used in staged instructions."""
    COPY = "copy"


class PixelFormat(str, Enum):
    """Pixel formats referenced by the scale fix-up."""
    YUV444P = "yuv444p"


# Instruction keywords, passed to ffmpeg as ``-<keyword> <value>``.
SEEK_START = "ss"
SEEK_END = "to"
VIDEO_FILTER = "vf"
AUDIO_FILTER = "af"
VIDEO_CODEC = "c:v"
AUDIO_CODEC = "c:a"
FRAME_LIMIT = "vframes"

# A still frame carries no audio and cannot reuse stream-copy settings.
SCREENSHOT_EXCLUDED = (AUDIO_CODEC, VIDEO_CODEC, AUDIO_FILTER)
