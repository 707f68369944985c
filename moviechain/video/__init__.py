"""Media inspection and format definitions."""

from .analyzer import VideoAnalyzer, VideoMetadata, VideoStreamInfo, AudioStreamInfo
from .formats import AudioCodec, PixelFormat

__all__ = [
    "VideoAnalyzer",
    "VideoMetadata",
    "VideoStreamInfo",
    "AudioStreamInfo",
    "AudioCodec",
    "PixelFormat",
]
