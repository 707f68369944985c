"""Media inspection via ffprobe."""

import json
import logging
import subprocess
import shutil
from pathlib import Path
from typing import Optional
from pydantic import BaseModel

from ..errors import LoadError

logger = logging.getLogger("moviechain")


class StreamInfo(BaseModel):
    """Information about a single stream."""
    index: int
    codec_name: str
    codec_type: str
    codec_long_name: Optional[str] = None
    bit_rate: Optional[int] = None


class VideoStreamInfo(StreamInfo):
    """Video stream specific information."""
    width: int
    height: int
    pixel_format: Optional[str] = None
    frame_rate: Optional[float] = None
    duration: Optional[float] = None


class AudioStreamInfo(StreamInfo):
    """Audio stream specific information."""
    sample_rate: Optional[int] = None
    channels: Optional[int] = None
    duration: Optional[float] = None


class VideoMetadata(BaseModel):
    """Probe result for one media file."""
    file_path: str
    format_name: str
    duration: float
    video_streams: list[VideoStreamInfo] = []
    audio_streams: list[AudioStreamInfo] = []
    raw: dict = {}

    @property
    def primary_video(self) -> Optional[VideoStreamInfo]:
        """Get the primary video stream."""
        return self.video_streams[0] if self.video_streams else None


class VideoAnalyzer:
    """Analyzes video files using ffprobe."""

    def __init__(
        self,
        ffprobe_path: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the analyzer.

        Args:
            ffprobe_path: Path to ffprobe executable. If None, will search PATH.
            timeout: Maximum probe time in seconds. None waits forever.
        """
        self.ffprobe_path = ffprobe_path or shutil.which("ffprobe")
        if not self.ffprobe_path:
            raise RuntimeError("ffprobe not found in PATH")
        self.timeout = timeout

    def analyze(self, video_path: str | Path) -> VideoMetadata:
        """Analyze a video file and extract metadata.

        Args:
            video_path: Path to the video file.

        Returns:
            VideoMetadata object with all extracted information.

        Raises:
            LoadError: If the file doesn't exist or ffprobe cannot read it.
        """
        video_path = Path(video_path)
        if not video_path.exists():
            raise LoadError(f"Video file not found: {video_path}")

        cmd = [
            self.ffprobe_path,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(video_path),
        ]

        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise LoadError(f"ffprobe could not run on {video_path}: {e}") from e

        if result.returncode != 0:
            raise LoadError(f"ffprobe failed on {video_path}: {result.stderr.strip()}")

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise LoadError(f"ffprobe returned invalid JSON for {video_path}") from e

        return self.parse_probe_data(str(video_path), data)

    def parse_probe_data(self, file_path: str, data: dict) -> VideoMetadata:
        """Parse ffprobe JSON output into VideoMetadata."""
        format_info = data.get("format", {})

        video_streams = []
        audio_streams = []

        for stream in data.get("streams", []):
            codec_type = stream.get("codec_type", "")
            if codec_type == "video":
                video_streams.append(self._parse_video_stream(file_path, stream))
            elif codec_type == "audio":
                audio_streams.append(self._parse_audio_stream(stream))

        if format_info.get("duration") is None:
            raise LoadError(f"ffprobe reported no duration for {file_path}")
        try:
            duration = float(format_info["duration"])
        except (TypeError, ValueError) as e:
            raise LoadError(f"Unreadable duration for {file_path}") from e

        return VideoMetadata(
            file_path=file_path,
            format_name=format_info.get("format_name", "unknown"),
            duration=duration,
            video_streams=video_streams,
            audio_streams=audio_streams,
            raw=data,
        )

    def _parse_video_stream(self, file_path: str, stream: dict) -> VideoStreamInfo:
        """Parse video stream information."""
        width = stream.get("width")
        height = stream.get("height")
        if not width or not height or width <= 0 or height <= 0:
            raise LoadError(f"ffprobe reported no usable dimensions for {file_path}")

        frame_rate = None
        if stream.get("r_frame_rate"):
            try:
                num, den = map(int, stream["r_frame_rate"].split("/"))
                frame_rate = num / den if den != 0 else None
            except (ValueError, ZeroDivisionError):
                frame_rate = None

        return VideoStreamInfo(
            index=stream.get("index", 0),
            codec_name=stream.get("codec_name", "unknown"),
            codec_type="video",
            codec_long_name=stream.get("codec_long_name"),
            bit_rate=int(stream["bit_rate"]) if stream.get("bit_rate") else None,
            width=width,
            height=height,
            pixel_format=stream.get("pix_fmt"),
            frame_rate=frame_rate,
            duration=float(stream["duration"]) if stream.get("duration") else None,
        )

    def _parse_audio_stream(self, stream: dict) -> AudioStreamInfo:
        """Parse audio stream information."""
        return AudioStreamInfo(
            index=stream.get("index", 0),
            codec_name=stream.get("codec_name", "unknown"),
            codec_type="audio",
            codec_long_name=stream.get("codec_long_name"),
            bit_rate=int(stream["bit_rate"]) if stream.get("bit_rate") else None,
            sample_rate=int(stream["sample_rate"]) if stream.get("sample_rate") else None,
            channels=stream.get("channels"),
            duration=float(stream["duration"]) if stream.get("duration") else None,
        )
