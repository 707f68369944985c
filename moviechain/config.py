"""Engine configuration."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class EngineConfig:
    """Configuration for the external ffmpeg/ffprobe toolchain.

    Attributes:
        ffmpeg_path: Path to the ffmpeg executable. Searched in PATH if None.
        ffprobe_path: Path to the ffprobe executable. Searched in PATH if None.
        temp_dir: Directory for intermediate artifacts. Uses the system
            temp directory if None.
        timeout: Per-invocation timeout in seconds. None waits forever.
        default_codec_copy: Inject ``c:a copy`` when a render stages no
            audio codec and no audio filter.
    """
    ffmpeg_path: Optional[str] = None
    ffprobe_path: Optional[str] = None
    temp_dir: Optional[str] = None
    timeout: Optional[float] = None
    default_codec_copy: bool = False
