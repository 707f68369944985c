"""Pytest configuration for moviechain tests.

Provides an engine whose ffmpeg and ffprobe are replaced by in-process
fakes: the fake ffmpeg writes a placeholder output file and records the
dimensions/duration the command implies, and the fake ffprobe reports
those back, so renders can be reloaded without real media.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so `moviechain` is importable without install
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from moviechain.config import EngineConfig
from moviechain.engine import MediaEngine
from moviechain.errors import LoadError
from moviechain.executor.process_manager import ProcessManager, ProcessResult
from moviechain.video.analyzer import VideoAnalyzer


def _key(path) -> str:
    return str(Path(path).resolve())


class MediaRegistry:
    """What the fake ffprobe knows about each file: (width, height, duration)."""

    def __init__(self):
        self.entries = {}

    def register(self, path, width: int, height: int, duration: float) -> None:
        self.entries[_key(path)] = (width, height, duration)

    def get(self, path):
        return self.entries.get(_key(path))


class FakeProcessManager(ProcessManager):
    """Records commands and fakes their outputs instead of running ffmpeg."""

    def __init__(self, registry: MediaRegistry):
        super().__init__(ffmpeg_path="/usr/bin/ffmpeg")
        self.registry = registry
        self.commands = []
        self.fail_on_call = None

    def execute(self, command, timeout=None):
        self.commands.append(command)
        output_path = command.outputs[0]

        if self.fail_on_call is not None and len(self.commands) == self.fail_on_call:
            # Simulate a crash after ffmpeg started writing.
            Path(output_path).write_bytes(b"partial")
            return ProcessResult(
                success=False,
                return_code=1,
                stdout="",
                stderr="Error while processing the decoded data",
                command=command.to_string(),
                output_path=output_path,
                error_message="Error while processing the decoded data",
            )

        self.registry.register(output_path, *self._describe_output(command))
        Path(output_path).write_bytes(b"rendered")
        return ProcessResult(
            success=True,
            return_code=0,
            stdout="",
            stderr="",
            command=command.to_string(),
            output_path=output_path,
        )

    def _describe_output(self, command):
        input_path = command.inputs[0]
        if command.input_options.get(input_path, [])[:2] == ["-f", "concat"]:
            return self._describe_concat(input_path)

        width, height, duration = self.registry.get(input_path)
        options = dict(zip(command.output_options[::2], command.output_options[1::2]))

        for part in options.get("-vf", "").split(","):
            if part.startswith("scale="):
                width, height = (int(v) for v in part[len("scale="):].split(":"))
        if "-to" in options:
            duration = float(options["-to"]) - float(options.get("-ss", 0))
        return width, height, duration

    def _describe_concat(self, manifest_path):
        lines = Path(manifest_path).read_text(encoding="utf-8").splitlines()
        parts = [line[len("file '"):-1] for line in lines]
        described = [self.registry.get(part) for part in parts]
        width, height, _ = described[0]
        return width, height, sum(entry[2] for entry in described)


class FakeAnalyzer(VideoAnalyzer):
    """Answers probes from the registry using ffprobe-shaped JSON."""

    def __init__(self, registry: MediaRegistry):
        super().__init__(ffprobe_path="/usr/bin/ffprobe")
        self.registry = registry
        self.probed = []

    def analyze(self, video_path):
        self.probed.append(str(video_path))
        entry = self.registry.get(video_path)
        if entry is None:
            raise LoadError(f"ffprobe failed on {video_path}: Invalid data found")
        width, height, duration = entry
        data = {
            "format": {"format_name": "mov,mp4", "duration": str(duration)},
            "streams": [
                {
                    "index": 0,
                    "codec_type": "video",
                    "codec_name": "h264",
                    "width": width,
                    "height": height,
                    "r_frame_rate": "30/1",
                },
                {
                    "index": 1,
                    "codec_type": "audio",
                    "codec_name": "aac",
                    "sample_rate": "48000",
                    "channels": 2,
                },
            ],
        }
        return self.parse_probe_data(str(video_path), data)


@pytest.fixture
def registry():
    return MediaRegistry()


@pytest.fixture
def temp_dir(tmp_path):
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def engine(registry, temp_dir):
    return MediaEngine(
        config=EngineConfig(temp_dir=str(temp_dir)),
        process_manager=FakeProcessManager(registry),
        analyzer=FakeAnalyzer(registry),
    )


@pytest.fixture
def make_source(tmp_path, registry):
    """Create a placeholder media file that the fake ffprobe can describe."""
    def _make(name="source.mp4", width=1920, height=1080, duration=10.0):
        path = tmp_path / name
        path.write_bytes(b"source")
        registry.register(path, width, height, duration)
        return path
    return _make
