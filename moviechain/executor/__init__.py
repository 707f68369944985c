"""FFMPEG command execution modules."""

from .command_builder import CommandBuilder, Filter, FFMPEGCommand
from .process_manager import ProcessManager, ProcessResult

__all__ = [
    "CommandBuilder",
    "Filter",
    "FFMPEGCommand",
    "ProcessManager",
    "ProcessResult",
]
