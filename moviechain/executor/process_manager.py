"""Process management for FFMPEG execution."""

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from .command_builder import FFMPEGCommand

logger = logging.getLogger("moviechain")


@dataclass
class ProcessResult:
    """Result of an FFMPEG process execution."""
    success: bool
    return_code: int
    stdout: str
    stderr: str
    command: str
    output_path: Optional[str] = None
    error_message: Optional[str] = None


class ProcessManager:
    """Runs FFMPEG commands synchronously, one process at a time."""

    def __init__(
        self,
        ffmpeg_path: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize process manager.

        Args:
            ffmpeg_path: Path to ffmpeg executable. If None, searches PATH.
            timeout: Default maximum execution time in seconds per command.
        """
        self.ffmpeg_path = ffmpeg_path or shutil.which("ffmpeg")
        if not self.ffmpeg_path:
            raise RuntimeError("ffmpeg not found in PATH")
        self.timeout = timeout

    def execute(
        self,
        command: FFMPEGCommand | list[str],
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """Execute an FFMPEG command synchronously.

        Args:
            command: FFMPEGCommand object or list of arguments.
            timeout: Maximum execution time in seconds. Falls back to the
                manager's default.

        Returns:
            ProcessResult with execution details.
        """
        if isinstance(command, FFMPEGCommand):
            args = command.to_args()
            cmd_string = command.to_string()
            output_path = command.outputs[0] if command.outputs else None
        else:
            args = list(command)
            cmd_string = " ".join(args)
            output_path = None

        # Replace 'ffmpeg' with actual path
        if args[0] == "ffmpeg":
            args[0] = self.ffmpeg_path

        if timeout is None:
            timeout = self.timeout

        logger.debug("Running: %s", cmd_string)

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return ProcessResult(
                success=False,
                return_code=-1,
                stdout="",
                stderr="Process timed out",
                command=cmd_string,
                output_path=output_path,
                error_message="Execution timed out",
            )
        except OSError as e:
            return ProcessResult(
                success=False,
                return_code=-1,
                stdout="",
                stderr=str(e),
                command=cmd_string,
                output_path=output_path,
                error_message=str(e),
            )

        success = result.returncode == 0
        error_message = None
        if not success:
            error_message = self._parse_error(result.stderr)
            logger.debug("ffmpeg exited with %d: %s", result.returncode, error_message)

        return ProcessResult(
            success=success,
            return_code=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            command=cmd_string,
            output_path=output_path,
            error_message=error_message,
        )

    def _parse_error(self, stderr: str) -> str:
        """Extract meaningful error message from ffmpeg stderr."""
        lines = stderr.strip().split("\n")

        error_patterns = [
            r"Error.*",
            r"Invalid.*",
            r"No such file.*",
            r".*not found.*",
            r"Permission denied.*",
            r".*not divisible by 2.*",
        ]

        for line in reversed(lines):
            for pattern in error_patterns:
                if re.search(pattern, line, re.IGNORECASE):
                    return line.strip()

        # Return last non-empty line if no pattern matched
        for line in reversed(lines):
            if line.strip():
                return line.strip()

        return "Unknown error"

    def validate_command(self, command: FFMPEGCommand) -> tuple[bool, Optional[str]]:
        """Validate a command without executing it.

        Args:
            command: Command to validate.

        Returns:
            Tuple of (is_valid, error_message).
        """
        if not command.inputs:
            return False, "No input files specified"

        if not command.outputs:
            return False, "No output file specified"

        for input_path in command.inputs:
            if not Path(input_path).exists():
                return False, f"Input file not found: {input_path}"

        for output_path in command.outputs:
            output_dir = Path(output_path).parent
            if not output_dir.exists():
                return False, f"Output directory not found: {output_dir}"

        return True, None
