"""FFMPEG command builder for edit-chain renders."""

import shlex
from dataclasses import dataclass, field
from typing import Mapping, Optional
from pathlib import Path


@dataclass
class Filter:
    """Represents a single FFMPEG filter."""
    name: str
    params: dict[str, str | int | float | None] = field(default_factory=dict)

    def to_string(self) -> str:
        """Convert filter to FFMPEG filter string.

        Keys set to an empty string are emitted positionally, so
        ``Filter("scale", {"": "640:360"})`` yields ``scale=640:360``.
        """
        if not self.params:
            return self.name

        parts = []
        for key, value in self.params.items():
            if value is None:
                parts.append(key)
            elif key == "":
                parts.append(str(value))
            else:
                parts.append(f"{key}={value}")
        return f"{self.name}={':'.join(parts)}"


@dataclass
class FFMPEGCommand:
    """Represents a complete FFMPEG command."""
    inputs: list[str] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)
    input_options: dict[str, list[str]] = field(default_factory=dict)
    output_options: list[str] = field(default_factory=list)
    overwrite: bool = True

    def to_args(self) -> list[str]:
        """Convert command to list of arguments for subprocess."""
        args = ["ffmpeg"]

        if self.overwrite:
            args.append("-y")

        # Inputs with their options
        for input_path in self.inputs:
            if input_path in self.input_options:
                args.extend(self.input_options[input_path])
            args.extend(["-i", input_path])

        args.extend(self.output_options)
        args.extend(self.outputs)

        return args

    def to_string(self) -> str:
        """Convert command to shell string."""
        return " ".join(shlex.quote(arg) for arg in self.to_args())


class CommandBuilder:
    """Builder for constructing FFMPEG commands."""

    def __init__(self):
        self._command = FFMPEGCommand()

    def input(
        self,
        path: str | Path,
        options: Optional[list[str]] = None,
    ) -> "CommandBuilder":
        """Add an input file."""
        path_str = str(path)
        self._command.inputs.append(path_str)
        if options:
            self._command.input_options[path_str] = list(options)
        return self

    def output(self, path: str | Path) -> "CommandBuilder":
        """Set output file."""
        self._command.outputs.append(str(path))
        return self

    def output_kwargs(self, kwargs: Mapping[str, object]) -> "CommandBuilder":
        """Add keyword output options, e.g. ``{"vf": "scale=640:360"}``.

        Each key becomes ``-key`` followed by the stringified value, in
        mapping order.
        """
        for keyword, value in kwargs.items():
            self._command.output_options.extend([f"-{keyword}", str(value)])
        return self

    def overwrite(self, value: bool = True) -> "CommandBuilder":
        """Set overwrite flag."""
        self._command.overwrite = value
        return self

    def build(self) -> FFMPEGCommand:
        """Build and return the command."""
        return self._command

