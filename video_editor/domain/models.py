"""
Value objects produced while a request moves through the pipeline.
"""
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ResolvedPaths:
    """
    The filesystem locations a single request works with.

    Attributes:
        input_path: The resolved, readable input file.
        output_path: Where the operation's result will be written.
        work_dir: Directory for intermediate files.
    """

    input_path: Path
    output_path: Path
    work_dir: Path


@dataclass(frozen=True)
class BuiltCommand:
    """An argument vector for the external binary plus the paths it touches.

    `argv` is empty for operations that do not run ffmpeg (thumbnails).
    """

    argv: tuple[str, ...]
    paths: ResolvedPaths | None = None

    @property
    def output_path(self) -> Path | None:
        return self.paths.output_path if self.paths else None


@dataclass(frozen=True)
class ProgressEvent:
    """One line of subprocess output, without its line terminator."""

    raw_line: str


@dataclass(frozen=True)
class ProcessOutcome:
    """How the external process ended."""

    exit_code: int
    output_file_exists: bool

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and self.output_file_exists
