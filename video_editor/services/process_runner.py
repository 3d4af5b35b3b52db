"""
Runs the external binary and streams its output.

stdout and stderr are merged into one stream, read line by line and handed to a
sink as `ProgressEvent`s while the process is still running. ffmpeg rewrites its
status line with carriage returns, so '\\r' counts as a line break as well.
"""
import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence

from loguru import logger

from ..domain.exceptions import LaunchFailed
from ..domain.models import ProcessOutcome, ProgressEvent
from ..utils.ffmpeg_utils import format_cmd_for_display

ProgressSink = Callable[[ProgressEvent], None]


class ProcessRunner:
    def run(
        self,
        argv: Sequence[str],
        sink: ProgressSink,
        expected_output: Optional[Path] = None,
    ) -> ProcessOutcome:
        """
        Executes `argv` and blocks until it exits.

        Args:
            argv: Program and arguments. Passed without a shell.
            sink: Called once per output line, in order, on the calling thread.
            expected_output: File the process is supposed to create. When given,
                its existence after exit is reported in the outcome.

        Returns:
            The exit code and whether the expected output exists.

        Raises:
            LaunchFailed: If the program cannot be started. No events are emitted.
        """
        if not argv:
            raise LaunchFailed("No command to run")

        cmd_list = [str(part) for part in argv]
        logger.debug(f"Executing: {format_cmd_for_display(cmd_list)}")

        try:
            process = subprocess.Popen(
                cmd_list,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            logger.error(f"Command not found: {cmd_list[0]}")
            raise LaunchFailed(f"Could not start {cmd_list[0]}: command not found") from e
        except OSError as e:
            logger.error(f"Failed to launch {cmd_list[0]}: {e}")
            raise LaunchFailed(f"Could not start {cmd_list[0]}: {e}") from e

        # Text mode with universal newlines splits on \n, \r\n and \r.
        try:
            with process.stdout:
                for line in process.stdout:
                    line = line.rstrip("\r\n")
                    logger.trace(line)
                    sink(ProgressEvent(line))
        except BaseException:
            process.kill()
            process.wait()
            raise

        exit_code = process.wait()
        output_file_exists = expected_output.is_file() if expected_output is not None else True
        logger.debug(f"Process exited with code {exit_code} (output present: {output_file_exists})")
        return ProcessOutcome(exit_code=exit_code, output_file_exists=output_file_exists)
