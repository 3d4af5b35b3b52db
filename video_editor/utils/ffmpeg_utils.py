"""
This module provides utility functions related to the FFmpeg executable: finding
it, checking that it runs, and rendering argument vectors for log output.
"""
import os
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from ..config.common import MODULE_PATH

FFMPEG_COMMAND = "ffmpeg"


def get_ffmpeg_path(module_path: Optional[Path] = MODULE_PATH) -> str:
    """
    Picks the ffmpeg binary the bridge launches.

    A binary inside the configured `ffmpeg_dir` wins; otherwise the bare command
    name is returned and the OS looks it up on PATH.
    """
    if not module_path:
        return FFMPEG_COMMAND

    for name in (FFMPEG_COMMAND, f"{FFMPEG_COMMAND}.exe"):
        candidate = Path(module_path) / name
        if candidate.is_file():
            logger.debug(f"ffmpeg binary: {candidate}")
            return str(candidate)

    logger.warning(f"No ffmpeg binary in configured ffmpeg_dir '{module_path}', using '{FFMPEG_COMMAND}' from PATH")
    return FFMPEG_COMMAND


def verify_ffmpeg(ffmpeg_cmd: Optional[str] = None) -> bool:
    """
    Runs `<ffmpeg> -version` once and reports whether the binary is usable.

    Returns:
        True if the binary started and exited with code 0.
    """
    ffmpeg_cmd = ffmpeg_cmd or get_ffmpeg_path()
    try:
        completed = subprocess.run(
            [ffmpeg_cmd, "-version"],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except OSError as e:
        logger.error(f"Cannot start '{ffmpeg_cmd}': {e}. Install ffmpeg or set paths.ffmpeg_dir in config.user.yaml")
        return False

    banner = completed.stdout.partition("\n")[0]
    if completed.returncode != 0:
        logger.error(f"'{ffmpeg_cmd} -version' exited with code {completed.returncode}: {banner}")
        return False

    logger.info(f"Using {banner or ffmpeg_cmd}")
    return True


def format_cmd_for_display(cmd_list: Sequence[str]) -> str:
    """
    Joins an argument vector into a single, correctly quoted string for logging.
    """
    if os.name == "nt":
        return subprocess.list2cmdline(list(cmd_list))
    return shlex.join(cmd_list)
