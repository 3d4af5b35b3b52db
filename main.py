"""
Main entry point for the Video Editor bridge.

Runs a single bridge action (transcode, trim, thumbnail or a raw ffmpeg command)
from the command line. See `video_editor.cli` for the available subcommands.
"""

import sys

from loguru import logger

from video_editor.cli import main
from video_editor.config.common import LOGGER_FORMAT

# Configure the logger for initial setup.
# The level is overridden once the command-line arguments are parsed.
logger.remove()
logger.add(sys.stderr, level="DEBUG" if __debug__ else "INFO", format=LOGGER_FORMAT)


if __name__ == "__main__":
    sys.exit(main())
