"""
Utilities Package for the Video Editor bridge.

Helper modules that are not specific to a single operation.

Modules:
    - ffmpeg_utils.py: Locates and verifies the FFmpeg executable and formats
      argument vectors for logging.
    - format_utils.py: Formatting helpers for ffmpeg timestamps, file sizes and
      elapsed times.
"""
