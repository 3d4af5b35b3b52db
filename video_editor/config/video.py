"""
Configuration settings related to video processing.

This module defines the fixed encoding profile used by transcodes, the quality
and container lookup tables, output naming conventions and thumbnail settings.
"""

# --- Transcode Profile ---
# Arbitrary values for a phone-friendly output; tailor to your needs.
TRANSCODE_VIDEO_CODEC = "libx264"
TRANSCODE_VIDEO_FPS = "30"
TRANSCODE_VIDEO_BITRATE_KBPS = 2560
TRANSCODE_AUDIO_CHANNELS = 1

# --- Quality Tiers ---
# Dimension cap applied to both width and height.
QUALITY_DIMENSIONS = {
    "high": 640,
    "medium": 480,
    "low": 320,
}

# --- Container Formats ---
CONTAINER_EXTENSIONS = {
    "m4v": ".m4v",
    "mpeg4": ".mp4",
    "m4a": ".m4a",
    "quick_time": ".mov",
}

# --- Output Naming ---
TRANSCODE_OUTPUT_PREFIX = "VID_"
THUMBNAIL_OUTPUT_PREFIX = "PIC_"
THUMBNAIL_EXTENSION = ".jpg"
LIBRARY_DIR_NAME = "Movies"
# strftime pattern of the default output name, e.g. "20240131_235959".
DEFAULT_OUTPUT_NAME_FORMAT = "%Y%m%d_%H%M%S"

# --- Thumbnail Settings ---
# Bounding box of a "mini" thumbnail.
THUMBNAIL_MAX_SIZE = (512, 384)
THUMBNAIL_JPEG_QUALITY = 75
