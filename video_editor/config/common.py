"""
Common configuration settings used throughout the application.

This module contains the globally shared settings of the Video Editor bridge:
logging format, worker pool size, and the directories that play the role of the
host platform's storage locations. User-specific values are loaded from an
optional `config.user.yaml` file at the project root, so the bridge can be
pointed at a different FFmpeg build or storage layout without code changes.

Example `config.user.yaml`:

    paths:
      ffmpeg_dir: /opt/ffmpeg/bin
      external_storage_dir: /sdcard
      cache_dir: /data/app/cache
      external_cache_dir: /sdcard/Android/data/app/cache
    app:
      name: Shotclip
      max_workers: 2
    content_index:
      "content://media/external/video/media/42": /sdcard/DCIM/clip.mp4
"""
import os
import tempfile
from pathlib import Path

import yaml
from loguru import logger

# --- User-Defined Path Configuration ---

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
# VIDEO_EDITOR_CONFIG points at a config file outside the project root.
USER_CONFIG_PATH = Path(os.environ.get("VIDEO_EDITOR_CONFIG") or PROJECT_ROOT / "config.user.yaml")

# The directory containing the FFmpeg executable. If None, the executable is
# expected on the system's PATH.
MODULE_PATH: Path | None = None

# Root of the shared, user-visible storage. Finished media saved "to the library"
# lands in `<EXTERNAL_STORAGE_DIR>/Movies/<APP_NAME>`.
EXTERNAL_STORAGE_DIR: Path = Path.home()

# Private cache directory. Trim outputs and ffmpeg scratch files live here.
CACHE_DIR: Path = Path(tempfile.gettempdir()) / "video_editor" / "cache"

# Cache directory on shared storage. Transcodes not saved to the library and
# thumbnails are written here.
EXTERNAL_CACHE_DIR: Path = Path(tempfile.gettempdir()) / "video_editor" / "external_cache"

# Name of the host application; used for the library sub-folder.
APP_NAME = "Unknown"

# Number of worker threads that run requests.
MAX_WORKERS = 4

# Static content-reference index: maps `content://` URIs to real paths.
CONTENT_INDEX: dict[str, str] = {}

if USER_CONFIG_PATH.is_file():
    try:
        with USER_CONFIG_PATH.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}

        paths_config = user_config.get("paths") or {}
        if paths_config.get("ffmpeg_dir"):
            MODULE_PATH = Path(paths_config["ffmpeg_dir"])
        if paths_config.get("external_storage_dir"):
            EXTERNAL_STORAGE_DIR = Path(paths_config["external_storage_dir"])
        if paths_config.get("cache_dir"):
            CACHE_DIR = Path(paths_config["cache_dir"])
        if paths_config.get("external_cache_dir"):
            EXTERNAL_CACHE_DIR = Path(paths_config["external_cache_dir"])

        app_config = user_config.get("app") or {}
        if app_config.get("name"):
            APP_NAME = str(app_config["name"])
        if app_config.get("max_workers"):
            MAX_WORKERS = max(1, int(app_config["max_workers"]))

        CONTENT_INDEX = {
            str(uri): str(path)
            for uri, path in (user_config.get("content_index") or {}).items()
        }
    except Exception as e:
        logger.warning(f"Could not load or parse '{USER_CONFIG_PATH}': {e}")
else:
    logger.debug(f"User config '{USER_CONFIG_PATH}' not found. Using default paths.")


# --- Logging Configuration ---

LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{thread.name} - <level>{message}</level>"
)


# --- Response Channel ---

# Capacity of a QueueCallbackContext. A worker producing progress faster than the
# caller consumes it blocks once this many results are pending.
CALLBACK_QUEUE_SIZE = 256


# --- Request States ---
# A request moves through these states strictly in order; any failure jumps
# straight to REQUEST_STATE_FAILED.

REQUEST_STATE_RECEIVED = "received"
REQUEST_STATE_RESOLVING = "resolving"
REQUEST_STATE_BUILDING = "building"
REQUEST_STATE_RUNNING = "running"
REQUEST_STATE_SUCCEEDED = "succeeded"
REQUEST_STATE_FAILED = "failed"
