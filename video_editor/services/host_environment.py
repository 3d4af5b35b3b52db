"""
Host platform collaborators.

The bridge does not implement storage access, media indexing or thumbnail
decoding itself; it talks to the host through the small interfaces defined here.
`HostEnvironment` bundles one instance of each together with the directories the
host exposes, so a whole platform can be swapped (for tests, or for a different
shell) by constructing a different environment.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence

from loguru import logger

from ..config.common import (
    APP_NAME,
    CACHE_DIR,
    CONTENT_INDEX,
    EXTERNAL_CACHE_DIR,
    EXTERNAL_STORAGE_DIR,
)
from ..config.video import LIBRARY_DIR_NAME
from ..utils.ffmpeg_utils import get_ffmpeg_path
from .thumbnail_service import FFmpegThumbnailGenerator, ThumbnailGenerator


class ContentResolver(ABC):
    """Looks up the real file path behind an opaque content reference."""

    @abstractmethod
    def query_data_column(
        self,
        uri: str,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence[str]] = None,
    ) -> Optional[str]:
        """
        Returns the file path stored for `uri`, or None if there is none.

        Args:
            uri: A `content://` URI, either of a single item or of a collection.
            selection: Optional filter, e.g. "_id=?".
            selection_args: Values for the placeholders in `selection`.
        """


class DictContentResolver(ContentResolver):
    """
    A ContentResolver backed by an in-memory index of URI -> path.

    A collection query filtered by `_id=?` is answered by looking up the item URI
    `<collection>/<id>`.
    """

    def __init__(self, index: Optional[Mapping[str, str]] = None):
        self._index = dict(index or {})

    def add(self, uri: str, path: str | Path):
        self._index[uri] = str(path)

    def query_data_column(self, uri, selection=None, selection_args=None):
        key = uri
        if selection == "_id=?" and selection_args:
            key = f"{uri.rstrip('/')}/{selection_args[0]}"
        path = self._index.get(key)
        logger.trace(f"Content lookup {key!r} -> {path!r}")
        return path


class MediaScanner(ABC):
    """Tells the host that a new media file should appear in its media library."""

    @abstractmethod
    def scan_file(self, path: Path):
        ...


class LoggingMediaScanner(MediaScanner):
    """MediaScanner for hosts without a media index: just records the request."""

    def scan_file(self, path: Path):
        logger.info(f"Media scan requested for: {path}")


@dataclass
class HostEnvironment:
    """
    Everything the bridge needs from the host platform.

    Defaults come from `config.user.yaml` (see `video_editor.config.common`).
    """

    app_name: str = APP_NAME
    external_storage_dir: Path = EXTERNAL_STORAGE_DIR
    cache_dir: Path = CACHE_DIR
    external_cache_dir: Path = EXTERNAL_CACHE_DIR
    ffmpeg_binary: str = field(default_factory=get_ffmpeg_path)
    content_resolver: ContentResolver = field(default_factory=lambda: DictContentResolver(CONTENT_INDEX))
    media_scanner: MediaScanner = field(default_factory=LoggingMediaScanner)
    thumbnail_generator: Optional[ThumbnailGenerator] = None

    def __post_init__(self):
        self.external_storage_dir = Path(self.external_storage_dir)
        self.cache_dir = Path(self.cache_dir)
        self.external_cache_dir = Path(self.external_cache_dir)
        if self.thumbnail_generator is None:
            self.thumbnail_generator = FFmpegThumbnailGenerator(self.ffmpeg_binary)

    @property
    def library_dir(self) -> Path:
        """The user-visible folder finished videos are saved to."""
        return self.external_storage_dir / LIBRARY_DIR_NAME / self.app_name
