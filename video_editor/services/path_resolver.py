"""
Resolution of caller-supplied locators to readable local files.

A locator is one of:

- a plain filesystem path (`/sdcard/DCIM/clip.mp4`);
- a `file:` URI, possibly carrying a query string (`file:///sdcard/clip.mp4?t=1`);
- a `content:` reference owned by a storage provider, which has to be looked up
  through the host's ContentResolver.

Locators are URL-decoded before anything else. Content references are classified
once into a `ProviderKind` and handed to the lookup routine for that kind.
"""
import os
import re
from enum import Enum
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import unquote_plus, urlsplit

from loguru import logger

from ..domain.exceptions import InputNotFound, InputUnreadable, InvalidLocator
from .host_environment import ContentResolver

# A '%' not followed by two hex digits.
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

EXTERNAL_STORAGE_AUTHORITY = "com.android.externalstorage.documents"
DOWNLOADS_AUTHORITY = "com.android.providers.downloads.documents"
MEDIA_AUTHORITY = "com.android.providers.media.documents"

PUBLIC_DOWNLOADS_URI = "content://downloads/public_downloads"
MEDIA_COLLECTION_URIS = {
    "image": "content://media/external/images/media",
    "video": "content://media/external/video/media",
    "audio": "content://media/external/audio/media",
}


class LocatorKind(Enum):
    PLAIN_PATH = "plain_path"
    FILE_URI = "file_uri"
    CONTENT = "content"


class ProviderKind(Enum):
    """Storage provider behind a content reference, keyed by URI authority."""

    EXTERNAL_STORAGE = EXTERNAL_STORAGE_AUTHORITY
    DOWNLOADS = DOWNLOADS_AUTHORITY
    MEDIA = MEDIA_AUTHORITY
    GENERIC = ""

    @classmethod
    def from_authority(cls, authority: str) -> "ProviderKind":
        for kind in cls:
            if kind.value and kind.value == authority:
                return kind
        return cls.GENERIC


def decode_locator(locator: str) -> str:
    """
    URL-decodes a locator with form semantics ('+' is a space).

    Raises:
        InvalidLocator: On malformed percent-escapes or bytes that are not UTF-8.
    """
    if _MALFORMED_ESCAPE.search(locator):
        raise InvalidLocator(f"Malformed escape sequence in locator: {locator}")
    try:
        return unquote_plus(locator, encoding="utf-8", errors="strict")
    except UnicodeDecodeError as e:
        raise InvalidLocator(f"Locator is not valid UTF-8: {locator}") from e


def classify_locator(decoded: str) -> LocatorKind:
    lowered = decoded.lower()
    if lowered.startswith("content:"):
        return LocatorKind.CONTENT
    if lowered.startswith("file:"):
        return LocatorKind.FILE_URI
    scheme = urlsplit(decoded).scheme
    # Single letters are Windows drive letters, not schemes.
    if len(scheme) > 1:
        raise InvalidLocator(f"Unsupported locator scheme '{scheme}': {decoded}")
    return LocatorKind.PLAIN_PATH


def document_id(path: str) -> Optional[str]:
    """
    Extracts the document id from a document-provider URI path.

    Supports `/document/<id>` and `/tree/<tree id>/document/<id>`. Returns None
    for paths that are not document paths.
    """
    parts = path.strip("/").split("/")
    if len(parts) >= 2 and parts[0] == "document":
        return "/".join(parts[1:])
    if len(parts) >= 4 and parts[0] == "tree" and parts[2] == "document":
        return "/".join(parts[3:])
    return None


class PathResolver:
    """
    Resolves locators to readable local files.

    Args:
        content_resolver: Host lookup service for `content:` references.
        external_storage_dir: Root of the primary shared storage volume.
    """

    def __init__(self, content_resolver: ContentResolver, external_storage_dir: Path):
        self.content_resolver = content_resolver
        self.external_storage_dir = Path(external_storage_dir)
        self._provider_lookups: dict[ProviderKind, Callable[[str, str], Optional[str]]] = {
            ProviderKind.EXTERNAL_STORAGE: self._lookup_external_storage,
            ProviderKind.DOWNLOADS: self._lookup_download,
            ProviderKind.MEDIA: self._lookup_media,
            ProviderKind.GENERIC: self._lookup_generic,
        }

    def resolve(self, locator: str) -> Path:
        """
        Resolves `locator` to an existing, readable file.

        Raises:
            InvalidLocator: If the locator cannot be decoded or interpreted.
            InputNotFound: If nothing exists at the resolved location.
            InputUnreadable: If the file exists but is not readable.
        """
        if not locator:
            raise InvalidLocator("Locator is empty")

        decoded = decode_locator(locator)
        kind = classify_locator(decoded)

        if kind is LocatorKind.CONTENT:
            path = Path(self._resolve_content(decoded))
        elif kind is LocatorKind.FILE_URI:
            path = self._resolve_file_uri(decoded)
        else:
            path = Path(decoded)

        logger.debug(f"Resolved locator '{locator}' ({kind.value}) to {path}")

        if not path.is_file():
            logger.debug(f"input file does not exist: {path}")
            raise InputNotFound("input video does not exist.")
        if not os.access(path, os.R_OK):
            raise InputUnreadable(f"input video is not readable: {path}")
        return path.resolve()

    @staticmethod
    def _resolve_file_uri(decoded: str) -> Path:
        """
        Extracts the local path from an already decoded `file:` URI.

        Only the `?query` suffix is dropped. A '#' belongs to the file name,
        since any escaped '#' has been decoded by now.
        """
        rest = decoded[len("file:"):]
        host = ""
        if rest.startswith("//"):
            host, slash, rest = rest[2:].partition("/")
            rest = slash + rest
        if host.lower() not in ("", "localhost"):
            raise InvalidLocator(f"File locator points at a remote host '{host}': {decoded}")

        path = rest.split("?", 1)[0]
        if not path:
            raise InvalidLocator(f"File locator has no path: {decoded}")
        return Path(path)

    def _resolve_content(self, decoded: str) -> str:
        parts = urlsplit(decoded)
        provider = ProviderKind.from_authority(parts.netloc)
        doc_id = document_id(parts.path) if provider is not ProviderKind.GENERIC else None
        if doc_id is None:
            provider = ProviderKind.GENERIC

        resolved = self._provider_lookups[provider](decoded, doc_id or "")
        if not resolved:
            raise InvalidLocator(f"Content locator could not be resolved to a file ({provider.name}): {decoded}")
        return resolved

    def _lookup_external_storage(self, decoded: str, doc_id: str) -> Optional[str]:
        volume, _, relative = doc_id.partition(":")
        if volume.lower() == "primary":
            return str(self.external_storage_dir / relative)
        # TODO: resolve secondary volumes (SD cards) once the host exposes their mount points.
        logger.warning(f"Unsupported storage volume '{volume}' in {decoded}")
        return None

    def _lookup_download(self, decoded: str, doc_id: str) -> Optional[str]:
        if not doc_id.isdigit():
            raise InvalidLocator(f"Download id is not numeric: {doc_id}")
        return self.content_resolver.query_data_column(f"{PUBLIC_DOWNLOADS_URI}/{int(doc_id)}")

    def _lookup_media(self, decoded: str, doc_id: str) -> Optional[str]:
        media_type, _, media_id = doc_id.partition(":")
        collection = MEDIA_COLLECTION_URIS.get(media_type)
        if collection is None:
            logger.warning(f"Unknown media type '{media_type}' in {decoded}")
            return None
        return self.content_resolver.query_data_column(collection, "_id=?", [media_id])

    def _lookup_generic(self, decoded: str, doc_id: str) -> Optional[str]:
        return self.content_resolver.query_data_column(decoded)
