"""Storage of uploaded images and videos.

Files go to Cloudinary when its credentials are configured and to the local
upload directory otherwise. Either way the caller receives a URL clients can
fetch directly.
"""

from __future__ import annotations

import logging
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

import cloudinary
import cloudinary.uploader

from pulse_chat.core.settings import settings
from pulse_chat.services.errors import FileTooLarge, StorageError, UnsupportedMediaType

logger = logging.getLogger(__name__)

_EXTENSION = re.compile(r"^[a-z0-9]{1,10}$")


@dataclass(frozen=True)
class StoredMedia:
    """Description of a stored upload as returned to the client."""

    url: str
    type: str
    size: int
    name: str


class MediaStorage:
    """Interface for upload backends."""

    def store(self, file_name: str, data: bytes, content_type: str, kind: str) -> str:
        """Persist ``data`` under ``file_name`` and return its public URL."""
        raise NotImplementedError


class LocalMediaStorage(MediaStorage):
    """Write uploads below a directory served by the application."""

    def __init__(self, directory: str | Path, url_prefix: str) -> None:
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    def store(self, file_name: str, data: bytes, content_type: str, kind: str) -> str:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / file_name).write_bytes(data)
        except OSError as exc:
            logger.error("Failed to write upload %s: %s", file_name, exc)
            raise StorageError() from exc
        return f"{self.url_prefix}/{file_name}"


class CloudinaryMediaStorage(MediaStorage):
    """Upload files to Cloudinary and return their secure URL."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str) -> None:
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self.folder = folder

    def store(self, file_name: str, data: bytes, content_type: str, kind: str) -> str:
        public_id = file_name.rsplit(".", 1)[0]
        try:
            result = cloudinary.uploader.upload(
                data,
                folder=self.folder,
                public_id=public_id,
                resource_type=kind,
                overwrite=False,
            )
        except Exception as exc:
            logger.error("Cloudinary upload failed for %s: %s", file_name, exc)
            raise StorageError() from exc
        url = result.get("secure_url") or result.get("url")
        if not url:
            raise StorageError()
        return str(url)


def get_media_storage() -> MediaStorage:
    """Return the storage backend selected by configuration."""
    if settings.cloudinary_enabled:
        return CloudinaryMediaStorage(
            settings.cloudinary_cloud_name or "",
            settings.cloudinary_api_key or "",
            settings.cloudinary_api_secret or "",
            settings.cloudinary_folder,
        )
    return LocalMediaStorage(settings.upload_dir, settings.upload_url_prefix)


def media_kind(content_type: str | None) -> str | None:
    """Map a MIME type to ``"image"`` or ``"video"``, or None if unsupported."""
    value = (content_type or "").lower().strip()
    if value.startswith("image/"):
        return "image"
    if value.startswith("video/"):
        return "video"
    return None


def build_file_name(original_name: str | None, now_ms: int | None = None) -> str:
    """Return ``{epoch_ms}-{random}.{ext}`` keeping the original extension."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    name = original_name or ""
    extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if not _EXTENSION.match(extension):
        extension = "bin"
    return f"{stamp}-{secrets.token_hex(6)}.{extension}"


def check_upload_size(size: int) -> None:
    """Raise FileTooLarge if ``size`` bytes exceed ``MAX_UPLOAD_MB``."""
    if size > settings.max_upload_bytes:
        raise FileTooLarge(f"File is too large. Maximum size: {settings.max_upload_mb}MB")


def save_upload(
    original_name: str | None,
    content_type: str | None,
    data: bytes,
    storage: MediaStorage | None = None,
) -> StoredMedia:
    """Validate and store an uploaded file.

    Raises:
        UnsupportedMediaType: If the file is neither an image nor a video.
        FileTooLarge: If the file exceeds ``MAX_UPLOAD_MB``.
        StorageError: If the backend fails.
    """
    kind = media_kind(content_type)
    if kind is None:
        raise UnsupportedMediaType()
    check_upload_size(len(data))

    file_name = build_file_name(original_name)
    url = (storage or get_media_storage()).store(file_name, data, content_type or "", kind)
    logger.info("Stored %s upload %s (%d bytes)", kind, file_name, len(data))
    return StoredMedia(url=url, type=kind, size=len(data), name=original_name or file_name)
