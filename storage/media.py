"""Filesystem storage for uploaded answer recordings."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from config.settings import settings
from interview_session import MediaRef
from services.errors import StorageError

logger = logging.getLogger(__name__)

MEDIA_URL_PREFIX = "/media"
DEFAULT_SUFFIX = ".webm"


class MediaStore:  # Writes one file per interview question under MEDIA_DIR
    def __init__(self, media_dir: Optional[str] = None) -> None:
        self._dir = Path(media_dir or settings.MEDIA_DIR)

    def save(
        self,
        interview_id: str,
        index: int,
        data: bytes,
        *,
        filename: Optional[str] = None,
        mimetype: Optional[str] = None,
    ) -> MediaRef:
        suffix = Path(filename or "").suffix.lower() or DEFAULT_SUFFIX
        name = f"{interview_id}-q{index}{suffix}"
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            (self._dir / name).write_bytes(data)
        except OSError as exc:
            logger.exception("Unable to write media file %s", name)
            raise StorageError() from exc
        return MediaRef(url=f"{MEDIA_URL_PREFIX}/{name}", mimetype=mimetype)

    def path_for(self, media: MediaRef) -> Path:
        return self._dir / Path(media.url).name

    def discard(self, media: MediaRef) -> None:
        self.path_for(media).unlink(missing_ok=True)


__all__ = ["MEDIA_URL_PREFIX", "MediaStore"]
