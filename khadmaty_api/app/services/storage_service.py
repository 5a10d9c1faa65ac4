"""
Object storage for uploaded images.

Files are written below ``settings.media_root`` inside the
``service-images`` bucket and exposed under ``settings.media_url`` by
the static files mount in ``main``.  Only JPEG, PNG, GIF and WebP
uploads are accepted; the stored extension always comes from the
content type, never from the client's filename.  Each upload kind has
its own size limit.
"""

import logging
import os
import time
from pathlib import Path
from typing import Optional

from khadmaty_api.app.core.config import settings
from khadmaty_api.app.core.errors import InvalidInputError


BUCKET = "service-images"

ALLOWED_MIME = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


def get_media_root() -> Path:
    """Resolve ``settings.media_root``, relative paths against the package root."""
    root = Path(settings.media_root)
    if not root.is_absolute():
        root = Path(__file__).resolve().parent.parent.parent / root
    return root


class StorageService:
    """Store uploaded images and build their public URLs."""

    @classmethod
    def save_image(
        cls,
        content: bytes,
        content_type: Optional[str],
        folder: str,
        name_prefix: str = "",
        max_bytes: int = 0,
        too_large_key: str = "image_too_large",
    ) -> str:
        """Validate and persist an image, returning its public URL.

        The object key is ``<folder>/<name_prefix><epoch ms>.<ext>``
        inside the bucket.
        """
        mime = (content_type or "").split(";", 1)[0].strip().lower()
        if mime not in ALLOWED_MIME or not content:
            raise InvalidInputError("invalid_image")
        if max_bytes and len(content) > max_bytes:
            raise InvalidInputError(too_large_key)
        key = f"{folder}/{name_prefix}{int(time.time() * 1000)}.{ALLOWED_MIME[mime]}"
        path = get_media_root() / BUCKET / key
        os.makedirs(path.parent, exist_ok=True)
        path.write_bytes(content)
        logging.getLogger(__name__).info("Stored %s (%d bytes)", key, len(content))
        return cls.public_url(key)

    @classmethod
    def public_url(cls, key: str) -> str:
        return f"{settings.media_url.rstrip('/')}/{BUCKET}/{key}"
