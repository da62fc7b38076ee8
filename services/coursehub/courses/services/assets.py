"""Course asset uploads with a per-run de-duplication cache."""

from __future__ import annotations

import logging
from pathlib import Path

from .object_storage import ObjectStorage

logger = logging.getLogger(__name__)

GENERIC_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".gz": "application/gzip",
    ".tar": "application/x-tar",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".json": "application/json",
}


def content_type_for(path) -> str:
    return CONTENT_TYPES.get(Path(str(path)).suffix.lower(), GENERIC_CONTENT_TYPE)


class AssetUploader:
    """Upload local files into one bucket and hand back their public URLs.

    The cache is keyed by storage path and lives as long as the uploader, i.e.
    one sync run. Failures are logged and reported as `None`; nothing raises
    past `upload`.
    """

    def __init__(self, bucket: str, storage: ObjectStorage | None = None):
        self.bucket = bucket
        self.storage = storage or ObjectStorage()
        self._urls: dict[str, str] = {}

    @property
    def uploaded_count(self) -> int:
        return len(self._urls)

    def upload(self, local_path, storage_path: str) -> str | None:
        cached = self._urls.get(storage_path)
        if cached is not None:
            return cached

        local_path = Path(local_path)
        if not local_path.is_file():
            logger.warning("asset_missing path=%s", local_path)
            return None

        try:
            data = local_path.read_bytes()
            self.storage.put_object(self.bucket, storage_path, data, content_type_for(local_path))
            public_url = self.storage.get_public_url(self.bucket, storage_path)
        except Exception as exc:
            logger.error("asset_upload_failed path=%s error=%s", storage_path, exc)
            return None

        self._urls[storage_path] = public_url
        logger.info("asset_uploaded path=%s", storage_path)
        return public_url
