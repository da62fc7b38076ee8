"""Bucket-style object storage on top of a Django storage backend.

A bucket is a top-level directory of the backend. Objects are written with
replace-if-exists semantics so re-running a sync after editing an asset
overwrites the previous copy instead of creating a suffixed duplicate.
"""

from __future__ import annotations

import logging

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)


class ObjectStorageError(Exception):
    pass


class ObjectStorage:
    def __init__(self, storage=None):
        self.storage = storage or default_storage

    @staticmethod
    def object_name(bucket: str, path: str) -> str:
        bucket = (bucket or "").strip("/")
        path = (path or "").lstrip("/")
        if not bucket or not path:
            raise ObjectStorageError("Bucket and path are required.")
        return f"{bucket}/{path}"

    def list_buckets(self) -> list[str]:
        try:
            directories, _files = self.storage.listdir("")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise ObjectStorageError(f"Could not list buckets: {exc}") from exc
        return sorted(directories)

    def put_object(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        name = self.object_name(bucket, path)
        content = ContentFile(data)
        # Remote backends (e.g. S3-compatible) pick the type up from the file object.
        content.content_type = content_type
        previous = None
        try:
            if self.storage.exists(name):
                with self.storage.open(name, "rb") as fh:
                    previous = fh.read()
                self.storage.delete(name)
            saved = self.storage.save(name, content)
        except OSError as exc:
            if previous is not None:
                self._restore(name, previous)
            raise ObjectStorageError(f"Could not write {name}: {exc}") from exc
        if saved != name:
            logger.warning("object_storage_renamed requested=%s saved=%s", name, saved)
        return saved

    def _restore(self, name: str, data: bytes) -> None:
        """Put the previous object back after a failed replace."""
        try:
            if not self.storage.exists(name):
                self.storage.save(name, ContentFile(data))
        except OSError as exc:
            logger.error("object_storage_previous_lost name=%s error=%s", name, exc)
            return
        logger.warning("object_storage_restored name=%s", name)

    def get_public_url(self, bucket: str, path: str) -> str:
        return self.storage.url(self.object_name(bucket, path))
