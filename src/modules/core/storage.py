"""Blob storage adapter for uploaded documents.

Wraps Django's configured default storage so services depend on three
operations only: ``save``, ``url`` and ``delete``.  File ids are the
storage names returned by the backend.
"""

from __future__ import annotations

import os

import structlog
import uuid6
from django.core.files.storage import Storage, default_storage
from django.core.files.uploadedfile import UploadedFile

logger = structlog.get_logger(__name__)


class BlobStorage:
    def __init__(self, storage: Storage | None = None, prefix: str = "uploads") -> None:
        self._storage = storage or default_storage
        self._prefix = prefix

    def save(self, file: UploadedFile) -> str:
        """Store *file* under a collision-free name and return its file id."""
        _, extension = os.path.splitext(file.name or "")
        name = f"{self._prefix}/{uuid6.uuid7()}{extension.lower()}"
        file_id = self._storage.save(name, file)
        logger.info("storage.saved", file_id=file_id, size=file.size)
        return file_id

    def url(self, file_id: str) -> str | None:
        if not file_id or not self._storage.exists(file_id):
            return None
        return self._storage.url(file_id)

    def delete(self, file_id: str) -> None:
        if file_id and self._storage.exists(file_id):
            self._storage.delete(file_id)
            logger.info("storage.deleted", file_id=file_id)
