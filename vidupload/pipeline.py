"""Ingestion pipeline turning one uploaded file into a persisted video record."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO

from vidupload.errors import (
    MissingFile,
    PersistenceError,
    RemoteUploadError,
    RemoteUploadUnavailable,
    StorageCleanupError,
)
from vidupload.services.blob_store import LocalBlobStore, StoredBlob
from vidupload.services.object_storage.base import BaseObjectStorageClient, RemoteUploadResult
from vidupload.storage.models import VideoRecord
from vidupload.storage.repositories import MetadataStore

_LOGGER = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    id: str
    url: str
    filename: str
    duration: float | None = None
    relayed: bool = False


class IngestionPipeline:
    """Receive -> local persist -> optional remote relay -> metadata persist -> respond."""

    def __init__(
        self,
        blob_store: LocalBlobStore,
        metadata_store: MetadataStore,
        object_storage: BaseObjectStorageClient | None = None,
        relay_enabled: bool = False,
    ) -> None:
        self._blob_store = blob_store
        self._metadata = metadata_store
        self._object_storage = object_storage
        self._relay_enabled = relay_enabled

    @property
    def remote_configured(self) -> bool:
        return self._object_storage is not None and self._object_storage.is_configured

    def should_relay(self) -> bool:
        return self.remote_configured and self._relay_enabled

    def ingest(self, stream: BinaryIO | None, filename: str | None) -> IngestionResult:
        """Run every step for one upload.

        Local-write and metadata failures propagate; a failed relay downgrades
        the request to local storage only.
        """
        if stream is None or not filename:
            raise MissingFile("no file uploaded")

        relay = self.should_relay()
        blob = self._blob_store.save(stream, filename)

        remote = self._relay(blob) if relay else None

        record = VideoRecord(
            filename=filename,
            local_path=blob.public_path,
            size=blob.size_bytes,
            remote_url=remote.url if remote else None,
            duration=remote.duration_seconds if remote else None,
        )
        try:
            video_id = self._metadata.insert(record)
        except PersistenceError:
            if remote is not None:
                # No compensating delete: the remote copy is orphaned.
                _LOGGER.error("Metadata save failed; remote blob orphaned at %s", remote.url)
            raise

        return IngestionResult(
            id=video_id,
            url=record.url,
            filename=record.filename,
            duration=record.duration,
            relayed=remote is not None,
        )

    def _relay(self, blob: StoredBlob) -> RemoteUploadResult | None:
        try:
            remote = self._object_storage.upload(blob.path)
        except RemoteUploadUnavailable:
            _LOGGER.info("Remote storage unavailable; keeping %s locally", blob.stored_name)
            return None
        except RemoteUploadError as exc:
            _LOGGER.warning("Remote relay failed for %s, serving locally: %s", blob.stored_name, exc)
            return None

        try:
            self._blob_store.remove(blob.stored_name)
        except StorageCleanupError as exc:
            _LOGGER.warning("Local cleanup after relay failed: %s", exc)
        return remote
