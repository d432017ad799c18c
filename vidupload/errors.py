"""Closed set of error kinds raised by the upload service."""

from __future__ import annotations


class VideoUploadError(Exception):
    """Base class for all service errors. `status_code` is the HTTP mapping."""

    status_code: int = 500


class ConfigurationError(VideoUploadError):
    """Required configuration is missing or malformed; fatal at startup."""


class BadRequest(VideoUploadError):
    status_code = 400


class MissingFile(BadRequest):
    """The request carried no `video` file part."""


class PayloadTooLarge(VideoUploadError):
    status_code = 413


class StorageWriteError(VideoUploadError):
    """The local blob store could not persist the upload."""


class StorageCleanupError(VideoUploadError):
    """Best-effort removal of a local blob failed. Never fatal to a request."""


class RemoteUploadUnavailable(VideoUploadError):
    """Remote storage credentials are not configured; relay is skipped."""


class RemoteUploadError(VideoUploadError):
    """The remote media host rejected or could not receive the upload."""


class PersistenceError(VideoUploadError):
    """The metadata store could not complete an operation."""


class NotFound(VideoUploadError):
    status_code = 404
