"""Cloudinary video upload client built on the official SDK."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import cloudinary.exceptions
import cloudinary.uploader

from vidupload.errors import RemoteUploadError, RemoteUploadUnavailable
from .base import BaseObjectStorageClient, RemoteUploadResult

_LOGGER = logging.getLogger(__name__)


class CloudinaryClient(BaseObjectStorageClient):
    """Signed uploads of video files to a Cloudinary account.

    Credentials travel with each call instead of through `cloudinary.config()`,
    so several clients can coexist in one process.
    """

    def __init__(
        self,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        folder: str = "videos",
        timeout: int = 300,
    ) -> None:
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._folder = folder
        self._timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self._cloud_name and self._api_key and self._api_secret)

    def upload(self, local_path: Path) -> RemoteUploadResult:
        """Upload the file as a video resource and return its secure URL and duration."""
        if not self.is_configured:
            raise RemoteUploadUnavailable("Cloudinary credentials are not configured")

        options: dict[str, Any] = {
            "resource_type": "video",
            "cloud_name": self._cloud_name,
            "api_key": self._api_key,
            "api_secret": self._api_secret,
            "timeout": self._timeout,
        }
        if self._folder:
            options["folder"] = self._folder

        _LOGGER.info("Relaying %s to Cloudinary", local_path.name)
        try:
            data = cloudinary.uploader.upload(str(local_path), **options)
        except (cloudinary.exceptions.Error, OSError) as exc:
            raise RemoteUploadError(f"Cloudinary upload failed: {exc}") from exc

        if not isinstance(data, dict):
            raise RemoteUploadError("Cloudinary returned an unexpected payload")

        secure_url = data.get("secure_url") or data.get("url")
        if not secure_url:
            raise RemoteUploadError("Cloudinary response did not include a URL")

        return RemoteUploadResult(
            url=secure_url,
            duration_seconds=self._safe_float(data.get("duration")),
            public_id=data.get("public_id"),
            extra={"bytes": data.get("bytes"), "format": data.get("format")},
        )

    @staticmethod
    def _safe_float(value: Any) -> float | None:
        try:
            return float(value) if value is not None else None
        except (TypeError, ValueError):
            return None
