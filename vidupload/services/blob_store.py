"""Local filesystem store for incoming upload bytes."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from vidupload.errors import BadRequest, PayloadTooLarge, StorageCleanupError, StorageWriteError
from vidupload.utils.filesystem import discard_partial, safe_basename

_LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
DEFAULT_MAX_BYTES = 100 * 1024 * 1024


@dataclass(frozen=True)
class StoredBlob:
    """Result of a successful local write."""

    stored_name: str
    public_path: str
    size_bytes: int
    path: Path


class LocalBlobStore:
    """Write uploads into a directory served under a public URL prefix."""

    def __init__(
        self,
        uploads_dir: Path,
        public_prefix: str = "/uploads",
        max_bytes: int = DEFAULT_MAX_BYTES,
    ) -> None:
        self._uploads_dir = uploads_dir
        self._public_prefix = public_prefix.rstrip("/")
        self._max_bytes = max_bytes

    def save(self, stream: BinaryIO, original_name: str) -> StoredBlob:
        """Stream the upload to `<millis>-<original name>` and return where it landed."""
        basename = safe_basename(original_name)
        if not basename:
            raise BadRequest(f"Unusable filename: {original_name!r}")

        try:
            self._uploads_dir.mkdir(parents=True, exist_ok=True)
            stored_name, handle = self._open_unique(basename)
        except OSError as exc:
            raise StorageWriteError(f"Cannot create file in {self._uploads_dir}: {exc}") from exc

        path = self._uploads_dir / stored_name
        written = 0
        try:
            with handle:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self._max_bytes:
                        raise PayloadTooLarge(
                            f"Upload exceeds the {self._max_bytes // (1024 * 1024)} MiB limit"
                        )
                    handle.write(chunk)
        except PayloadTooLarge:
            discard_partial(path)
            raise
        except OSError as exc:
            discard_partial(path)
            raise StorageWriteError(f"Failed writing {stored_name}: {exc}") from exc

        _LOGGER.info("Stored upload %s (%d bytes)", stored_name, written)
        return StoredBlob(
            stored_name=stored_name,
            public_path=f"{self._public_prefix}/{stored_name}",
            size_bytes=written,
            path=path,
        )

    def remove(self, stored_name: str) -> bool:
        """Delete a previously saved file. Returns False if it was already gone."""
        path = self._uploads_dir / safe_basename(stored_name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageCleanupError(f"Could not remove {stored_name}: {exc}") from exc
        _LOGGER.debug("Removed local upload %s", stored_name)
        return True

    def is_available(self) -> bool:
        return self._uploads_dir.is_dir()

    def _open_unique(self, basename: str) -> tuple[str, BinaryIO]:
        prefix = int(time.time() * 1000)
        while True:
            stored_name = f"{prefix}-{basename}"
            try:
                return stored_name, (self._uploads_dir / stored_name).open("xb")
            except FileExistsError:
                prefix += 1
