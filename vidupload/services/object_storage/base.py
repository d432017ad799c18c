"""Abstract interfaces for remote object storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict


@dataclass
class RemoteUploadResult:
    """Standardised output for remote storage clients."""

    url: str
    duration_seconds: float | None = None
    public_id: str | None = None
    extra: Dict[str, Any] = field(default_factory=dict)


class BaseObjectStorageClient(ABC):
    """Convenience base class for media hosts the pipeline can relay to."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials are present. Unconfigured clients must not be called."""
        raise NotImplementedError

    @abstractmethod
    def upload(self, local_path: Path) -> RemoteUploadResult:
        """Transmit the file and return its durable URL."""
        raise NotImplementedError

    def close(self) -> None:
        """Release any held network resources."""
