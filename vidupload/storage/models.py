"""ORM model and immutable record type for uploaded video metadata."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Float, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base class for SQLAlchemy models."""


class Video(Base):
    """One row per successfully ingested upload."""

    __tablename__ = "videos"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    filename: Mapped[str] = mapped_column(String, nullable=False)
    local_path: Mapped[str] = mapped_column(String, nullable=False)
    remote_url: Mapped[Optional[str]] = mapped_column(String)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    duration: Mapped[Optional[float]] = mapped_column(Float)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def to_record(self) -> "VideoRecord":
        return VideoRecord(
            id=self.id,
            filename=self.filename,
            local_path=self.local_path,
            remote_url=self.remote_url,
            size=self.size,
            duration=self.duration,
            uploaded_at=self.uploaded_at,
        )


@dataclass(frozen=True)
class VideoRecord:
    """Immutable view of a stored video. `id`/`uploaded_at` are filled in by the store."""

    filename: str
    local_path: str
    size: int
    remote_url: str | None = None
    duration: float | None = None
    uploaded_at: datetime | None = None
    id: str | None = None

    def __post_init__(self) -> None:
        if not self.local_path:
            raise ValueError("local_path is required")
        if self.duration is not None and self.remote_url is None:
            raise ValueError("duration is only known alongside a remote URL")

    @property
    def url(self) -> str:
        """Preferred serving URL; the remote copy is authoritative."""
        return self.remote_url or self.local_path
