"""Pydantic response bodies for the HTTP API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from vidupload.storage.models import VideoRecord


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VideoOut(CamelModel):
    id: str
    filename: str
    local_path: str
    remote_url: str | None = None
    size: int
    duration: float | None = None
    uploaded_at: datetime

    @classmethod
    def from_record(cls, record: VideoRecord) -> VideoOut:
        return cls(
            id=record.id,
            filename=record.filename,
            local_path=record.local_path,
            remote_url=record.remote_url,
            size=record.size,
            duration=record.duration,
            uploaded_at=record.uploaded_at,
        )


class UploadedVideo(BaseModel):
    id: str
    url: str
    filename: str
    duration: float | None = None


class UploadResponse(BaseModel):
    status: str = "success"
    video: UploadedVideo


class HealthResponse(BaseModel):
    status: str
    services: dict[str, str]
