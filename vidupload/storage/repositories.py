"""Repository helpers for database persistence."""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vidupload.errors import NotFound, PersistenceError
from vidupload.storage import models
from vidupload.storage.database import Database

_LOGGER = logging.getLogger(__name__)


class VideoRepository:
    """Query helpers for `Video` rows within an open session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, record: models.VideoRecord) -> models.Video:
        video = models.Video(
            filename=record.filename,
            local_path=record.local_path,
            remote_url=record.remote_url,
            size=record.size,
            duration=record.duration,
        )
        if record.uploaded_at is not None:
            video.uploaded_at = record.uploaded_at
        self._session.add(video)
        self._session.flush()
        return video

    def get(self, video_id: str) -> models.Video | None:
        stmt: Select = select(models.Video).where(models.Video.id == video_id)
        return self._session.execute(stmt).scalars().first()

    def list_recent(self) -> list[models.Video]:
        stmt: Select = select(models.Video).order_by(models.Video.uploaded_at.desc())
        return list(self._session.execute(stmt).scalars().all())


class MetadataStore:
    """Insert, list and fetch video records; every database failure surfaces as PersistenceError."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def insert(self, record: models.VideoRecord) -> str:
        try:
            with self._database.session() as session:
                video = VideoRepository(session).create(record)
                video_id = video.id
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not save video metadata: {exc}") from exc
        _LOGGER.info("Saved video record %s for %s", video_id, record.filename)
        return video_id

    def list_recent(self) -> List[models.VideoRecord]:
        try:
            with self._database.session() as session:
                return [video.to_record() for video in VideoRepository(session).list_recent()]
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not list videos: {exc}") from exc

    def get_by_id(self, video_id: str) -> models.VideoRecord:
        try:
            with self._database.session() as session:
                video = VideoRepository(session).get(video_id)
                record = video.to_record() if video is not None else None
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not load video {video_id}: {exc}") from exc
        if record is None:
            raise NotFound(f"Video {video_id} not found")
        return record
