"""HTTP routes: upload ingestion, record listing/lookup, health and landing page."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import FileResponse, JSONResponse

from vidupload.api.schemas import HealthResponse, UploadedVideo, UploadResponse, VideoOut
from vidupload.errors import BadRequest, MissingFile, PayloadTooLarge, PersistenceError, StorageWriteError
from vidupload.pipeline import IngestionPipeline
from vidupload.services.blob_store import LocalBlobStore
from vidupload.storage.database import Database
from vidupload.storage.repositories import MetadataStore

_LOGGER = logging.getLogger(__name__)

router = APIRouter()


def get_pipeline(request: Request) -> IngestionPipeline:
    return request.app.state.pipeline


def get_metadata_store(request: Request) -> MetadataStore:
    return request.app.state.metadata_store


@router.get("/")
def index(request: Request):
    index_path = request.app.state.config.paths.frontend_dir / "index.html"
    if index_path.is_file():
        return FileResponse(index_path)
    return {
        "status": "running",
        "message": "Video Upload API is operational",
        "endpoints": {
            "upload": "POST /upload",
            "videos": "GET /videos",
            "video": "GET /videos/{id}",
            "health": "GET /health",
        },
    }


@router.post("/upload", response_model=UploadResponse, response_model_exclude_none=True)
def upload_video(
    video: UploadFile | str | None = File(None),
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    # Runs in FastAPI's threadpool. A plain text `video` field counts as no file.
    try:
        if video is None or isinstance(video, str):
            result = pipeline.ingest(None, None)
        else:
            result = pipeline.ingest(video.file, video.filename)
    except MissingFile as exc:
        return JSONResponse(status_code=exc.status_code, content={"error": "No file uploaded"})
    except BadRequest as exc:
        return JSONResponse(status_code=exc.status_code, content={"error": "Invalid upload", "details": str(exc)})
    except PayloadTooLarge as exc:
        return JSONResponse(status_code=exc.status_code, content={"error": "File too large", "details": str(exc)})
    except (StorageWriteError, PersistenceError) as exc:
        _LOGGER.error("Upload error: %s", exc)
        return JSONResponse(status_code=exc.status_code, content={"error": "Upload failed", "details": str(exc)})

    return UploadResponse(
        video=UploadedVideo(
            id=result.id,
            url=result.url,
            filename=result.filename,
            duration=result.duration,
        )
    )


@router.get("/videos", response_model=list[VideoOut], response_model_exclude_none=True)
def list_videos(store: MetadataStore = Depends(get_metadata_store)):
    return [VideoOut.from_record(record) for record in store.list_recent()]


@router.get("/videos/{video_id}", response_model=VideoOut, response_model_exclude_none=True)
def get_video(video_id: str, store: MetadataStore = Depends(get_metadata_store)):
    return VideoOut.from_record(store.get_by_id(video_id))


@router.get("/health", response_model=HealthResponse)
def health(request: Request):
    database: Database = request.app.state.database
    blob_store: LocalBlobStore = request.app.state.blob_store
    pipeline: IngestionPipeline = request.app.state.pipeline

    db_ok = database.ping()
    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        services={
            "database": "connected" if db_ok else "disconnected",
            "remoteStorage": "configured" if pipeline.remote_configured else "not configured",
            "remoteRelay": "enabled" if pipeline.should_relay() else "disabled",
            "storage": "available" if blob_store.is_available() else "unavailable",
        },
    )
