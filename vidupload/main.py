"""Application factory and process entry point."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.staticfiles import StaticFiles

from vidupload.api.routes import router
from vidupload.config import AppConfig, load_config
from vidupload.errors import ConfigurationError, NotFound, PersistenceError
from vidupload.pipeline import IngestionPipeline
from vidupload.services.blob_store import LocalBlobStore
from vidupload.services.object_storage.base import BaseObjectStorageClient
from vidupload.services.object_storage.cloudinary import CloudinaryClient
from vidupload.storage.database import Database
from vidupload.storage.repositories import MetadataStore
from vidupload.utils.logger import configure_logging

_LOGGER = logging.getLogger(__name__)


def create_app(
    config: AppConfig | None = None,
    object_storage: BaseObjectStorageClient | None = None,
) -> FastAPI:
    """Build every collaborator once and wire them into a FastAPI app."""
    config = config or load_config()
    config.initialise()
    configure_logging(config.server.log_level)

    database = Database(config.database.url, echo=config.database.echo)
    database.init_db()
    metadata_store = MetadataStore(database)
    blob_store = LocalBlobStore(config.paths.uploads_dir, max_bytes=config.upload.max_upload_bytes)
    if object_storage is None:
        object_storage = CloudinaryClient(
            cloud_name=config.cloudinary.cloud_name,
            api_key=config.cloudinary.api_key,
            api_secret=config.cloudinary.api_secret,
            folder=config.cloudinary.folder,
            timeout=config.cloudinary.timeout,
        )
    pipeline = IngestionPipeline(
        blob_store=blob_store,
        metadata_store=metadata_store,
        object_storage=object_storage,
        relay_enabled=config.upload.relay_enabled,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        object_storage.close()
        database.dispose()

    app = FastAPI(title="Video Upload Service", version="1.0.0", lifespan=lifespan)
    app.state.config = config
    app.state.database = database
    app.state.metadata_store = metadata_store
    app.state.blob_store = blob_store
    app.state.object_storage = object_storage
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return JSONResponse(status_code=exc.status_code, content={"error": "Video not found"})

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError):
        _LOGGER.error("Persistence error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    app.mount("/uploads", StaticFiles(directory=config.paths.uploads_dir), name="uploads")
    if config.paths.frontend_dir.is_dir():
        app.mount("/assets", StaticFiles(directory=config.paths.frontend_dir), name="assets")
        _LOGGER.info("Serving frontend from: %s", config.paths.frontend_dir)
    else:
        _LOGGER.warning("Frontend not found at: %s", config.paths.frontend_dir)

    app.include_router(router)

    _LOGGER.info(
        "Video upload service ready | port=%s storage=%s mode=%s remote=%s relay=%s",
        config.server.port,
        config.paths.uploads_dir,
        config.upload.environment,
        "configured" if pipeline.remote_configured else "not configured",
        "on" if pipeline.should_relay() else "off",
    )
    return app


def run() -> None:
    """Console entry point: load configuration and serve with uvicorn."""
    try:
        config = load_config()
        app = create_app(config)
    except (ConfigurationError, SQLAlchemyError) as exc:
        configure_logging().error("Failed to start server: %s", exc)
        sys.exit(1)

    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    run()
