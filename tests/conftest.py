from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from vidupload.config import AppConfig, CloudinaryConfig, DatabaseConfig, PathsConfig, ServerConfig, UploadConfig
from vidupload.main import create_app
from vidupload.services.blob_store import LocalBlobStore
from vidupload.services.object_storage.base import BaseObjectStorageClient, RemoteUploadResult
from vidupload.storage.database import Database
from vidupload.storage.repositories import MetadataStore


class FakeObjectStorage(BaseObjectStorageClient):
    """In-memory stand-in for a media host; records every call."""

    def __init__(
        self,
        configured: bool = True,
        result: RemoteUploadResult | None = None,
        error: Exception | None = None,
    ) -> None:
        self.configured = configured
        self.result = result or RemoteUploadResult(url="https://media.example.com/videos/clip.mp4")
        self.error = error
        self.calls: list[Path] = []
        self.existed_at_call: list[bool] = []
        self.closed = False

    @property
    def is_configured(self) -> bool:
        return self.configured

    def upload(self, local_path: Path) -> RemoteUploadResult:
        self.calls.append(local_path)
        self.existed_at_call.append(local_path.exists())
        if self.error is not None:
            raise self.error
        return self.result

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def uploads_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def database(tmp_path: Path):
    db = Database(f"sqlite:///{tmp_path / 'videos.db'}")
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def metadata_store(database: Database) -> MetadataStore:
    return MetadataStore(database)


@pytest.fixture
def blob_store(uploads_dir: Path) -> LocalBlobStore:
    return LocalBlobStore(uploads_dir)


def make_config(tmp_path: Path, relay: bool = False, max_upload_mb: int = 100) -> AppConfig:
    paths = PathsConfig()
    paths.data_root = tmp_path
    paths.uploads_dir = tmp_path / "uploads"
    paths.frontend_dir = tmp_path / "frontend"
    return AppConfig(
        paths=paths,
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'app.db'}"),
        cloudinary=CloudinaryConfig(cloud_name=None, api_key=None, api_secret=None, folder="videos", timeout=5),
        upload=UploadConfig(max_upload_mb=max_upload_mb, environment="test", relay_override=relay),
        server=ServerConfig(host="127.0.0.1", port=10000, log_level="WARNING", cors_origins=["*"]),
    )


@pytest.fixture
def make_client(tmp_path: Path):
    """Build a TestClient around a fresh app; extra kwargs go to `make_config`."""
    clients = []

    def _factory(object_storage: BaseObjectStorageClient | None = None, **config_kwargs) -> TestClient:
        config = make_config(tmp_path, **config_kwargs)
        app = create_app(config, object_storage=object_storage or FakeObjectStorage(configured=False))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _factory

    for client in clients:
        client.__exit__(None, None, None)
