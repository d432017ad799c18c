"""
Runtime configuration objects for the video upload service.
These helpers centralise environment-derived settings (paths, database, remote storage, flags).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from vidupload.errors import ConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_flag(name: str) -> bool | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {value!r}")


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


@dataclass
class PathsConfig:
    """Centralised filesystem locations."""

    project_root: Path = field(default_factory=lambda: Path(__file__).resolve().parents[1])
    data_root: Path = field(init=False)
    uploads_dir: Path = field(init=False)
    frontend_dir: Path = field(init=False)

    def __post_init__(self) -> None:
        data_root_env = os.getenv("VIDUP_DATA_ROOT")
        self.data_root = Path(data_root_env) if data_root_env else self.project_root / "data"
        uploads_env = os.getenv("VIDUP_UPLOADS_DIR")
        self.uploads_dir = Path(uploads_env) if uploads_env else self.data_root / "uploads"
        frontend_env = os.getenv("VIDUP_FRONTEND_DIR")
        self.frontend_dir = Path(frontend_env) if frontend_env else self.project_root / "frontend"

    def ensure(self) -> None:
        """Create required directories if they are missing."""
        self.uploads_dir.mkdir(parents=True, exist_ok=True)


@dataclass
class DatabaseConfig:
    """Settings for video metadata persistence."""

    url: str | None = field(default_factory=lambda: os.getenv("VIDUP_DATABASE_URL"))
    echo: bool = False


@dataclass
class CloudinaryConfig:
    """Credentials for the remote media host. All three secrets are needed to relay."""

    cloud_name: str | None = field(default_factory=lambda: os.getenv("CLOUDINARY_NAME"))
    api_key: str | None = field(default_factory=lambda: os.getenv("CLOUDINARY_KEY"))
    api_secret: str | None = field(default_factory=lambda: os.getenv("CLOUDINARY_SECRET"))
    folder: str = field(default_factory=lambda: os.getenv("CLOUDINARY_FOLDER", "videos"))
    timeout: int = field(default_factory=lambda: _env_int("VIDUP_REMOTE_TIMEOUT", 300))

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


@dataclass
class UploadConfig:
    """Limits and relay behaviour for the ingestion pipeline."""

    max_upload_mb: int = field(default_factory=lambda: _env_int("VIDUP_MAX_UPLOAD_MB", 100))
    environment: str = field(default_factory=lambda: os.getenv("VIDUP_ENV", "development"))
    relay_override: bool | None = field(default_factory=lambda: _env_flag("VIDUP_REMOTE_RELAY"))

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def relay_enabled(self) -> bool:
        """Relay mode: explicit override wins, otherwise only production relays."""
        if self.relay_override is not None:
            return self.relay_override
        return self.environment.strip().lower() == "production"


@dataclass
class ServerConfig:
    host: str = field(default_factory=lambda: os.getenv("VIDUP_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 10000))
    log_level: str = field(default_factory=lambda: os.getenv("VIDUP_LOG_LEVEL", "INFO"))
    cors_origins: list[str] = field(default_factory=lambda: _env_list("VIDUP_CORS_ORIGINS", ["*"]))


@dataclass
class AppConfig:
    """Aggregate configuration accessor."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    cloudinary: CloudinaryConfig = field(default_factory=CloudinaryConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def validate(self) -> None:
        """Validate that all required configuration is present."""
        if not self.database.url:
            raise ConfigurationError(
                "Missing required environment variable: VIDUP_DATABASE_URL (database connection string)"
            )
        if self.upload.max_upload_mb <= 0:
            raise ConfigurationError("VIDUP_MAX_UPLOAD_MB must be positive")

    def initialise(self) -> None:
        """Perform bootstrap steps such as ensuring directories."""
        self.validate()
        self.paths.ensure()


def load_config(env_file: str | os.PathLike[str] | None = None) -> AppConfig:
    """Factory returning the configured AppConfig instance, reading `.env` first."""
    load_dotenv(env_file)
    config = AppConfig()
    config.initialise()
    return config
