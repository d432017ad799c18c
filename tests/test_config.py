from pathlib import Path

import pytest

from vidupload.config import AppConfig, DatabaseConfig, ServerConfig, UploadConfig, load_config
from vidupload.errors import ConfigurationError


def test_missing_database_url_is_fatal(monkeypatch):
    monkeypatch.delenv("VIDUP_DATABASE_URL", raising=False)
    config = AppConfig(database=DatabaseConfig())
    with pytest.raises(ConfigurationError, match="VIDUP_DATABASE_URL"):
        config.validate()


@pytest.mark.parametrize(
    "environment, override, expected",
    [
        ("production", None, True),
        ("Production", None, True),
        ("development", None, False),
        ("development", True, True),
        ("production", False, False),
    ],
)
def test_relay_mode(environment, override, expected):
    upload = UploadConfig(max_upload_mb=100, environment=environment, relay_override=override)
    assert upload.relay_enabled is expected


def test_relay_flag_must_be_boolean(monkeypatch):
    monkeypatch.setenv("VIDUP_REMOTE_RELAY", "sometimes")
    with pytest.raises(ConfigurationError):
        UploadConfig()


def test_defaults(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("VIDUP_MAX_UPLOAD_MB", raising=False)
    assert ServerConfig().port == 10000
    assert UploadConfig().max_upload_bytes == 100 * 1024 * 1024


def test_load_config_reads_environment(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("VIDUP_DATABASE_URL", f"sqlite:///{tmp_path / 'x.db'}")
    monkeypatch.setenv("VIDUP_DATA_ROOT", str(tmp_path))
    monkeypatch.delenv("VIDUP_UPLOADS_DIR", raising=False)
    monkeypatch.setenv("PORT", "8080")

    config = load_config(env_file=tmp_path / "absent.env")

    assert config.server.port == 8080
    assert config.paths.uploads_dir == tmp_path / "uploads"
    assert config.paths.uploads_dir.is_dir()


def test_cloudinary_needs_all_credentials(monkeypatch):
    monkeypatch.setenv("CLOUDINARY_NAME", "demo")
    monkeypatch.delenv("CLOUDINARY_KEY", raising=False)
    monkeypatch.setenv("CLOUDINARY_SECRET", "secret")
    assert AppConfig().cloudinary.is_configured is False

    monkeypatch.setenv("CLOUDINARY_KEY", "123")
    assert AppConfig().cloudinary.is_configured is True


def test_cors_origins(monkeypatch):
    monkeypatch.delenv("VIDUP_CORS_ORIGINS", raising=False)
    assert ServerConfig().cors_origins == ["*"]

    monkeypatch.setenv("VIDUP_CORS_ORIGINS", "https://a.example.com, https://b.example.com,")
    assert ServerConfig().cors_origins == ["https://a.example.com", "https://b.example.com"]
