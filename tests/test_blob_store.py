import io
import re
from pathlib import Path

import pytest

from vidupload.errors import BadRequest, PayloadTooLarge, StorageCleanupError, StorageWriteError
from vidupload.services import blob_store as blob_store_module
from vidupload.services.blob_store import LocalBlobStore


def test_save_writes_prefixed_file(blob_store, uploads_dir: Path):
    blob = blob_store.save(io.BytesIO(b"frames"), "clip.mp4")

    assert re.fullmatch(r"\d+-clip\.mp4", blob.stored_name)
    assert blob.public_path == f"/uploads/{blob.stored_name}"
    assert blob.size_bytes == 6
    assert (uploads_dir / blob.stored_name).read_bytes() == b"frames"


def test_same_name_same_instant_does_not_collide(blob_store, monkeypatch):
    monkeypatch.setattr(blob_store_module.time, "time", lambda: 1_700_000_000.0)

    first = blob_store.save(io.BytesIO(b"a"), "clip.mp4")
    second = blob_store.save(io.BytesIO(b"b"), "clip.mp4")

    assert first.stored_name == "1700000000000-clip.mp4"
    assert second.stored_name == "1700000000001-clip.mp4"


def test_directory_components_are_stripped(blob_store, uploads_dir: Path):
    blob = blob_store.save(io.BytesIO(b"x"), "../../etc/passwd")
    assert blob.path.parent == uploads_dir
    assert blob.stored_name.endswith("-passwd")

    blob = blob_store.save(io.BytesIO(b"x"), "C:\\Users\\me\\clip.mp4")
    assert blob.stored_name.endswith("-clip.mp4")


def test_oversized_stream_leaves_nothing_behind(uploads_dir: Path):
    store = LocalBlobStore(uploads_dir, max_bytes=10)

    with pytest.raises(PayloadTooLarge):
        store.save(io.BytesIO(b"x" * 11), "big.mp4")

    assert list(uploads_dir.iterdir()) == []


def test_stream_at_limit_is_accepted(uploads_dir: Path):
    store = LocalBlobStore(uploads_dir, max_bytes=10)
    assert store.save(io.BytesIO(b"x" * 10), "ok.mp4").size_bytes == 10


def test_unwritable_location_raises_storage_error(tmp_path: Path):
    not_a_dir = tmp_path / "occupied"
    not_a_dir.write_text("file, not directory")
    store = LocalBlobStore(not_a_dir)

    with pytest.raises(StorageWriteError):
        store.save(io.BytesIO(b"data"), "clip.mp4")


def test_remove(blob_store, uploads_dir: Path):
    blob = blob_store.save(io.BytesIO(b"data"), "clip.mp4")

    assert blob_store.remove(blob.stored_name) is True
    assert not blob.path.exists()
    assert blob_store.remove(blob.stored_name) is False


def test_remove_failure_is_reported(blob_store, uploads_dir: Path):
    (uploads_dir / "123-stuck.mp4").mkdir()

    with pytest.raises(StorageCleanupError):
        blob_store.remove("123-stuck.mp4")


def test_availability(tmp_path: Path):
    assert LocalBlobStore(tmp_path).is_available() is True
    assert LocalBlobStore(tmp_path / "missing").is_available() is False


@pytest.mark.parametrize("name", ["dir/", "   ", "..\\"])
def test_name_without_basename_is_bad_input(blob_store, uploads_dir: Path, name):
    with pytest.raises(BadRequest):
        blob_store.save(io.BytesIO(b"data"), name)

    assert list(uploads_dir.iterdir()) == []
