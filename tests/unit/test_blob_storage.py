import re
from pathlib import Path

import pytest

from docintake.processor.exceptions import BlobNotFoundError, StorageError
from docintake.storage.base import new_storage_ref
from docintake.storage.local_adapter import LocalBlobStorage
from docintake.storage.memory_adapter import InMemoryBlobStorage

_UUID = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"


class TestNewStorageRef:
    def test_keeps_lowercased_suffix(self) -> None:
        ref = new_storage_ref("user-1", "Roof Photo.PNG")
        assert re.fullmatch(rf"user-1/{_UUID}\.png", ref)

    def test_drops_unsafe_suffix(self) -> None:
        ref = new_storage_ref("user-1", "notes.tar.g z")
        assert re.fullmatch(rf"user-1/{_UUID}", ref)

    def test_sanitizes_owner_segment(self) -> None:
        ref = new_storage_ref("../etc", "a.pdf")
        assert ref.startswith("___etc/")

    def test_references_are_unique(self) -> None:
        assert new_storage_ref("u", "a.pdf") != new_storage_ref("u", "a.pdf")


class TestLocalBlobStorage:
    def test_put_then_get(self, tmp_path: Path) -> None:
        storage = LocalBlobStorage(tmp_path)

        ref = storage.put(b"%PDF-1.4", owner_id="user-1", original_name="deed.pdf")

        assert storage.get(ref) == b"%PDF-1.4"
        assert (tmp_path / ref).is_file()

    def test_put_leaves_no_temp_files(self, tmp_path: Path) -> None:
        storage = LocalBlobStorage(tmp_path)

        ref = storage.put(b"data", owner_id="user-1")

        names = [p.name for p in (tmp_path / ref).parent.iterdir()]
        assert names == [Path(ref).name]

    def test_get_missing_raises_blob_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(BlobNotFoundError, match="File not found"):
            LocalBlobStorage(tmp_path).get("user-1/missing.pdf")

    def test_delete_is_idempotent(self, tmp_path: Path) -> None:
        storage = LocalBlobStorage(tmp_path)
        ref = storage.put(b"data", owner_id="user-1")

        assert storage.delete(ref) is True
        assert storage.delete(ref) is False
        assert not (tmp_path / ref).exists()

    def test_rejects_reference_outside_root(self, tmp_path: Path) -> None:
        storage = LocalBlobStorage(tmp_path / "root")
        with pytest.raises(StorageError, match="escapes storage root"):
            storage.get("../outside.txt")

    def test_write_failure_raises_storage_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"")
        storage = LocalBlobStorage(blocker)

        with pytest.raises(StorageError, match="Failed to write"):
            storage.put(b"data", owner_id="user-1")


class TestInMemoryBlobStorage:
    def test_put_get_delete(self) -> None:
        storage = InMemoryBlobStorage()

        ref = storage.put(b"abc", owner_id="u", original_name="a.txt")

        assert ref in storage
        assert len(storage) == 1
        assert storage.get(ref) == b"abc"
        assert storage.delete(ref) is True
        assert storage.delete(ref) is False
        assert len(storage) == 0

    def test_get_missing_raises(self) -> None:
        with pytest.raises(BlobNotFoundError):
            InMemoryBlobStorage().get("u/none")
