import os
import tempfile
from pathlib import Path

from docintake.processor.exceptions import BlobNotFoundError, StorageError
from docintake.storage.base import BaseBlobStorage, new_storage_ref


class LocalBlobStorage(BaseBlobStorage):
    """Stores uploads as files under {root}/{owner}/{uuid}{suffix}."""

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()

    def put(self, data: bytes, *, owner_id: str, original_name: str = "") -> str:
        storage_ref = new_storage_ref(owner_id, original_name)
        path = self._resolve_path(storage_ref)
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=path.parent, prefix=".upload-", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            raise StorageError(f"Failed to write {storage_ref}: {exc}") from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
        return storage_ref

    def get(self, storage_ref: str) -> bytes:
        path = self._resolve_path(storage_ref)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise BlobNotFoundError(f"File not found: {storage_ref}") from exc
        except OSError as exc:
            raise StorageError(f"Failed to read {storage_ref}: {exc}") from exc

    def delete(self, storage_ref: str) -> bool:
        path = self._resolve_path(storage_ref)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"Failed to delete {storage_ref}: {exc}") from exc
        return True

    def _resolve_path(self, storage_ref: str) -> Path:
        path = (self._root / storage_ref).resolve()
        if not path.is_relative_to(self._root):
            raise StorageError(f"Storage reference escapes storage root: {storage_ref}")
        return path
