import threading

from docintake.processor.exceptions import BlobNotFoundError
from docintake.storage.base import BaseBlobStorage, new_storage_ref


class InMemoryBlobStorage(BaseBlobStorage):
    """Keeps uploads in a dict. Useful for local development and tests."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def put(self, data: bytes, *, owner_id: str, original_name: str = "") -> str:
        storage_ref = new_storage_ref(owner_id, original_name)
        with self._lock:
            self._blobs[storage_ref] = bytes(data)
        return storage_ref

    def get(self, storage_ref: str) -> bytes:
        with self._lock:
            data = self._blobs.get(storage_ref)
        if data is None:
            raise BlobNotFoundError(f"Blob not found: {storage_ref}")
        return data

    def delete(self, storage_ref: str) -> bool:
        with self._lock:
            return self._blobs.pop(storage_ref, None) is not None

    def __contains__(self, storage_ref: object) -> bool:
        with self._lock:
            return storage_ref in self._blobs

    def __len__(self) -> int:
        with self._lock:
            return len(self._blobs)
