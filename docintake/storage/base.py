import re
import uuid
from abc import ABC, abstractmethod
from pathlib import PurePosixPath

_SAFE_SUFFIX = re.compile(r"^\.[A-Za-z0-9]{1,10}$")
_SAFE_OWNER = re.compile(r"[^A-Za-z0-9_-]")


def new_storage_ref(owner_id: str, original_name: str = "") -> str:
    """Build a unique blob key: {owner}/{uuid4}{suffix}.

    The owner segment and the suffix are sanitized so the key is always a
    two-part relative path.
    """
    owner_segment = _SAFE_OWNER.sub("_", owner_id) or "_"
    suffix = PurePosixPath(original_name).suffix.lower()
    if not _SAFE_SUFFIX.match(suffix):
        suffix = ""
    return f"{owner_segment}/{uuid.uuid4()}{suffix}"


class BaseBlobStorage(ABC):
    """Contract for the byte store that backs document uploads."""

    @abstractmethod
    def put(self, data: bytes, *, owner_id: str, original_name: str = "") -> str:
        """Persist bytes and return the new storage reference.

        Raises:
            StorageError: if the bytes cannot be written.
        """

    @abstractmethod
    def get(self, storage_ref: str) -> bytes:
        """Return the bytes behind a storage reference.

        Raises:
            BlobNotFoundError: if nothing is stored under the reference.
            StorageError: on any other read failure.
        """

    @abstractmethod
    def delete(self, storage_ref: str) -> bool:
        """Release the bytes. Return False if they were already gone.

        Raises:
            StorageError: if the bytes exist but cannot be removed.
        """
