from pathlib import Path

from docintake.config.settings import Settings
from docintake.storage.base import BaseBlobStorage
from docintake.storage.local_adapter import LocalBlobStorage
from docintake.storage.memory_adapter import InMemoryBlobStorage


class StorageFactory:
    """Creates the configured blob storage backend."""

    BACKENDS = ("local", "memory")

    @classmethod
    def create(cls, settings: Settings) -> BaseBlobStorage:
        backend = settings.storage_backend.lower()
        if backend == "local":
            return LocalBlobStorage(Path(settings.storage_root))
        if backend == "memory":
            return InMemoryBlobStorage()
        raise ValueError(
            f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
