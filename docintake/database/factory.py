from docintake.config.settings import Settings
from docintake.database.repositories.activity_repository import ActivityRepository
from docintake.database.repositories.base import BaseActivityRepository, BaseDocumentRepository
from docintake.database.repositories.document_repository import DocumentRepository
from docintake.database.repositories.memory import (
    InMemoryActivityRepository,
    InMemoryDocumentRepository,
)


class RepositoryFactory:
    """Creates the configured document and activity stores."""

    STORES: dict[str, tuple[type[BaseDocumentRepository], type[BaseActivityRepository]]] = {
        "postgres": (DocumentRepository, ActivityRepository),
        "memory": (InMemoryDocumentRepository, InMemoryActivityRepository),
    }

    @classmethod
    def create(cls, settings: Settings) -> tuple[BaseDocumentRepository, BaseActivityRepository]:
        store = settings.record_store.lower()
        classes = cls.STORES.get(store)
        if classes is None:
            raise ValueError(
                f"Unknown record store '{store}'. Choose from: {list(cls.STORES)}"
            )
        document_repo_cls, activity_repo_cls = classes
        return document_repo_cls(), activity_repo_cls()

    @classmethod
    def uses_database(cls, settings: Settings) -> bool:
        return settings.record_store.lower() == "postgres"
