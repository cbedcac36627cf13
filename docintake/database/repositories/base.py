from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from docintake.analysis.models import Analysis
from docintake.processor.models import Activity, Document, DocumentStatus, NewDocument


class BaseDocumentRepository(ABC):
    """Contract for the durable document record store.

    A document gets exactly one create and one terminal update; both must be
    safe to call concurrently for different documents.
    """

    @abstractmethod
    def create(self, new_document: NewDocument) -> Document:
        """Insert a row with status 'pending' and return it with its assigned id."""

    @abstractmethod
    def find_by_id(self, document_id: int) -> Document | None:
        """Return the document, or None if it does not exist."""

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> list[Document]:
        """Return the owner's documents in insertion order."""

    @abstractmethod
    def list_by_status(self, statuses: Iterable[DocumentStatus]) -> list[Document]:
        """Return every document whose status is one of statuses."""

    @abstractmethod
    def mark_processing(self, document_id: int) -> None:
        """Move a pending document to 'processing'.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """

    @abstractmethod
    def mark_processed(
        self,
        document_id: int,
        *,
        extracted_text: str,
        analysis: Analysis,
        processed_at: datetime,
    ) -> None:
        """Persist the pipeline output and the 'processed' terminal status.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """

    @abstractmethod
    def mark_failed(
        self,
        document_id: int,
        *,
        error_message: str,
        processed_at: datetime,
        extracted_text: str | None = None,
    ) -> None:
        """Persist the 'failed' terminal status.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """

    @abstractmethod
    def delete(self, document_id: int) -> bool:
        """Remove the row. Return False if it was already gone."""


class BaseActivityRepository(ABC):
    """Contract for the append-only activity log."""

    @abstractmethod
    def append(self, activity: Activity) -> Activity:
        """Store an activity entry and return it with id and created_at set."""

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> list[Activity]:
        """Return the owner's activity entries, oldest first."""
