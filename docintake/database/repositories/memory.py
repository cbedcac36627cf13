"""In-process record stores for local development and tests."""

import itertools
import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone

from docintake.analysis.models import Analysis
from docintake.database.repositories.base import BaseActivityRepository, BaseDocumentRepository
from docintake.processor.exceptions import DocumentNotFoundError
from docintake.processor.models import Activity, Document, DocumentStatus, NewDocument
from docintake.processor.state import check_transition


class InMemoryDocumentRepository(BaseDocumentRepository):
    """Dict-backed document store. Returns copies so callers never share rows."""

    def __init__(self) -> None:
        self._rows: dict[int, Document] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create(self, new_document: NewDocument) -> Document:
        with self._lock:
            if any(row.storage_ref == new_document.storage_ref for row in self._rows.values()):
                raise ValueError(f"storage_ref '{new_document.storage_ref}' already in use")
            document = Document(
                id=next(self._ids),
                owner_id=new_document.owner_id,
                storage_ref=new_document.storage_ref,
                original_name=new_document.original_name,
                media_type=new_document.media_type,
                byte_size=new_document.byte_size,
                document_type=new_document.document_type,
                status=DocumentStatus.PENDING,
                uploaded_at=new_document.uploaded_at,
            )
            self._rows[document.id] = document
            return replace(document)

    def find_by_id(self, document_id: int) -> Document | None:
        with self._lock:
            row = self._rows.get(document_id)
            return replace(row) if row is not None else None

    def list_by_owner(self, owner_id: str) -> list[Document]:
        with self._lock:
            return [replace(row) for row in self._rows.values() if row.owner_id == owner_id]

    def list_by_status(self, statuses: Iterable[DocumentStatus]) -> list[Document]:
        wanted = set(statuses)
        with self._lock:
            return [replace(row) for row in self._rows.values() if row.status in wanted]

    def mark_processing(self, document_id: int) -> None:
        self._transition(document_id, DocumentStatus.PROCESSING)

    def mark_processed(
        self,
        document_id: int,
        *,
        extracted_text: str,
        analysis: Analysis,
        processed_at: datetime,
    ) -> None:
        self._transition(
            document_id,
            DocumentStatus.PROCESSED,
            extracted_text=extracted_text,
            analysis=analysis,
            error_message=None,
            processed_at=processed_at,
        )

    def mark_failed(
        self,
        document_id: int,
        *,
        error_message: str,
        processed_at: datetime,
        extracted_text: str | None = None,
    ) -> None:
        self._transition(
            document_id,
            DocumentStatus.FAILED,
            extracted_text=extracted_text,
            analysis=None,
            error_message=error_message,
            processed_at=processed_at,
        )

    def delete(self, document_id: int) -> bool:
        with self._lock:
            return self._rows.pop(document_id, None) is not None

    def _transition(self, document_id: int, target: DocumentStatus, **changes: object) -> None:
        with self._lock:
            row = self._rows.get(document_id)
            if row is None:
                raise DocumentNotFoundError(f"Document {document_id} not found")
            check_transition(row.status, target)
            self._rows[document_id] = replace(row, status=target, **changes)


class InMemoryActivityRepository(BaseActivityRepository):
    """List-backed activity log."""

    def __init__(self) -> None:
        self._entries: list[Activity] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def append(self, activity: Activity) -> Activity:
        with self._lock:
            activity.id = next(self._ids)
            activity.created_at = datetime.now(timezone.utc)
            self._entries.append(replace(activity))
        return activity

    def list_by_owner(self, owner_id: str) -> list[Activity]:
        with self._lock:
            return [replace(entry) for entry in self._entries if entry.owner_id == owner_id]
