from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from docintake.analysis.models import Analysis


class DocumentStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (DocumentStatus.PROCESSED, DocumentStatus.FAILED)


@dataclass(frozen=True)
class Submission:
    """One validated-or-not upload as received from the caller."""

    owner_id: str
    file_bytes: bytes
    original_name: str
    media_type: str
    byte_size: int
    document_type: str


@dataclass
class Document:
    """Represents a row from the documents table."""

    id: int
    owner_id: str
    storage_ref: str
    original_name: str
    media_type: str
    byte_size: int
    document_type: str
    status: DocumentStatus
    uploaded_at: datetime
    extracted_text: str | None = None
    analysis: Analysis | None = None
    error_message: str | None = None
    processed_at: datetime | None = None


@dataclass(frozen=True)
class NewDocument:
    """Fields supplied by the controller when a document row is created."""

    owner_id: str
    storage_ref: str
    original_name: str
    media_type: str
    byte_size: int
    document_type: str
    uploaded_at: datetime


@dataclass
class Activity:
    """Represents a row from the activities table."""

    owner_id: str
    type: str
    description: str
    metadata: dict[str, Any] = field(default_factory=dict)
    id: int | None = None
    created_at: datetime | None = None
