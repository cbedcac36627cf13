from datetime import datetime
from typing import Any

from pydantic import BaseModel

from docintake.processor.models import Document


class DocumentResponse(BaseModel):
    id: int
    ownerId: str
    originalName: str
    mediaType: str
    byteSize: int
    documentType: str
    status: str
    extractedText: str | None = None
    analysis: dict[str, Any] | None = None
    errorMessage: str | None = None
    uploadedAt: datetime
    processedAt: datetime | None = None

    @classmethod
    def from_document(cls, document: Document) -> "DocumentResponse":
        return cls(
            id=document.id,
            ownerId=document.owner_id,
            originalName=document.original_name,
            mediaType=document.media_type,
            byteSize=document.byte_size,
            documentType=document.document_type,
            status=str(document.status),
            extractedText=document.extracted_text,
            analysis=document.analysis.to_payload() if document.analysis is not None else None,
            errorMessage=document.error_message,
            uploadedAt=document.uploaded_at,
            processedAt=document.processed_at,
        )


class DeleteResponse(BaseModel):
    deleted: bool


class ErrorResponse(BaseModel):
    error: str
    message: str
