from collections.abc import Iterable
from datetime import datetime
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from docintake.analysis.models import Analysis
from docintake.database.connection import get_connection
from docintake.database.repositories.base import BaseDocumentRepository
from docintake.processor.exceptions import DocumentNotFoundError
from docintake.processor.models import Document, DocumentStatus, NewDocument

_COLUMNS = """
    id, owner_id, storage_ref, original_name, media_type, byte_size,
    document_type, status, extracted_text, analysis, error_message,
    uploaded_at, processed_at
"""


def _row_to_document(row: dict[str, Any]) -> Document:
    analysis = row["analysis"]
    return Document(
        id=row["id"],
        owner_id=row["owner_id"],
        storage_ref=row["storage_ref"],
        original_name=row["original_name"],
        media_type=row["media_type"],
        byte_size=row["byte_size"],
        document_type=row["document_type"],
        status=DocumentStatus(row["status"]),
        extracted_text=row["extracted_text"],
        analysis=Analysis.from_payload(analysis) if analysis is not None else None,
        error_message=row["error_message"],
        uploaded_at=row["uploaded_at"],
        processed_at=row["processed_at"],
    )


class DocumentRepository(BaseDocumentRepository):
    """Database operations for the documents table."""

    def create(self, new_document: NewDocument) -> Document:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents (
                        owner_id, storage_ref, original_name, media_type,
                        byte_size, document_type, status, uploaded_at
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, 'pending', %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        new_document.owner_id,
                        new_document.storage_ref,
                        new_document.original_name,
                        new_document.media_type,
                        new_document.byte_size,
                        new_document.document_type,
                        new_document.uploaded_at,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT ... RETURNING produced no row")
        return _row_to_document(row)

    def find_by_id(self, document_id: int) -> Document | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE id = %s",
                    (document_id,),
                )
                row = cur.fetchone()
        return _row_to_document(row) if row is not None else None

    def list_by_owner(self, owner_id: str) -> list[Document]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE owner_id = %s ORDER BY id",
                    (owner_id,),
                )
                rows = cur.fetchall()
        return [_row_to_document(row) for row in rows]

    def list_by_status(self, statuses: Iterable[DocumentStatus]) -> list[Document]:
        values = [str(status) for status in statuses]
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE status = ANY(%s) ORDER BY id",
                    (values,),
                )
                rows = cur.fetchall()
        return [_row_to_document(row) for row in rows]

    def mark_processing(self, document_id: int) -> None:
        self._update(
            document_id,
            "UPDATE documents SET status = 'processing' WHERE id = %s",
            (document_id,),
        )

    def mark_processed(
        self,
        document_id: int,
        *,
        extracted_text: str,
        analysis: Analysis,
        processed_at: datetime,
    ) -> None:
        self._update(
            document_id,
            """
            UPDATE documents
            SET status = 'processed',
                extracted_text = %s,
                analysis = %s,
                error_message = NULL,
                processed_at = %s
            WHERE id = %s
            """,
            (extracted_text, Jsonb(analysis.to_payload()), processed_at, document_id),
        )

    def mark_failed(
        self,
        document_id: int,
        *,
        error_message: str,
        processed_at: datetime,
        extracted_text: str | None = None,
    ) -> None:
        self._update(
            document_id,
            """
            UPDATE documents
            SET status = 'failed',
                extracted_text = %s,
                analysis = NULL,
                error_message = %s,
                processed_at = %s
            WHERE id = %s
            """,
            (extracted_text, error_message, processed_at, document_id),
        )

    def delete(self, document_id: int) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
                deleted = cur.rowcount > 0
            conn.commit()
        return deleted

    @staticmethod
    def _update(document_id: int, sql: str, params: tuple[Any, ...]) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()
