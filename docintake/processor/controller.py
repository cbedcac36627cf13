from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO

from docintake.analysis.base import BaseAnalyzer
from docintake.analysis.factory import AnalyzerFactory
from docintake.config.settings import Settings
from docintake.database.factory import RepositoryFactory
from docintake.database.repositories.base import BaseActivityRepository, BaseDocumentRepository
from docintake.extraction.dispatcher import ExtractionDispatcher
from docintake.extraction.factory import ExtractorFactory
from docintake.logging.logger import Log
from docintake.processor.exceptions import DocumentNotFoundError, StorageError
from docintake.processor.models import Document, DocumentStatus, NewDocument, Submission
from docintake.processor.pipeline import PipelineContext, PipelineStep
from docintake.processor.steps import (
    AnalyzeStep,
    ExtractTextStep,
    MarkFailedStep,
    MarkProcessedStep,
    MarkProcessingStep,
    RecordActivityStep,
)
from docintake.processor.validator import SubmissionValidator
from docintake.storage.base import BaseBlobStorage
from docintake.storage.factory import StorageFactory


class IntakeController:
    """Validates uploads, stores them and drives each document to a terminal state.

    Pipeline: validate -> store bytes -> create record -> steps -> activity.
    Extraction and analysis failures are absorbed by their components; any
    error raised by a step is fatal and runs the failed step instead.
    """

    def __init__(
        self,
        *,
        validator: SubmissionValidator,
        storage: BaseBlobStorage,
        doc_repo: BaseDocumentRepository,
        steps: list[PipelineStep],
        failed_step: PipelineStep,
        completion_steps: list[PipelineStep] | None = None,
        max_upload_bytes: int,
    ) -> None:
        self._validator = validator
        self._storage = storage
        self._doc_repo = doc_repo
        self._steps = steps
        self._failed_step = failed_step
        self._completion_steps = completion_steps or []
        self._max_upload_bytes = max_upload_bytes

    def submit(
        self,
        owner_id: str,
        file_bytes: bytes,
        original_name: str,
        media_type: str,
        byte_size: int,
        document_type: str,
    ) -> Document:
        return self.submit_submission(
            Submission(
                owner_id=owner_id,
                file_bytes=file_bytes,
                original_name=original_name,
                media_type=media_type,
                byte_size=byte_size,
                document_type=document_type,
            )
        )

    def submit_stream(
        self,
        owner_id: str,
        stream: BinaryIO,
        original_name: str,
        media_type: str,
        document_type: str,
    ) -> Document:
        """Read an upload buffer and submit it. The stream is closed on every path.

        At most max_upload_bytes + 1 bytes are read, so oversized uploads are
        rejected without buffering them whole.
        """
        try:
            file_bytes = stream.read(self._max_upload_bytes + 1)
        finally:
            stream.close()
        return self.submit(
            owner_id=owner_id,
            file_bytes=file_bytes,
            original_name=original_name,
            media_type=media_type,
            byte_size=len(file_bytes),
            document_type=document_type,
        )

    def submit_submission(self, submission: Submission) -> Document:
        """Validate, persist and process one submission.

        Returns:
            The document in a terminal state ('processed' or 'failed').

        Raises:
            SubmissionValidationError: the submission was rejected; nothing was stored.
            StorageError: bytes or the initial record could not be persisted,
                          or the document could not be marked failed.
            DocumentNotFoundError: the document was deleted while it was
                                   being processed.
        """
        self._validator.validate(submission)
        document = self._create_document(submission)
        Log.info(
            f"Processing document {document.id}",
            owner_id=document.owner_id,
            media_type=document.media_type,
            byte_size=document.byte_size,
        )

        context = PipelineContext(submission=submission, document=document)
        try:
            for step in self._steps:
                context = step.run(context)
        except DocumentNotFoundError:
            self._report_deleted(document)
            raise
        except Exception as exc:
            context.error_message = str(exc) or type(exc).__name__
            Log.exception(f"Document {document.id} processing failed")
            try:
                context = self._failed_step.run(context)
            except DocumentNotFoundError:
                self._report_deleted(document)
                raise
            except Exception as mark_exc:
                raise StorageError(
                    f"Document {document.id} could not be marked failed: {mark_exc}"
                ) from exc

        for step in self._completion_steps:
            context = step.run(context)
        return context.document

    def get(self, document_id: int) -> Document | None:
        return self._doc_repo.find_by_id(document_id)

    def list_documents(self, owner_id: str) -> list[Document]:
        return self._doc_repo.list_by_owner(owner_id)

    def read_content(self, document_id: int) -> tuple[Document, bytes]:
        """Return a document and its stored bytes.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
            BlobNotFoundError: if the record exists but its bytes are gone.
        """
        document = self._doc_repo.find_by_id(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document, self._storage.get(document.storage_ref)

    def delete(self, document_id: int) -> bool:
        """Release a document's bytes, then remove its record.

        Returns False when the document does not exist or a concurrent delete
        removed it first.
        """
        document = self._doc_repo.find_by_id(document_id)
        if document is None:
            return False
        released = self._storage.delete(document.storage_ref)
        deleted = self._doc_repo.delete(document_id)
        Log.info(
            f"Deleted document {document_id}" if deleted else f"Document {document_id} already gone",
            bytes_released=released,
        )
        return deleted

    def find_unfinished(self) -> list[Document]:
        """Documents left in 'pending' or 'processing', e.g. after a crash."""
        return self._doc_repo.list_by_status(
            [DocumentStatus.PENDING, DocumentStatus.PROCESSING]
        )

    def _create_document(self, submission: Submission) -> Document:
        storage_ref = self._storage.put(
            submission.file_bytes,
            owner_id=submission.owner_id,
            original_name=submission.original_name,
        )
        try:
            return self._doc_repo.create(
                NewDocument(
                    owner_id=submission.owner_id,
                    storage_ref=storage_ref,
                    original_name=submission.original_name,
                    media_type=submission.media_type,
                    byte_size=submission.byte_size,
                    document_type=submission.document_type,
                    uploaded_at=datetime.now(timezone.utc),
                )
            )
        except Exception as exc:
            self._release_orphan(storage_ref)
            raise StorageError(f"Failed to create document record: {exc}") from exc

    @staticmethod
    def _report_deleted(document: Document) -> None:
        Log.warning(
            f"Document {document.id} was deleted while it was being processed",
            owner_id=document.owner_id,
        )

    def _release_orphan(self, storage_ref: str) -> None:
        try:
            self._storage.delete(storage_ref)
        except StorageError as exc:
            Log.error(f"Could not release orphaned upload {storage_ref}: {exc}")


def build_controller(
    settings: Settings,
    *,
    storage: BaseBlobStorage | None = None,
    doc_repo: BaseDocumentRepository | None = None,
    activity_repo: BaseActivityRepository | None = None,
    dispatcher: ExtractionDispatcher | None = None,
    analyzer: BaseAnalyzer | None = None,
    storage_root: Path | None = None,
) -> IntakeController:
    """Build an IntakeController with all required adapters.

    Keyword overrides replace the adapter the settings would select.
    """
    if storage is None:
        if storage_root is not None:
            settings = settings.model_copy(update={"storage_root": str(storage_root)})
        storage = StorageFactory.create(settings)
    if doc_repo is None or activity_repo is None:
        default_doc_repo, default_activity_repo = RepositoryFactory.create(settings)
        doc_repo = doc_repo or default_doc_repo
        activity_repo = activity_repo or default_activity_repo
    dispatcher = dispatcher or ExtractorFactory.create(settings)
    analyzer = analyzer or AnalyzerFactory.create(settings)

    return IntakeController(
        validator=SubmissionValidator(settings.max_upload_bytes, settings.allowed_media_types),
        storage=storage,
        doc_repo=doc_repo,
        steps=[
            MarkProcessingStep(doc_repo),
            ExtractTextStep(dispatcher),
            AnalyzeStep(analyzer),
            MarkProcessedStep(doc_repo),
        ],
        failed_step=MarkFailedStep(doc_repo),
        completion_steps=[RecordActivityStep(activity_repo)],
        max_upload_bytes=settings.max_upload_bytes,
    )
