from dataclasses import replace
from datetime import datetime, timezone

from docintake.analysis.base import BaseAnalyzer
from docintake.database.repositories.base import BaseActivityRepository, BaseDocumentRepository
from docintake.extraction.dispatcher import ExtractionDispatcher
from docintake.logging.logger import Log
from docintake.processor.models import Activity, DocumentStatus
from docintake.processor.pipeline import PipelineContext, PipelineStep
from docintake.processor.state import check_transition


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MarkProcessingStep(PipelineStep):
    def __init__(self, doc_repo: BaseDocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        check_transition(context.document.status, DocumentStatus.PROCESSING)
        self._doc_repo.mark_processing(context.document.id)
        context.document.status = DocumentStatus.PROCESSING
        Log.info(f"Document {context.document.id} marked as processing")
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, dispatcher: ExtractionDispatcher) -> None:
        self._dispatcher = dispatcher

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extracted_text is not None:
            raise ValueError("PipelineContext.extracted_text is written once per document")
        context.extracted_text = self._dispatcher.extract(
            context.submission.media_type,
            context.submission.file_bytes,
        )
        Log.info(
            f"Extracted {len(context.extracted_text)} chars from document {context.document.id}",
            media_type=context.submission.media_type,
        )
        return context


class AnalyzeStep(PipelineStep):
    def __init__(self, analyzer: BaseAnalyzer) -> None:
        self._analyzer = analyzer

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extracted_text is None:
            raise ValueError("PipelineContext.extracted_text must be set before analysis")
        context.analysis = self._analyzer.analyze(
            context.extracted_text,
            context.submission.document_type,
        )
        Log.info(f"Analyzed document {context.document.id}")
        return context


class MarkProcessedStep(PipelineStep):
    def __init__(self, doc_repo: BaseDocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extracted_text is None or context.analysis is None:
            raise ValueError(
                "PipelineContext.extracted_text and analysis must be set before persist"
            )
        check_transition(context.document.status, DocumentStatus.PROCESSED)
        processed_at = _utcnow()
        self._doc_repo.mark_processed(
            context.document.id,
            extracted_text=context.extracted_text,
            analysis=context.analysis,
            processed_at=processed_at,
        )
        context.document = replace(
            context.document,
            status=DocumentStatus.PROCESSED,
            extracted_text=context.extracted_text,
            analysis=context.analysis,
            processed_at=processed_at,
        )
        Log.info(f"Document {context.document.id} marked as processed")
        return context


class MarkFailedStep(PipelineStep):
    def __init__(self, doc_repo: BaseDocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        check_transition(context.document.status, DocumentStatus.FAILED)
        processed_at = _utcnow()
        self._doc_repo.mark_failed(
            context.document.id,
            error_message=context.error_message,
            processed_at=processed_at,
            extracted_text=context.extracted_text,
        )
        context.document = replace(
            context.document,
            status=DocumentStatus.FAILED,
            extracted_text=context.extracted_text,
            analysis=None,
            error_message=context.error_message,
            processed_at=processed_at,
        )
        Log.error(f"Document {context.document.id} marked as failed: {context.error_message}")
        return context


class RecordActivityStep(PipelineStep):
    """Appends a feed entry for a document in a terminal state. Never raises."""

    def __init__(self, activity_repo: BaseActivityRepository) -> None:
        self._activity_repo = activity_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        document = context.document
        if not document.status.is_terminal:
            Log.warning(f"Skipping activity for document {document.id} in status {document.status}")
            return context
        if document.status == DocumentStatus.PROCESSED:
            activity_type = "document_processed"
            description = (
                f"Uploaded and processed {document.document_type}: {document.original_name}"
            )
        else:
            activity_type = "document_failed"
            description = (
                f"Failed to process {document.document_type}: {document.original_name}"
            )
        activity = Activity(
            owner_id=document.owner_id,
            type=activity_type,
            description=description,
            metadata={
                "document_id": document.id,
                "original_name": document.original_name,
                "byte_size": document.byte_size,
                "document_type": document.document_type,
                "status": str(document.status),
            },
        )
        try:
            self._activity_repo.append(activity)
        except Exception as exc:
            Log.warning(f"Could not record activity for document {document.id}: {exc}")
        return context
