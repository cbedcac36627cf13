from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from docintake.analysis.base import BaseAnalyzer
from docintake.analysis.models import Analysis
from docintake.database.repositories.base import BaseActivityRepository, BaseDocumentRepository
from docintake.extraction.dispatcher import ExtractionDispatcher
from docintake.processor.exceptions import InvalidStatusTransitionError
from docintake.processor.models import Document, DocumentStatus, Submission
from docintake.processor.pipeline import PipelineContext
from docintake.processor.steps import (
    AnalyzeStep,
    ExtractTextStep,
    MarkFailedStep,
    MarkProcessedStep,
    MarkProcessingStep,
    RecordActivityStep,
)


def _make_context(status: DocumentStatus = DocumentStatus.PENDING) -> PipelineContext:
    submission = Submission(
        owner_id="user-1",
        file_bytes=b"hello",
        original_name="notes.txt",
        media_type="text/plain",
        byte_size=5,
        document_type="other",
    )
    document = Document(
        id=1,
        owner_id="user-1",
        storage_ref="user-1/x.txt",
        original_name="notes.txt",
        media_type="text/plain",
        byte_size=5,
        document_type="other",
        status=status,
        uploaded_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )
    return PipelineContext(submission=submission, document=document)


class TestMarkProcessingStep:
    def test_marks_document_processing(self) -> None:
        repo = MagicMock(spec=BaseDocumentRepository)
        ctx = MarkProcessingStep(repo).run(_make_context())

        repo.mark_processing.assert_called_once_with(1)
        assert ctx.document.status is DocumentStatus.PROCESSING

    def test_rejects_terminal_document(self) -> None:
        repo = MagicMock(spec=BaseDocumentRepository)
        with pytest.raises(InvalidStatusTransitionError):
            MarkProcessingStep(repo).run(_make_context(DocumentStatus.PROCESSED))
        repo.mark_processing.assert_not_called()


class TestExtractTextStep:
    def test_sets_extracted_text(self) -> None:
        dispatcher = MagicMock(spec=ExtractionDispatcher)
        dispatcher.extract.return_value = "hello"

        ctx = ExtractTextStep(dispatcher).run(_make_context())

        assert ctx.extracted_text == "hello"
        dispatcher.extract.assert_called_once_with("text/plain", b"hello")

    def test_text_is_written_once(self) -> None:
        ctx = _make_context()
        ctx.extracted_text = "already"
        with pytest.raises(ValueError, match="written once"):
            ExtractTextStep(MagicMock(spec=ExtractionDispatcher)).run(ctx)


class TestAnalyzeStep:
    def test_sets_analysis(self) -> None:
        analyzer = MagicMock(spec=BaseAnalyzer)
        analyzer.analyze.return_value = Analysis(summary="ok")
        ctx = _make_context()
        ctx.extracted_text = "hello"

        ctx = AnalyzeStep(analyzer).run(ctx)

        assert ctx.analysis == Analysis(summary="ok")
        analyzer.analyze.assert_called_once_with("hello", "other")

    def test_requires_extracted_text(self) -> None:
        with pytest.raises(ValueError, match="must be set"):
            AnalyzeStep(MagicMock(spec=BaseAnalyzer)).run(_make_context())


class TestMarkProcessedStep:
    def test_persists_terminal_state(self) -> None:
        repo = MagicMock(spec=BaseDocumentRepository)
        ctx = _make_context(DocumentStatus.PROCESSING)
        ctx.extracted_text = "hello"
        ctx.analysis = Analysis(summary="ok")

        ctx = MarkProcessedStep(repo).run(ctx)

        kwargs = repo.mark_processed.call_args.kwargs
        assert kwargs["extracted_text"] == "hello"
        assert kwargs["analysis"] == Analysis(summary="ok")
        assert ctx.document.status is DocumentStatus.PROCESSED
        assert ctx.document.processed_at == kwargs["processed_at"]
        assert ctx.document.analysis == Analysis(summary="ok")

    def test_requires_text_and_analysis(self) -> None:
        with pytest.raises(ValueError):
            MarkProcessedStep(MagicMock(spec=BaseDocumentRepository)).run(
                _make_context(DocumentStatus.PROCESSING)
            )


class TestMarkFailedStep:
    def test_marks_failed_with_message(self) -> None:
        repo = MagicMock(spec=BaseDocumentRepository)
        ctx = _make_context(DocumentStatus.PROCESSING)
        ctx.extracted_text = "partial"
        ctx.analysis = Analysis(summary="stale")
        ctx.error_message = "database went away"

        ctx = MarkFailedStep(repo).run(ctx)

        kwargs = repo.mark_failed.call_args.kwargs
        assert kwargs["error_message"] == "database went away"
        assert kwargs["extracted_text"] == "partial"
        assert ctx.document.status is DocumentStatus.FAILED
        assert ctx.document.analysis is None
        assert ctx.document.processed_at is not None


class TestRecordActivityStep:
    def test_records_processed_activity(self) -> None:
        repo = MagicMock(spec=BaseActivityRepository)
        ctx = _make_context(DocumentStatus.PROCESSED)

        RecordActivityStep(repo).run(ctx)

        activity = repo.append.call_args[0][0]
        assert activity.owner_id == "user-1"
        assert activity.type == "document_processed"
        assert activity.description == "Uploaded and processed other: notes.txt"
        assert activity.metadata == {
            "document_id": 1,
            "original_name": "notes.txt",
            "byte_size": 5,
            "document_type": "other",
            "status": "processed",
        }

    def test_records_failed_activity(self) -> None:
        repo = MagicMock(spec=BaseActivityRepository)

        RecordActivityStep(repo).run(_make_context(DocumentStatus.FAILED))

        assert repo.append.call_args[0][0].type == "document_failed"

    def test_skips_non_terminal_document(self) -> None:
        repo = MagicMock(spec=BaseActivityRepository)
        RecordActivityStep(repo).run(_make_context(DocumentStatus.PROCESSING))
        repo.append.assert_not_called()

    def test_swallows_append_failure(self) -> None:
        repo = MagicMock(spec=BaseActivityRepository)
        repo.append.side_effect = RuntimeError("feed down")
        ctx = _make_context(DocumentStatus.PROCESSED)

        assert RecordActivityStep(repo).run(ctx) is ctx
