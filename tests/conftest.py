import io
import random

import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docintake.analysis.fallback import FallbackAnalyzer
from docintake.config.settings import Settings
from docintake.database.repositories.memory import (
    InMemoryActivityRepository,
    InMemoryDocumentRepository,
)
from docintake.extraction.dispatcher import ExtractionDispatcher
from docintake.extraction.text_adapter import PlainTextAdapter
from docintake.processor.controller import IntakeController, build_controller
from docintake.storage.memory_adapter import InMemoryBlobStorage
from tests.stubs import StubExtractor


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Warranty Deed Parcel 42")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def png_bytes() -> bytes:
    """A noisy grayscale PNG of roughly 2KB."""
    noise = random.Random(0).randbytes(45 * 45)
    image = Image.frombytes("L", (45, 45), noise)
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        record_store="memory",
        storage_backend="memory",
        analysis_provider="fallback",
        max_upload_bytes=1024,
        extraction_timeout_seconds=0,
    )


@pytest.fixture()
def blob_storage() -> InMemoryBlobStorage:
    return InMemoryBlobStorage()


@pytest.fixture()
def doc_repo() -> InMemoryDocumentRepository:
    return InMemoryDocumentRepository()


@pytest.fixture()
def activity_repo() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture()
def ocr_stub() -> StubExtractor:
    return StubExtractor(text="ROOF DAMAGE NORTH SIDE")


@pytest.fixture()
def dispatcher(ocr_stub: StubExtractor) -> ExtractionDispatcher:
    dispatcher = ExtractionDispatcher()
    dispatcher.register("application/pdf", StubExtractor(text="pdf text"))
    dispatcher.register("image/*", ocr_stub)
    dispatcher.register("text/plain", PlainTextAdapter())
    return dispatcher


@pytest.fixture()
def controller(
    settings: Settings,
    blob_storage: InMemoryBlobStorage,
    doc_repo: InMemoryDocumentRepository,
    activity_repo: InMemoryActivityRepository,
    dispatcher: ExtractionDispatcher,
) -> IntakeController:
    return build_controller(
        settings,
        storage=blob_storage,
        doc_repo=doc_repo,
        activity_repo=activity_repo,
        dispatcher=dispatcher,
        analyzer=FallbackAnalyzer(),
    )
