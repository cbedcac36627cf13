from docintake.config.settings import Settings
from docintake.extraction.base import BaseExtractor
from docintake.extraction.dispatcher import ExtractionDispatcher
from docintake.extraction.ocr_adapter import TesseractOcrAdapter
from docintake.extraction.pdfplumber_adapter import PdfPlumberAdapter
from docintake.extraction.pymupdf_adapter import PyMuPdfAdapter
from docintake.extraction.text_adapter import PlainTextAdapter


class ExtractorFactory:
    """Creates extractors and the dispatcher based on settings."""

    PDF_ADAPTERS: dict[str, type[BaseExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create_pdf_extractor(cls, settings: Settings) -> BaseExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.PDF_ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ADAPTERS)}"
            )
        return adapter_cls()

    @classmethod
    def create(cls, settings: Settings) -> ExtractionDispatcher:
        """Build a dispatcher with the PDF, image and plain-text routes."""
        dispatcher = ExtractionDispatcher(timeout_seconds=settings.extraction_timeout_seconds)
        dispatcher.register("application/pdf", cls.create_pdf_extractor(settings))
        dispatcher.register(
            "image/*",
            TesseractOcrAdapter(
                language=settings.ocr_language,
                timeout_seconds=settings.extraction_timeout_seconds,
            ),
        )
        dispatcher.register("text/plain", PlainTextAdapter())
        return dispatcher
