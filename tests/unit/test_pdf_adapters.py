import pytest

from docintake.extraction.base import BaseExtractor
from docintake.extraction.exceptions import ExtractionError
from docintake.extraction.pdfplumber_adapter import PdfPlumberAdapter
from docintake.extraction.pymupdf_adapter import PyMuPdfAdapter


@pytest.fixture(params=[PdfPlumberAdapter, PyMuPdfAdapter], ids=["pdfplumber", "pymupdf"])
def adapter(request: pytest.FixtureRequest) -> BaseExtractor:
    return request.param()


class TestPdfAdapters:
    def test_extract_returns_text(self, adapter: BaseExtractor, sample_pdf_bytes: bytes) -> None:
        result = adapter.extract(sample_pdf_bytes)
        assert isinstance(result, str)
        assert "Warranty Deed Parcel 42" in result

    def test_extract_multi_page(self, adapter: BaseExtractor, multi_page_pdf_bytes: bytes) -> None:
        result = adapter.extract(multi_page_pdf_bytes)
        assert "Page one content" in result
        assert "Page two content" in result

    def test_extract_empty_pdf_returns_empty_string(
        self, adapter: BaseExtractor, empty_pdf_bytes: bytes
    ) -> None:
        assert adapter.extract(empty_pdf_bytes) == ""

    def test_extract_raises_on_invalid_bytes(self, adapter: BaseExtractor) -> None:
        with pytest.raises(ExtractionError):
            adapter.extract(b"not a pdf")

    def test_extract_result_is_stripped(
        self, adapter: BaseExtractor, sample_pdf_bytes: bytes
    ) -> None:
        result = adapter.extract(sample_pdf_bytes)
        assert result == result.strip()
