import io

import pdfplumber

from docintake.extraction.base import BaseExtractor
from docintake.extraction.exceptions import ExtractionError


class PdfPlumberAdapter(BaseExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, file_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(file_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
            return "\n".join(pages).strip()
        except Exception as exc:
            raise ExtractionError(f"pdfplumber extraction failed: {exc}") from exc
