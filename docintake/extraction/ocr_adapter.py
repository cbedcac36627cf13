import io

import pytesseract
from PIL import Image, ImageOps

from docintake.extraction.base import BaseExtractor
from docintake.extraction.exceptions import ExtractionError, ExtractionTimeoutError


class TesseractOcrAdapter(BaseExtractor):
    """Extracts text from raster images with Tesseract via pytesseract."""

    def __init__(self, language: str = "eng", timeout_seconds: float = 0) -> None:
        self._language = language
        self._timeout_seconds = timeout_seconds

    def extract(self, file_bytes: bytes) -> str:
        try:
            with Image.open(io.BytesIO(file_bytes)) as image:
                prepared = self._prepare(image)
                text = pytesseract.image_to_string(
                    prepared,
                    lang=self._language,
                    timeout=self._timeout_seconds,
                )
        except RuntimeError as exc:
            # pytesseract signals its own timeout with a bare RuntimeError
            if "timeout" in str(exc).lower():
                raise ExtractionTimeoutError(
                    f"tesseract exceeded {self._timeout_seconds}s"
                ) from exc
            raise ExtractionError(f"tesseract extraction failed: {exc}") from exc
        except Exception as exc:
            raise ExtractionError(f"tesseract extraction failed: {exc}") from exc
        return (text or "").strip()

    @staticmethod
    def _prepare(image: Image.Image) -> Image.Image:
        # Phone photos carry orientation in EXIF; palette/alpha modes confuse tesseract.
        image = ImageOps.exif_transpose(image)
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        return image
