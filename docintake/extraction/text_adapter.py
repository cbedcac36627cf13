from docintake.extraction.base import BaseExtractor


class PlainTextAdapter(BaseExtractor):
    """Decodes text/plain uploads, replacing invalid byte sequences."""

    runs_inline = True

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def extract(self, file_bytes: bytes) -> str:
        return file_bytes.decode(self._encoding, errors="replace")
