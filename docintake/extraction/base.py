from abc import ABC, abstractmethod
from typing import ClassVar


class BaseExtractor(ABC):
    """Contract for all format-specific text extraction adapters."""

    # Cheap extractors run in the caller's thread, outside the timeout guard.
    runs_inline: ClassVar[bool] = False

    @abstractmethod
    def extract(self, file_bytes: bytes) -> str:
        """Extract plain text from raw file bytes.

        Args:
            file_bytes: Raw file content.

        Returns:
            Extracted text as a single normalized string.

        Raises:
            ExtractionError: if extraction fails for any reason.
        """
