class ExtractionError(Exception):
    """Raised when an extractor cannot turn bytes into text."""


class ExtractionTimeoutError(ExtractionError):
    """Raised when an extractor exceeds its time budget."""
