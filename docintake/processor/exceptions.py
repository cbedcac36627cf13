class IntakeError(Exception):
    """Base exception for all intake-related errors."""


class SubmissionValidationError(IntakeError):
    """Raised when a submission is rejected before anything is persisted."""

    code = "invalid_request"


class InvalidRequest(SubmissionValidationError):
    """Raised when a required field is missing or malformed."""

    code = "invalid_request"


class PayloadTooLarge(SubmissionValidationError):
    """Raised when the declared byte size exceeds the configured maximum."""

    code = "payload_too_large"


class UnsupportedMediaType(SubmissionValidationError):
    """Raised when the media type is not on the allow-list."""

    code = "unsupported_media_type"


class StorageError(IntakeError):
    """Raised when bytes or records cannot be persisted."""


class BlobNotFoundError(StorageError):
    """Raised when a storage reference points at missing bytes."""


class DocumentNotFoundError(IntakeError):
    """Raised when a document cannot be found in the record store."""


class InvalidStatusTransitionError(IntakeError):
    """Raised when a document status change is not allowed by the state machine."""
