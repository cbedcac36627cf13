from collections.abc import Iterable

from docintake.extraction.dispatcher import normalize_media_type
from docintake.processor.exceptions import InvalidRequest, PayloadTooLarge, UnsupportedMediaType
from docintake.processor.models import Submission


class SubmissionValidator:
    """Checks a submission against the configured size limit and media type allow-list."""

    def __init__(self, max_upload_bytes: int, allowed_media_types: Iterable[str]) -> None:
        self._max_upload_bytes = max_upload_bytes
        self._allowed_media_types = frozenset(
            normalize_media_type(media_type) for media_type in allowed_media_types
        )

    def validate(self, submission: Submission) -> None:
        """Reject the submission before anything is persisted.

        Raises:
            InvalidRequest: owner id or document type is blank, or byte_size is
                            negative or disagrees with the actual content length.
            PayloadTooLarge: byte_size exceeds the configured maximum.
            UnsupportedMediaType: media type is not allow-listed.
        """
        if not submission.owner_id or not submission.owner_id.strip():
            raise InvalidRequest("owner_id is required")
        if not submission.document_type or not submission.document_type.strip():
            raise InvalidRequest("document_type is required")
        if submission.byte_size < 0:
            raise InvalidRequest(f"byte_size must not be negative, got {submission.byte_size}")
        if submission.byte_size > self._max_upload_bytes:
            raise PayloadTooLarge(
                f"File is {submission.byte_size} bytes, "
                f"maximum is {self._max_upload_bytes} bytes"
            )
        if submission.byte_size != len(submission.file_bytes):
            raise InvalidRequest(
                f"byte_size {submission.byte_size} does not match "
                f"content length {len(submission.file_bytes)}"
            )
        if normalize_media_type(submission.media_type or "") not in self._allowed_media_types:
            raise UnsupportedMediaType(
                f"Media type '{submission.media_type}' is not allowed. "
                f"Allowed: {sorted(self._allowed_media_types)}"
            )
