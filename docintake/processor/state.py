"""Document lifecycle: pending -> processing -> {processed, failed}."""

from docintake.processor.exceptions import InvalidStatusTransitionError
from docintake.processor.models import DocumentStatus

ALLOWED_TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.PENDING: frozenset({DocumentStatus.PROCESSING, DocumentStatus.FAILED}),
    DocumentStatus.PROCESSING: frozenset({DocumentStatus.PROCESSED, DocumentStatus.FAILED}),
    DocumentStatus.PROCESSED: frozenset(),
    DocumentStatus.FAILED: frozenset(),
}


def check_transition(current: DocumentStatus, target: DocumentStatus) -> None:
    """Raise InvalidStatusTransitionError unless current -> target is allowed."""
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransitionError(
            f"Cannot move document from '{current}' to '{target}'"
        )
