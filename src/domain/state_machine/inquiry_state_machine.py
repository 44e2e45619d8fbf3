from src.domain.enums.inquiry_status import InquiryStatus
from src.domain.errors import ConflictError


# Mapping of valid transitions: from_status -> set of allowed to_statuses
VALID_TRANSITIONS: dict[InquiryStatus, frozenset[InquiryStatus]] = {
    InquiryStatus.PENDING: frozenset({InquiryStatus.RESPONDED, InquiryStatus.CLOSED}),
    # A second response replaces the first one
    InquiryStatus.RESPONDED: frozenset({InquiryStatus.RESPONDED, InquiryStatus.CLOSED}),
    InquiryStatus.CLOSED: frozenset(),
}


class InvalidStateTransitionError(ConflictError):
    """Raised when an invalid inquiry status transition is attempted."""

    def __init__(self, from_status: InquiryStatus, to_status: InquiryStatus) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid transition from {from_status.value} to {to_status.value}. "
            f"Allowed transitions: "
            f"{sorted(s.value for s in VALID_TRANSITIONS.get(from_status, frozenset()))}"
        )


class InquiryStateMachine:
    """
    Validates status changes for the inquiry workflow.

    Stateless; call validate_transition() with explicit statuses.
    """

    def can_transition(self, from_status: InquiryStatus, to_status: InquiryStatus) -> bool:
        if from_status.is_terminal:
            return False
        return to_status in VALID_TRANSITIONS.get(from_status, frozenset())

    def validate_transition(self, from_status: InquiryStatus, to_status: InquiryStatus) -> None:
        """Raise InvalidStateTransitionError if the transition is not permitted."""
        if not self.can_transition(from_status, to_status):
            raise InvalidStateTransitionError(from_status, to_status)
