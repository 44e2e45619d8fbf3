from enum import Enum


class InquiryStatus(str, Enum):
    """All possible states of an inquiry."""

    PENDING = "pending"
    RESPONDED = "responded"
    CLOSED = "closed"

    @property
    def is_terminal(self) -> bool:
        """Closed inquiries cannot be reopened."""
        return self is InquiryStatus.CLOSED
