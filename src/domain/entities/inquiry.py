from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from src.domain.entities.listing import Listing
from src.domain.enums.inquiry_status import InquiryStatus
from src.domain.errors import ValidationError
from src.domain.events.domain_events import (
    DomainEvent,
    InquiryCreatedEvent,
    InquiryStatusChangedEvent,
)
from src.domain.state_machine.inquiry_state_machine import InquiryStateMachine

_state_machine = InquiryStateMachine()

MESSAGE_MAX_LENGTH = 500


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def clean_message(message: str | None) -> str:
    """Trimmed inquiry text; empty or over-long messages are rejected."""
    text = (message or "").strip()
    if not text:
        raise ValidationError("Please add a message.")
    if len(text) > MESSAGE_MAX_LENGTH:
        raise ValidationError(f"Message cannot be more than {MESSAGE_MAX_LENGTH} characters.")
    return text


def parse_status(value: Any) -> InquiryStatus:
    """Accept exactly one of the enumerated status values."""
    try:
        return InquiryStatus(value)
    except ValueError:
        allowed = [s.value for s in InquiryStatus]
        raise ValidationError(f"Status must be one of {allowed}.") from None


@dataclass
class Inquiry:
    """
    A buyer's message about a listing, handled by an admin.

    ``original_owner_id`` is a snapshot of the listing owner at creation and
    is never resynchronized. The handling admin is not stored here.
    """

    id: UUID = field(default_factory=uuid4)
    listing_id: UUID = field(default_factory=uuid4)
    requester_id: UUID = field(default_factory=uuid4)
    original_owner_id: UUID | None = None

    message: str = ""
    phone: str | None = None
    status: InquiryStatus = InquiryStatus.PENDING
    response: str | None = None
    responded_at: datetime | None = None

    created_at: datetime = field(default_factory=_utcnow)

    _events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def create(
        cls,
        *,
        listing: Listing,
        requester_id: UUID,
        message: str,
        phone: str | None = None,
        handler_id: UUID | None = None,
    ) -> "Inquiry":
        text = clean_message(message)

        inquiry = cls(
            listing_id=listing.id,
            requester_id=requester_id,
            original_owner_id=listing.owner_id,
            message=text,
            phone=(phone or "").strip() or None,
        )
        inquiry._events.append(
            InquiryCreatedEvent(
                inquiry_id=inquiry.id,
                listing_id=listing.id,
                requester_id=requester_id,
                handler_id=handler_id,
            )
        )
        return inquiry

    def respond(self, message: str, responder_id: UUID) -> dict[str, Any]:
        text = (message or "").strip()
        if not text:
            raise ValidationError("Response message is required.")

        _state_machine.validate_transition(self.status, InquiryStatus.RESPONDED)
        from_status = self.status

        self.status = InquiryStatus.RESPONDED
        self.response = text
        self.responded_at = _utcnow()
        self._record_status_change(from_status, responder_id)
        return {
            "status": self.status,
            "response": self.response,
            "responded_at": self.responded_at,
        }

    def set_status(self, status: InquiryStatus | str, changed_by: UUID) -> dict[str, Any]:
        to_status = parse_status(status)
        _state_machine.validate_transition(self.status, to_status)
        from_status = self.status
        self.status = to_status
        self._record_status_change(from_status, changed_by)
        return {"status": self.status}

    def _record_status_change(self, from_status: InquiryStatus, changed_by: UUID) -> None:
        self._events.append(
            InquiryStatusChangedEvent(
                inquiry_id=self.id,
                from_status=from_status,
                to_status=self.status,
                changed_by=changed_by,
            )
        )

    def collect_events(self) -> list[DomainEvent]:
        events = list(self._events)
        self._events.clear()
        return events
