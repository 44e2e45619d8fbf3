from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from src.domain.enums.inquiry_status import InquiryStatus
from src.domain.enums.listing_status import PublicationState


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ListingCreatedEvent(DomainEvent):
    """Published when an agent or admin creates a listing."""

    listing_id: UUID = field(default_factory=uuid4)
    owner_id: UUID | None = None
    publication_state: PublicationState = PublicationState.PENDING


@dataclass(frozen=True)
class ListingUpdatedEvent(DomainEvent):
    """Published after an owner or admin edits a listing."""

    listing_id: UUID = field(default_factory=uuid4)
    updated_by: UUID | None = None
    changed_fields: tuple[str, ...] = ()
    from_state: PublicationState = PublicationState.PENDING
    to_state: PublicationState = PublicationState.PENDING


@dataclass(frozen=True)
class ListingReviewedEvent(DomainEvent):
    """Published when an admin approves or rejects a listing."""

    listing_id: UUID = field(default_factory=uuid4)
    reviewed_by: UUID | None = None
    approved: bool = False
    rejection_reason: str | None = None
    from_state: PublicationState = PublicationState.PENDING
    to_state: PublicationState = PublicationState.PENDING


@dataclass(frozen=True)
class ListingDeletedEvent(DomainEvent):
    listing_id: UUID = field(default_factory=uuid4)
    deleted_by: UUID | None = None


@dataclass(frozen=True)
class InquiryCreatedEvent(DomainEvent):
    """Published when a buyer sends an inquiry; handler_id is the routed admin."""

    inquiry_id: UUID = field(default_factory=uuid4)
    listing_id: UUID = field(default_factory=uuid4)
    requester_id: UUID = field(default_factory=uuid4)
    handler_id: UUID | None = None


@dataclass(frozen=True)
class InquiryStatusChangedEvent(DomainEvent):
    inquiry_id: UUID = field(default_factory=uuid4)
    from_status: InquiryStatus = InquiryStatus.PENDING
    to_status: InquiryStatus = InquiryStatus.PENDING
    changed_by: UUID | None = None
