from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any
from uuid import UUID

import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.application.interfaces.listing_repository import ListingRepository
from src.domain.entities.listing import Address, Listing
from src.domain.enums.listing_status import PropertyType, TransactionStatus
from src.domain.errors import ListingNotFoundError
from src.domain.principal import Principal, require_admin

logger = structlog.get_logger(__name__)


@dataclass
class CreateListingInput:
    principal: Principal
    title: str
    description: str
    address: Address | Mapping[str, Any]
    property_type: PropertyType | str
    price: Decimal | float | int | str
    size: int
    bedrooms: int
    bathrooms: Decimal | float | int | str
    transaction_status: TransactionStatus | str = TransactionStatus.FOR_SALE
    features: list[str] = field(default_factory=list)
    images: list[Mapping[str, Any]] = field(default_factory=list)
    featured: bool = False


class CreateListing:
    """
    Use case: Create a listing owned by the caller.

    The caller's role decides the initial publication state: agents start
    pending review, admins are published immediately.
    """

    def __init__(self, listing_repo: ListingRepository, event_publisher: EventPublisher) -> None:
        self._listing_repo = listing_repo
        self._event_publisher = event_publisher

    async def execute(self, input_data: CreateListingInput) -> Listing:
        listing = Listing.create(
            creator=input_data.principal,
            title=input_data.title,
            description=input_data.description,
            address=input_data.address,
            property_type=input_data.property_type,
            transaction_status=input_data.transaction_status,
            price=input_data.price,
            size=input_data.size,
            bedrooms=input_data.bedrooms,
            bathrooms=input_data.bathrooms,
            features=input_data.features,
            images=input_data.images,
            featured=input_data.featured,
        )

        await self._listing_repo.add(listing)
        await self._event_publisher.publish_many(listing.collect_events())

        logger.info(
            "listing_created",
            listing_id=str(listing.id),
            owner_id=str(listing.owner_id),
            publication_state=listing.publication_state.value,
            image_count=len(listing.images),
        )
        return listing


@dataclass
class UpdateListingInput:
    principal: Principal
    listing_id: UUID
    changes: Mapping[str, Any]


class UpdateListing:
    """
    Use case: Apply an allow-listed patch to a listing.

    Only the owner or an admin may update. An agent's edit always returns the
    listing to review, whatever ``published`` value was requested.
    """

    def __init__(self, listing_repo: ListingRepository, event_publisher: EventPublisher) -> None:
        self._listing_repo = listing_repo
        self._event_publisher = event_publisher

    async def execute(self, input_data: UpdateListingInput) -> Listing:
        listing = await self._listing_repo.get_by_id(input_data.listing_id)
        if listing is None:
            raise ListingNotFoundError(input_data.listing_id)

        patch = listing.apply_update(input_data.changes, editor=input_data.principal)

        if not await self._listing_repo.update(listing.id, patch):
            raise ListingNotFoundError(listing.id)
        await self._event_publisher.publish_many(listing.collect_events())

        logger.info(
            "listing_updated",
            listing_id=str(listing.id),
            updated_by=str(input_data.principal.id),
            fields=sorted(input_data.changes),
            published=listing.published,
            approved=listing.approved,
        )
        return listing


@dataclass
class DeleteListingInput:
    principal: Principal
    listing_id: UUID


class DeleteListing:
    """Use case: Remove a listing. Owner or admin only; no tombstone is kept."""

    def __init__(self, listing_repo: ListingRepository, event_publisher: EventPublisher) -> None:
        self._listing_repo = listing_repo
        self._event_publisher = event_publisher

    async def execute(self, input_data: DeleteListingInput) -> None:
        listing = await self._listing_repo.get_by_id(input_data.listing_id)
        if listing is None:
            raise ListingNotFoundError(input_data.listing_id)

        listing.mark_deleted(input_data.principal)

        if not await self._listing_repo.delete(listing.id):
            raise ListingNotFoundError(listing.id)
        await self._event_publisher.publish_many(listing.collect_events())

        logger.info(
            "listing_deleted",
            listing_id=str(listing.id),
            deleted_by=str(input_data.principal.id),
        )


@dataclass
class ReviewListingInput:
    principal: Principal
    listing_id: UUID
    approved: bool | None
    rejection_reason: str | None = None


class ReviewListing:
    """
    Use case: Approve or reject a listing (admin only).

    Approval publishes the listing and clears any rejection reason; rejection
    unpublishes it and stores the reason, if one was given. Both outcomes are
    persisted as a single patch.
    """

    def __init__(self, listing_repo: ListingRepository, event_publisher: EventPublisher) -> None:
        self._listing_repo = listing_repo
        self._event_publisher = event_publisher

    async def execute(self, input_data: ReviewListingInput) -> Listing:
        require_admin(input_data.principal, "approve or reject listings")

        listing = await self._listing_repo.get_by_id(input_data.listing_id)
        if listing is None:
            raise ListingNotFoundError(input_data.listing_id)

        from_state = listing.publication_state
        patch = listing.review(
            input_data.principal,
            approved=input_data.approved,
            rejection_reason=input_data.rejection_reason,
        )

        if not await self._listing_repo.update(listing.id, patch):
            raise ListingNotFoundError(listing.id)
        await self._event_publisher.publish_many(listing.collect_events())

        logger.info(
            "listing_reviewed",
            listing_id=str(listing.id),
            reviewed_by=str(input_data.principal.id),
            from_state=from_state.value,
            to_state=listing.publication_state.value,
        )
        return listing

    async def approve(self, principal: Principal, listing_id: UUID) -> Listing:
        return await self.execute(
            ReviewListingInput(principal=principal, listing_id=listing_id, approved=True)
        )

    async def reject(
        self, principal: Principal, listing_id: UUID, reason: str | None = None
    ) -> Listing:
        return await self.execute(
            ReviewListingInput(
                principal=principal,
                listing_id=listing_id,
                approved=False,
                rejection_reason=reason,
            )
        )
