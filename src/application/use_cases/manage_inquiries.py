from dataclasses import dataclass
from uuid import UUID

import structlog

from src.application.interfaces.account_repository import AccountRepository
from src.application.interfaces.event_publisher import EventPublisher
from src.application.interfaces.inquiry_repository import InquiryRepository
from src.application.interfaces.listing_repository import ListingRepository
from src.application.interfaces.responsible_party_resolver import ResponsiblePartyResolver
from src.domain.entities.account import Account
from src.domain.entities.inquiry import Inquiry, clean_message, parse_status
from src.domain.enums.inquiry_status import InquiryStatus
from src.domain.errors import (
    DependencyUnavailableError,
    InquiryNotFoundError,
    ListingNotFoundError,
)
from src.domain.principal import Principal, require_admin

logger = structlog.get_logger(__name__)


@dataclass
class InquiryView:
    """An inquiry together with the admin handling it, resolved at read time."""

    inquiry: Inquiry
    handler: Account | None


@dataclass
class CreateInquiryInput:
    principal: Principal
    listing_id: UUID
    message: str
    phone: str | None = None


class CreateInquiry:
    """
    Use case: Send an inquiry about a listing.

    Inquiries are routed to an admin, never to the listing owner; the owner
    at this instant is only recorded as a snapshot. Creation is impossible
    while no admin exists.
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        inquiry_repo: InquiryRepository,
        account_repo: AccountRepository,
        resolver: ResponsiblePartyResolver,
        event_publisher: EventPublisher,
    ) -> None:
        self._listing_repo = listing_repo
        self._inquiry_repo = inquiry_repo
        self._account_repo = account_repo
        self._resolver = resolver
        self._event_publisher = event_publisher

    async def execute(self, input_data: CreateInquiryInput) -> InquiryView:
        clean_message(input_data.message)

        listing = await self._listing_repo.get_by_id(input_data.listing_id)
        if listing is None:
            raise ListingNotFoundError(input_data.listing_id)

        handler = await self._resolver.resolve()
        if handler is None:
            logger.error("inquiry_handler_unavailable", listing_id=str(listing.id))
            raise DependencyUnavailableError("No admin found to handle this inquiry.")

        phone = input_data.phone
        if not phone:
            requester = await self._account_repo.get_by_id(input_data.principal.id)
            phone = requester.phone if requester is not None else None

        inquiry = Inquiry.create(
            listing=listing,
            requester_id=input_data.principal.id,
            message=input_data.message,
            phone=phone,
            handler_id=handler.id,
        )

        await self._inquiry_repo.add(inquiry)
        await self._event_publisher.publish_many(inquiry.collect_events())

        logger.info(
            "inquiry_created",
            inquiry_id=str(inquiry.id),
            listing_id=str(listing.id),
            requester_id=str(inquiry.requester_id),
            handler_id=str(handler.id),
        )
        return InquiryView(inquiry=inquiry, handler=handler)


@dataclass
class RespondToInquiryInput:
    principal: Principal
    inquiry_id: UUID
    message: str


class RespondToInquiry:
    """Use case: Admin reply. Marks the inquiry responded and stamps the time."""

    def __init__(
        self,
        inquiry_repo: InquiryRepository,
        resolver: ResponsiblePartyResolver,
        event_publisher: EventPublisher,
    ) -> None:
        self._inquiry_repo = inquiry_repo
        self._resolver = resolver
        self._event_publisher = event_publisher

    async def execute(self, input_data: RespondToInquiryInput) -> InquiryView:
        require_admin(input_data.principal, "respond to inquiries")

        inquiry = await self._inquiry_repo.get_by_id(input_data.inquiry_id)
        if inquiry is None:
            raise InquiryNotFoundError(input_data.inquiry_id)

        patch = inquiry.respond(input_data.message, responder_id=input_data.principal.id)

        if not await self._inquiry_repo.update(inquiry.id, patch):
            raise InquiryNotFoundError(inquiry.id)
        await self._event_publisher.publish_many(inquiry.collect_events())

        logger.info(
            "inquiry_responded",
            inquiry_id=str(inquiry.id),
            responded_by=str(input_data.principal.id),
        )
        return InquiryView(inquiry=inquiry, handler=await self._resolver.resolve())


@dataclass
class SetInquiryStatusInput:
    principal: Principal
    inquiry_id: UUID
    status: InquiryStatus | str


class SetInquiryStatus:
    """Use case: Admin sets the status directly, e.g. closing without a response."""

    def __init__(
        self,
        inquiry_repo: InquiryRepository,
        resolver: ResponsiblePartyResolver,
        event_publisher: EventPublisher,
    ) -> None:
        self._inquiry_repo = inquiry_repo
        self._resolver = resolver
        self._event_publisher = event_publisher

    async def execute(self, input_data: SetInquiryStatusInput) -> InquiryView:
        require_admin(input_data.principal, "change inquiry status")
        to_status = parse_status(input_data.status)

        inquiry = await self._inquiry_repo.get_by_id(input_data.inquiry_id)
        if inquiry is None:
            raise InquiryNotFoundError(input_data.inquiry_id)

        from_status = inquiry.status
        patch = inquiry.set_status(to_status, changed_by=input_data.principal.id)

        if not await self._inquiry_repo.update(inquiry.id, patch):
            raise InquiryNotFoundError(inquiry.id)
        await self._event_publisher.publish_many(inquiry.collect_events())

        logger.info(
            "inquiry_status_changed",
            inquiry_id=str(inquiry.id),
            from_status=from_status.value,
            to_status=to_status.value,
        )
        return InquiryView(inquiry=inquiry, handler=await self._resolver.resolve())


class ListInquiriesForListing:
    """Use case: All inquiries about one listing, newest first (admin only)."""

    def __init__(
        self,
        listing_repo: ListingRepository,
        inquiry_repo: InquiryRepository,
        resolver: ResponsiblePartyResolver,
    ) -> None:
        self._listing_repo = listing_repo
        self._inquiry_repo = inquiry_repo
        self._resolver = resolver

    async def execute(self, principal: Principal, listing_id: UUID) -> list[InquiryView]:
        require_admin(principal, "view inquiries for a listing")

        if await self._listing_repo.get_by_id(listing_id) is None:
            raise ListingNotFoundError(listing_id)

        inquiries = await self._inquiry_repo.list_for_listing(listing_id)
        handler = await self._resolver.resolve()
        return [InquiryView(inquiry=i, handler=handler) for i in inquiries]


class ListOwnInquiries:
    """Use case: Inquiries the caller has sent, newest first."""

    def __init__(self, inquiry_repo: InquiryRepository, resolver: ResponsiblePartyResolver) -> None:
        self._inquiry_repo = inquiry_repo
        self._resolver = resolver

    async def execute(self, principal: Principal) -> list[InquiryView]:
        inquiries = await self._inquiry_repo.list_for_requester(principal.id)
        handler = await self._resolver.resolve()
        return [InquiryView(inquiry=i, handler=handler) for i in inquiries]


class DeleteInquiry:
    """Use case: Admin removes an inquiry."""

    def __init__(self, inquiry_repo: InquiryRepository) -> None:
        self._inquiry_repo = inquiry_repo

    async def execute(self, principal: Principal, inquiry_id: UUID) -> None:
        require_admin(principal, "delete inquiries")

        if not await self._inquiry_repo.delete(inquiry_id):
            raise InquiryNotFoundError(inquiry_id)

        logger.info("inquiry_deleted", inquiry_id=str(inquiry_id), deleted_by=str(principal.id))
