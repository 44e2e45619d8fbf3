"""
FastAPI dependency injection wiring.

Each dependency function returns a fully-constructed object with its
collaborators injected, keeping the route handlers thin.
"""
from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.account_repository import AccountRepository
from src.application.interfaces.event_publisher import EventPublisher
from src.application.interfaces.inquiry_repository import InquiryRepository
from src.application.interfaces.listing_repository import ListingRepository
from src.application.interfaces.responsible_party_resolver import ResponsiblePartyResolver
from src.application.use_cases.manage_favorites import (
    AddFavorite,
    ListFavorites,
    RemoveFavorite,
    ToggleFavorite,
)
from src.application.use_cases.manage_inquiries import (
    CreateInquiry,
    DeleteInquiry,
    ListInquiriesForListing,
    ListOwnInquiries,
    RespondToInquiry,
    SetInquiryStatus,
)
from src.application.use_cases.manage_listings import (
    CreateListing,
    DeleteListing,
    ReviewListing,
    UpdateListing,
)
from src.application.use_cases.query_listings import (
    GetListing,
    GetListingStats,
    ListFeaturedListings,
    ListListings,
    ListPendingListings,
)
from src.config import settings
from src.infrastructure.database.connection import get_db_session
from src.infrastructure.database.repositories.account_repository import (
    SqlAlchemyAccountRepository,
)
from src.infrastructure.database.repositories.inquiry_repository import (
    SqlAlchemyInquiryRepository,
)
from src.infrastructure.database.repositories.listing_repository import (
    SqlAlchemyListingRepository,
)
from src.infrastructure.messaging.factory import build_event_publisher
from src.infrastructure.routing.admin_resolver import FirstAdminResolver


# ---- Low-level dependencies ------------------------------------------------

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db_session():
        yield session


def get_listing_repo(session: AsyncSession = Depends(get_session)) -> ListingRepository:
    return SqlAlchemyListingRepository(session)


def get_account_repo(session: AsyncSession = Depends(get_session)) -> AccountRepository:
    return SqlAlchemyAccountRepository(session)


def get_inquiry_repo(session: AsyncSession = Depends(get_session)) -> InquiryRepository:
    return SqlAlchemyInquiryRepository(session)


def get_event_publisher() -> EventPublisher:
    return build_event_publisher()


def get_resolver(
    account_repo: AccountRepository = Depends(get_account_repo),
) -> ResponsiblePartyResolver:
    return FirstAdminResolver(account_repo)


# ---- Listing use cases -----------------------------------------------------

def get_list_listings_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
) -> ListListings:
    return ListListings(listing_repo)


def get_get_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
) -> GetListing:
    return GetListing(listing_repo)


def get_featured_listings_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
) -> ListFeaturedListings:
    return ListFeaturedListings(listing_repo, limit=settings.featured_limit)


def get_pending_listings_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
) -> ListPendingListings:
    return ListPendingListings(listing_repo)


def get_listing_stats_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
) -> GetListingStats:
    return GetListingStats(listing_repo)


def get_create_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> CreateListing:
    return CreateListing(listing_repo, event_publisher)


def get_update_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> UpdateListing:
    return UpdateListing(listing_repo, event_publisher)


def get_delete_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> DeleteListing:
    return DeleteListing(listing_repo, event_publisher)


def get_review_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> ReviewListing:
    return ReviewListing(listing_repo, event_publisher)


# ---- Favorite use cases ----------------------------------------------------

def get_add_favorite_use_case(
    account_repo: AccountRepository = Depends(get_account_repo),
    listing_repo: ListingRepository = Depends(get_listing_repo),
) -> AddFavorite:
    return AddFavorite(account_repo, listing_repo)


def get_remove_favorite_use_case(
    account_repo: AccountRepository = Depends(get_account_repo),
) -> RemoveFavorite:
    return RemoveFavorite(account_repo)


def get_toggle_favorite_use_case(
    account_repo: AccountRepository = Depends(get_account_repo),
) -> ToggleFavorite:
    return ToggleFavorite(account_repo)


def get_list_favorites_use_case(
    account_repo: AccountRepository = Depends(get_account_repo),
    listing_repo: ListingRepository = Depends(get_listing_repo),
) -> ListFavorites:
    return ListFavorites(account_repo, listing_repo)


# ---- Inquiry use cases -----------------------------------------------------

def get_create_inquiry_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    inquiry_repo: InquiryRepository = Depends(get_inquiry_repo),
    account_repo: AccountRepository = Depends(get_account_repo),
    resolver: ResponsiblePartyResolver = Depends(get_resolver),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> CreateInquiry:
    return CreateInquiry(listing_repo, inquiry_repo, account_repo, resolver, event_publisher)


def get_respond_to_inquiry_use_case(
    inquiry_repo: InquiryRepository = Depends(get_inquiry_repo),
    resolver: ResponsiblePartyResolver = Depends(get_resolver),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> RespondToInquiry:
    return RespondToInquiry(inquiry_repo, resolver, event_publisher)


def get_set_inquiry_status_use_case(
    inquiry_repo: InquiryRepository = Depends(get_inquiry_repo),
    resolver: ResponsiblePartyResolver = Depends(get_resolver),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> SetInquiryStatus:
    return SetInquiryStatus(inquiry_repo, resolver, event_publisher)


def get_listing_inquiries_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    inquiry_repo: InquiryRepository = Depends(get_inquiry_repo),
    resolver: ResponsiblePartyResolver = Depends(get_resolver),
) -> ListInquiriesForListing:
    return ListInquiriesForListing(listing_repo, inquiry_repo, resolver)


def get_own_inquiries_use_case(
    inquiry_repo: InquiryRepository = Depends(get_inquiry_repo),
    resolver: ResponsiblePartyResolver = Depends(get_resolver),
) -> ListOwnInquiries:
    return ListOwnInquiries(inquiry_repo, resolver)


def get_delete_inquiry_use_case(
    inquiry_repo: InquiryRepository = Depends(get_inquiry_repo),
) -> DeleteInquiry:
    return DeleteInquiry(inquiry_repo)
