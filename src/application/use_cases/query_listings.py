from dataclasses import dataclass
from uuid import UUID

import structlog

from src.application.interfaces.listing_repository import ListingRepository, ListingSummary
from src.domain.entities.listing import Listing
from src.domain.errors import AuthorizationError, ListingNotFoundError, ValidationError
from src.domain.policies.listing_visibility import (
    DEFAULT_LIMIT,
    ListingFilters,
    ListingQuery,
    compute_visibility,
)
from src.domain.principal import Principal, require_admin

logger = structlog.get_logger(__name__)


@dataclass
class ListingPage:
    items: list[Listing]
    total: int
    page: int
    limit: int

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total

    @property
    def has_prev(self) -> bool:
        return self.page > 1


@dataclass
class ListListingsInput:
    principal: Principal | None
    filters: ListingFilters


class ListListings:
    """Use case: Paginated listing search restricted to what the caller may see."""

    def __init__(self, listing_repo: ListingRepository) -> None:
        self._listing_repo = listing_repo

    async def execute(self, input_data: ListListingsInput) -> ListingPage:
        query = compute_visibility(input_data.principal, input_data.filters)
        items, total = await self._listing_repo.find(query)

        logger.debug(
            "listings_queried",
            principal_id=str(input_data.principal.id) if input_data.principal else None,
            published_only=query.published,
            scope_owner_id=str(query.scope_owner_id) if query.scope_owner_id else None,
            total=total,
        )
        return ListingPage(items=items, total=total, page=query.page, limit=query.limit)


@dataclass
class GetListingInput:
    principal: Principal | None
    listing_id: UUID


class GetListing:
    """
    Use case: Single listing lookup.

    Unpublished listings are visible to their owner and to admins only.
    Each successful read bumps the view counter with a plain
    read-modify-write, so concurrent reads can lose increments.
    """

    def __init__(self, listing_repo: ListingRepository) -> None:
        self._listing_repo = listing_repo

    async def execute(self, input_data: GetListingInput) -> Listing:
        listing = await self._listing_repo.get_by_id(input_data.listing_id)
        if listing is None:
            raise ListingNotFoundError(input_data.listing_id)

        listing.ensure_visible_to(input_data.principal)

        await self._listing_repo.update(listing.id, listing.record_view())
        return listing


class ListFeaturedListings:
    """Use case: Featured listings for the landing page. Published only."""

    def __init__(self, listing_repo: ListingRepository, limit: int = 6) -> None:
        self._listing_repo = listing_repo
        self._limit = limit

    async def execute(self) -> list[Listing]:
        items, _ = await self._listing_repo.find(
            ListingQuery(published=True, featured=True, limit=self._limit)
        )
        return items


@dataclass
class ListPendingListingsInput:
    principal: Principal
    page: int = 1
    limit: int = DEFAULT_LIMIT


class ListPendingListings:
    """Use case: Admin review queue of unpublished listings."""

    def __init__(self, listing_repo: ListingRepository) -> None:
        self._listing_repo = listing_repo

    async def execute(self, input_data: ListPendingListingsInput) -> ListingPage:
        require_admin(input_data.principal, "view pending listings")
        if input_data.page < 1 or input_data.limit < 1:
            raise ValidationError("page and limit must be at least 1.")

        query = ListingQuery(published=False, page=input_data.page, limit=input_data.limit)
        items, total = await self._listing_repo.find(query)
        return ListingPage(items=items, total=total, page=query.page, limit=query.limit)


class GetListingStats:
    """Use case: Dashboard counts. Admins see everything, agents their own listings."""

    def __init__(self, listing_repo: ListingRepository) -> None:
        self._listing_repo = listing_repo

    async def execute(self, principal: Principal) -> ListingSummary:
        if principal.is_admin:
            return await self._listing_repo.summarize()
        if principal.is_agent:
            return await self._listing_repo.summarize(owner_id=principal.id)
        raise AuthorizationError("Only agents and admins may view listing stats.")
