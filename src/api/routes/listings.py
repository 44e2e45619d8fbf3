from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_create_listing_use_case,
    get_delete_listing_use_case,
    get_featured_listings_use_case,
    get_get_listing_use_case,
    get_list_listings_use_case,
    get_listing_stats_use_case,
    get_pending_listings_use_case,
    get_review_listing_use_case,
    get_update_listing_use_case,
)
from src.api.presenters import listing_to_response, stats_to_response
from src.api.schemas.common import ErrorResponse, MessageResponse
from src.api.schemas.listing_schemas import (
    CreateListingRequest,
    ListingResponse,
    ListingStatsResponse,
    PaginatedListingsResponse,
    RejectListingRequest,
    ReviewListingRequest,
    UpdateListingRequest,
)
from src.api.security import get_optional_principal, get_principal
from src.application.use_cases.manage_listings import (
    CreateListing,
    CreateListingInput,
    DeleteListing,
    DeleteListingInput,
    ReviewListing,
    ReviewListingInput,
    UpdateListing,
    UpdateListingInput,
)
from src.application.use_cases.query_listings import (
    GetListing,
    GetListingInput,
    GetListingStats,
    ListFeaturedListings,
    ListingPage,
    ListListings,
    ListListingsInput,
    ListPendingListings,
    ListPendingListingsInput,
)
from src.config import settings
from src.domain.enums.listing_status import PropertyType, TransactionStatus
from src.domain.policies.listing_visibility import ListingFilters
from src.domain.principal import Principal

router = APIRouter(
    prefix="/listings",
    tags=["listings"],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)


def _page_to_response(page: ListingPage) -> PaginatedListingsResponse:
    return PaginatedListingsResponse(
        listings=[listing_to_response(l) for l in page.items],
        total=page.total,
        page=page.page,
        limit=page.limit,
        has_next=page.has_next,
        has_prev=page.has_prev,
    )


@router.get("", response_model=PaginatedListingsResponse)
async def list_listings(
    show_mine: bool = Query(default=False),
    transaction_status: TransactionStatus | None = Query(default=None),
    property_type: PropertyType | None = Query(default=None),
    min_price: Decimal | None = Query(default=None),
    max_price: Decimal | None = Query(default=None),
    bedrooms: int | None = Query(default=None),
    city: str | None = Query(default=None),
    owner: UUID | None = Query(default=None),
    search: str | None = Query(default=None),
    sort: str | None = Query(default=None),
    page: int = Query(default=1),
    limit: int = Query(default=settings.default_page_limit, le=settings.max_page_limit),
    principal: Principal | None = Depends(get_optional_principal),
    use_case: ListListings = Depends(get_list_listings_use_case),
) -> PaginatedListingsResponse:
    """List listings visible to the caller, filtered, sorted and paginated."""
    filters = ListingFilters(
        show_mine=show_mine,
        transaction_status=transaction_status,
        property_type=property_type,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        city=city,
        owner_id=owner,
        search=search,
        sort=sort,
        page=page,
        limit=limit,
    )
    result = await use_case.execute(ListListingsInput(principal=principal, filters=filters))
    return _page_to_response(result)


@router.get("/featured", response_model=list[ListingResponse])
async def list_featured_listings(
    use_case: ListFeaturedListings = Depends(get_featured_listings_use_case),
) -> list[ListingResponse]:
    listings = await use_case.execute()
    return [listing_to_response(l) for l in listings]


@router.get("/pending", response_model=PaginatedListingsResponse)
async def list_pending_listings(
    page: int = Query(default=1),
    limit: int = Query(default=settings.default_page_limit, le=settings.max_page_limit),
    principal: Principal = Depends(get_principal),
    use_case: ListPendingListings = Depends(get_pending_listings_use_case),
) -> PaginatedListingsResponse:
    """Admin review queue."""
    result = await use_case.execute(
        ListPendingListingsInput(principal=principal, page=page, limit=limit)
    )
    return _page_to_response(result)


@router.get("/stats", response_model=ListingStatsResponse)
async def get_listing_stats(
    principal: Principal = Depends(get_principal),
    use_case: GetListingStats = Depends(get_listing_stats_use_case),
) -> ListingStatsResponse:
    return stats_to_response(await use_case.execute(principal))


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: UUID,
    principal: Principal | None = Depends(get_optional_principal),
    use_case: GetListing = Depends(get_get_listing_use_case),
) -> ListingResponse:
    listing = await use_case.execute(GetListingInput(principal=principal, listing_id=listing_id))
    return listing_to_response(listing)


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def create_listing(
    body: CreateListingRequest,
    principal: Principal = Depends(get_principal),
    use_case: CreateListing = Depends(get_create_listing_use_case),
) -> ListingResponse:
    listing = await use_case.execute(
        CreateListingInput(
            principal=principal,
            title=body.title,
            description=body.description,
            address=body.address.model_dump(),
            property_type=body.property_type,
            transaction_status=body.transaction_status,
            price=body.price,
            size=body.size,
            bedrooms=body.bedrooms,
            bathrooms=body.bathrooms,
            features=body.features,
            images=[image.model_dump() for image in body.images],
            featured=body.featured,
        )
    )
    return listing_to_response(listing)


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: UUID,
    body: UpdateListingRequest,
    principal: Principal = Depends(get_principal),
    use_case: UpdateListing = Depends(get_update_listing_use_case),
) -> ListingResponse:
    listing = await use_case.execute(
        UpdateListingInput(
            principal=principal,
            listing_id=listing_id,
            changes=body.model_dump(exclude_unset=True),
        )
    )
    return listing_to_response(listing)


@router.delete("/{listing_id}", response_model=MessageResponse)
async def delete_listing(
    listing_id: UUID,
    principal: Principal = Depends(get_principal),
    use_case: DeleteListing = Depends(get_delete_listing_use_case),
) -> MessageResponse:
    await use_case.execute(DeleteListingInput(principal=principal, listing_id=listing_id))
    return MessageResponse(message="Listing removed.")


@router.put("/{listing_id}/approve", response_model=ListingResponse)
async def approve_listing(
    listing_id: UUID,
    principal: Principal = Depends(get_principal),
    use_case: ReviewListing = Depends(get_review_listing_use_case),
) -> ListingResponse:
    return listing_to_response(await use_case.approve(principal, listing_id))


@router.put("/{listing_id}/reject", response_model=ListingResponse)
async def reject_listing(
    listing_id: UUID,
    body: RejectListingRequest | None = None,
    principal: Principal = Depends(get_principal),
    use_case: ReviewListing = Depends(get_review_listing_use_case),
) -> ListingResponse:
    reason = body.reason if body is not None else None
    return listing_to_response(await use_case.reject(principal, listing_id, reason))


@router.put("/{listing_id}/review", response_model=ListingResponse)
async def review_listing(
    listing_id: UUID,
    body: ReviewListingRequest,
    principal: Principal = Depends(get_principal),
    use_case: ReviewListing = Depends(get_review_listing_use_case),
) -> ListingResponse:
    listing = await use_case.execute(
        ReviewListingInput(
            principal=principal,
            listing_id=listing_id,
            approved=body.approved,
            rejection_reason=body.rejection_reason,
        )
    )
    return listing_to_response(listing)
