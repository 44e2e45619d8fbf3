"""
Entity to response mapping.

Relative image URLs are made absolute here, once, against the configured
public base URL. Stored URLs are never rewritten.
"""
from src.api.schemas.inquiry_schemas import HandlerResponse, InquiryResponse
from src.api.schemas.listing_schemas import (
    AddressResponse,
    ImageResponse,
    ListingResponse,
    ListingStatsResponse,
)
from src.application.interfaces.listing_repository import ListingSummary
from src.application.use_cases.manage_inquiries import InquiryView
from src.config import settings
from src.domain.entities.listing import Listing


def absolute_url(url: str, base_url: str) -> str:
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


def listing_to_response(listing: Listing, base_url: str | None = None) -> ListingResponse:
    base = base_url if base_url is not None else settings.public_base_url
    return ListingResponse(
        id=listing.id,
        owner_id=listing.owner_id,
        title=listing.title,
        description=listing.description,
        address=AddressResponse(
            street=listing.address.street,
            city=listing.address.city,
            state=listing.address.state,
            zip_code=listing.address.zip_code,
            country=listing.address.country,
        ),
        property_type=listing.property_type,
        transaction_status=listing.transaction_status,
        price=listing.price,
        size=listing.size,
        bedrooms=listing.bedrooms,
        bathrooms=listing.bathrooms,
        features=list(listing.features),
        images=[
            ImageResponse(url=absolute_url(image.url, base), public_id=image.public_id)
            for image in listing.images
        ],
        featured=listing.featured,
        published=listing.published,
        approved=listing.approved,
        rejection_reason=listing.rejection_reason,
        publication_state=listing.publication_state,
        views=listing.views,
        created_at=listing.created_at,
        updated_at=listing.updated_at,
    )


def stats_to_response(summary: ListingSummary) -> ListingStatsResponse:
    return ListingStatsResponse(
        total=summary.total,
        published=summary.published,
        pending=summary.pending,
        rejected=summary.rejected,
        by_transaction_status=dict(summary.by_transaction_status),
    )


def inquiry_to_response(view: InquiryView) -> InquiryResponse:
    inquiry = view.inquiry
    handler = view.handler
    return InquiryResponse(
        id=inquiry.id,
        listing_id=inquiry.listing_id,
        requester_id=inquiry.requester_id,
        original_owner_id=inquiry.original_owner_id,
        message=inquiry.message,
        phone=inquiry.phone,
        status=inquiry.status,
        response=inquiry.response,
        responded_at=inquiry.responded_at,
        created_at=inquiry.created_at,
        handler=(
            HandlerResponse(id=handler.id, name=handler.name, email=handler.email)
            if handler is not None
            else None
        ),
    )
