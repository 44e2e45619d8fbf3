from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.domain.enums.listing_status import PropertyType, PublicationState, TransactionStatus


# ---- Requests --------------------------------------------------------------

# Bounds follow the listings table columns
MAX_INT = 2_147_483_647


class AddressRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    street: str = Field(max_length=256)
    city: str = Field(max_length=128)
    state: str = Field(max_length=128)
    zip_code: str = Field(max_length=32)
    country: str = Field(default="USA", max_length=64)


class AddressPatchRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    street: str | None = Field(default=None, max_length=256)
    city: str | None = Field(default=None, max_length=128)
    state: str | None = Field(default=None, max_length=128)
    zip_code: str | None = Field(default=None, max_length=32)
    country: str | None = Field(default=None, max_length=64)


class ImageRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str
    public_id: str | None = None


class CreateListingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    description: str
    address: AddressRequest
    property_type: PropertyType
    transaction_status: TransactionStatus = TransactionStatus.FOR_SALE
    price: Decimal = Field(max_digits=14, decimal_places=2)
    size: int = Field(le=MAX_INT)
    bedrooms: int = Field(le=MAX_INT)
    bathrooms: Decimal = Field(max_digits=4, decimal_places=1)
    features: list[str] = []
    images: list[ImageRequest] = []
    featured: bool = False


class UpdateListingRequest(BaseModel):
    """Partial update. Only fields present in the body are applied."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    address: AddressPatchRequest | None = None
    property_type: PropertyType | None = None
    transaction_status: TransactionStatus | None = None
    price: Decimal | None = Field(default=None, max_digits=14, decimal_places=2)
    size: int | None = Field(default=None, le=MAX_INT)
    bedrooms: int | None = Field(default=None, le=MAX_INT)
    bathrooms: Decimal | None = Field(default=None, max_digits=4, decimal_places=1)
    features: list[str] | None = None
    images: list[ImageRequest] | None = None
    featured: bool | None = None
    published: bool | None = None


class ReviewListingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    approved: bool | None = None
    rejection_reason: str | None = None


class RejectListingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: str | None = None


# ---- Responses -------------------------------------------------------------

class AddressResponse(BaseModel):
    street: str
    city: str
    state: str
    zip_code: str
    country: str


class ImageResponse(BaseModel):
    url: str
    public_id: str


class ListingResponse(BaseModel):
    id: UUID
    owner_id: UUID | None
    title: str
    description: str
    address: AddressResponse
    property_type: PropertyType
    transaction_status: TransactionStatus
    price: Decimal
    size: int
    bedrooms: int
    bathrooms: Decimal
    features: list[str]
    images: list[ImageResponse]
    featured: bool
    published: bool
    approved: bool
    rejection_reason: str | None = None
    publication_state: PublicationState
    views: int
    created_at: datetime
    updated_at: datetime


class PaginatedListingsResponse(BaseModel):
    listings: list[ListingResponse]
    total: int
    page: int
    limit: int
    has_next: bool
    has_prev: bool


class ListingStatsResponse(BaseModel):
    total: int
    published: int
    pending: int
    rejected: int
    by_transaction_status: dict[str, int]
