from enum import Enum


class TransactionStatus(str, Enum):
    """Deal stage of a listing. Orthogonal to its publication state."""

    FOR_SALE = "for-sale"
    FOR_RENT = "for-rent"
    SOLD = "sold"
    RENTED = "rented"


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    LAND = "land"
    COMMERCIAL = "commercial"


class PublicationState(str, Enum):
    """Derived from the (published, approved, rejection_reason) flags."""

    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"
