"""
SQLAlchemy ORM models.

These are purely infrastructure concerns. Domain entities are mapped to/from
these models inside the repository implementations. Owner, requester and
listing references are plain ids without foreign keys: deleting an account
or a listing never cascades.
"""
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum as SAEnum,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.domain.enums.inquiry_status import InquiryStatus
from src.domain.enums.listing_status import PropertyType, TransactionStatus
from src.domain.enums.role import Role
from src.infrastructure.database.connection import Base


def _values_enum(enum_cls: type, name: str) -> SAEnum:
    return SAEnum(enum_cls, name=name, values_callable=lambda obj: [e.value for e in obj])


_transaction_status_enum = _values_enum(TransactionStatus, "transaction_status")
_property_type_enum = _values_enum(PropertyType, "property_type")
_role_enum = _values_enum(Role, "account_role")
_inquiry_status_enum = _values_enum(InquiryStatus, "inquiry_status")

_json = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ListingModel(Base):
    __tablename__ = "listings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Address
    street: Mapped[str] = mapped_column(String(256), nullable=False)
    city: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(128), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(32), nullable=False)
    country: Mapped[str] = mapped_column(String(64), nullable=False, default="USA")

    property_type: Mapped[PropertyType] = mapped_column(_property_type_enum, nullable=False)
    transaction_status: Mapped[TransactionStatus] = mapped_column(
        _transaction_status_enum, nullable=False, index=True
    )
    price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, index=True)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    bathrooms: Mapped[Decimal] = mapped_column(Numeric(4, 1), nullable=False)
    features: Mapped[list] = mapped_column(_json, nullable=False, default=list)  # type: ignore[type-arg]
    images: Mapped[list] = mapped_column(_json, nullable=False, default=list)  # type: ignore[type-arg]
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Publication
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    __table_args__ = (
        Index("ix_listings_published_created_at", "published", "created_at"),
    )


class AccountModel(Base):
    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    role: Mapped[Role] = mapped_column(_role_enum, nullable=False, index=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # Listing ids as strings, insertion ordered
    favorites: Mapped[list] = mapped_column(_json, nullable=False, default=list)  # type: ignore[type-arg]
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )


class InquiryModel(Base):
    __tablename__ = "inquiries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    listing_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    requester_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    original_owner_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    message: Mapped[str] = mapped_column(String(500), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[InquiryStatus] = mapped_column(_inquiry_status_enum, nullable=False)
    response: Mapped[str | None] = mapped_column(Text, nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
