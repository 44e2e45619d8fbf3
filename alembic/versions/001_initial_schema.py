"""initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID

from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    transaction_status = sa.Enum(
        "for-sale", "for-rent", "sold", "rented", name="transaction_status"
    )
    property_type = sa.Enum(
        "apartment", "house", "condo", "townhouse", "land", "commercial", name="property_type"
    )
    account_role = sa.Enum("user", "agent", "admin", name="account_role")
    inquiry_status = sa.Enum("pending", "responded", "closed", name="inquiry_status")
    for enum in (transaction_status, property_type, account_role, inquiry_status):
        enum.create(op.get_bind(), checkfirst=True)

    # Listings; address is stored flat
    op.create_table(
        "listings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_id", UUID(as_uuid=True), nullable=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("street", sa.String(256), nullable=False),
        sa.Column("city", sa.String(128), nullable=False),
        sa.Column("state", sa.String(128), nullable=False),
        sa.Column("zip_code", sa.String(32), nullable=False),
        sa.Column("country", sa.String(64), nullable=False, server_default="USA"),
        sa.Column("property_type", property_type, nullable=False),
        sa.Column("transaction_status", transaction_status, nullable=False),
        sa.Column("price", sa.Numeric(14, 2), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("bedrooms", sa.Integer(), nullable=False),
        sa.Column("bathrooms", sa.Numeric(4, 1), nullable=False),
        sa.Column("features", JSONB, nullable=False, server_default=sa.text("'[]'")),
        sa.Column("images", JSONB, nullable=False, server_default=sa.text("'[]'")),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        # Publication flags
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_listings_owner_id", "listings", ["owner_id"])
    op.create_index("ix_listings_city", "listings", ["city"])
    op.create_index("ix_listings_transaction_status", "listings", ["transaction_status"])
    op.create_index("ix_listings_price", "listings", ["price"])
    op.create_index("ix_listings_published", "listings", ["published"])
    op.create_index("ix_listings_published_created_at", "listings", ["published", "created_at"])

    op.create_table(
        "accounts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("role", account_role, nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("phone", sa.String(64), nullable=True),
        sa.Column("favorites", JSONB, nullable=False, server_default=sa.text("'[]'")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_accounts_role", "accounts", ["role"])

    # No foreign keys: owner and listing references are weak
    op.create_table(
        "inquiries",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("listing_id", UUID(as_uuid=True), nullable=False),
        sa.Column("requester_id", UUID(as_uuid=True), nullable=False),
        sa.Column("original_owner_id", UUID(as_uuid=True), nullable=True),
        sa.Column("message", sa.String(500), nullable=False),
        sa.Column("phone", sa.String(64), nullable=True),
        sa.Column("status", inquiry_status, nullable=False),
        sa.Column("response", sa.Text(), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_inquiries_listing_id", "inquiries", ["listing_id"])
    op.create_index("ix_inquiries_requester_id", "inquiries", ["requester_id"])


def downgrade() -> None:
    op.drop_table("inquiries")
    op.drop_table("accounts")
    op.drop_table("listings")
    for name in ("inquiry_status", "account_role", "property_type", "transaction_status"):
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
