"""
Listing visibility rules for collection reads.

compute_visibility() turns the caller and the requested filters into a
ListingQuery: a storage-agnostic predicate the listing repository executes.
The base rule depends only on who is asking; explicit filters narrow it.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from src.domain.enums.listing_status import PropertyType, TransactionStatus
from src.domain.errors import ValidationError
from src.domain.principal import Principal

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

SORTABLE_FIELDS: frozenset[str] = frozenset(
    {"created_at", "price", "views", "bedrooms", "bathrooms", "size", "title"}
)


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool = False


DEFAULT_SORT: tuple[SortKey, ...] = (SortKey("created_at", descending=True),)


def parse_sort(value: str | None) -> tuple[SortKey, ...]:
    """Parse ``"price,-created_at"`` into sort keys; empty means newest first."""
    if not value or not value.strip():
        return DEFAULT_SORT

    keys: list[SortKey] = []
    for raw in value.split(","):
        token = raw.strip()
        if not token:
            continue
        descending = token.startswith("-")
        name = token.lstrip("-+")
        if name not in SORTABLE_FIELDS:
            raise ValidationError(
                f"Cannot sort by {name!r}. Sortable fields: {sorted(SORTABLE_FIELDS)}"
            )
        keys.append(SortKey(name, descending))
    return tuple(keys) or DEFAULT_SORT


@dataclass(frozen=True)
class ListingFilters:
    """What the caller asked for. All fields are optional."""

    show_mine: bool = False
    transaction_status: TransactionStatus | None = None
    property_type: PropertyType | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    bedrooms: int | None = None
    city: str | None = None
    owner_id: UUID | None = None
    search: str | None = None
    sort: str | None = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class ListingQuery:
    """
    Effective predicate for a listing read.

    ``published`` and ``scope_owner_id`` come from the base visibility rule;
    the remaining fields are explicit filters. Every non-None field must hold.
    """

    published: bool | None = None
    scope_owner_id: UUID | None = None

    transaction_status: TransactionStatus | None = None
    property_type: PropertyType | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    bedrooms: int | None = None
    city: str | None = None
    owner_id: UUID | None = None
    search: str | None = None
    featured: bool | None = None

    sort: tuple[SortKey, ...] = field(default=DEFAULT_SORT)
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _clean(text: str | None) -> str | None:
    if text is None:
        return None
    text = text.strip()
    return text or None


def compute_visibility(principal: Principal | None, filters: ListingFilters) -> ListingQuery:
    if filters.page < 1:
        raise ValidationError("page must be at least 1.")
    if filters.limit < 1:
        raise ValidationError("limit must be at least 1.")

    published: bool | None = None
    scope_owner_id: UUID | None = None

    if principal is None or not (principal.is_agent or principal.is_admin):
        published = True
    elif principal.is_agent:
        if filters.show_mine:
            # Agents see all of their own listings, pending and rejected included
            scope_owner_id = principal.id
        else:
            published = True
    # Admins: no base restriction

    return ListingQuery(
        published=published,
        scope_owner_id=scope_owner_id,
        transaction_status=filters.transaction_status,
        property_type=filters.property_type,
        min_price=filters.min_price,
        max_price=filters.max_price,
        bedrooms=filters.bedrooms,
        city=_clean(filters.city),
        owner_id=filters.owner_id,
        search=_clean(filters.search),
        sort=parse_sort(filters.sort),
        page=filters.page,
        limit=filters.limit,
    )
