import secrets
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID, uuid4

from src.domain.enums.listing_status import PropertyType, PublicationState, TransactionStatus
from src.domain.errors import AuthorizationError, ValidationError
from src.domain.events.domain_events import (
    DomainEvent,
    ListingCreatedEvent,
    ListingDeletedEvent,
    ListingReviewedEvent,
    ListingUpdatedEvent,
)
from src.domain.principal import Principal
from src.domain.state_machine.publication_state_machine import (
    PublicationFlags,
    PublicationStateMachine,
)

_state_machine = PublicationStateMachine()

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 2000
UPLOADS_PREFIX = "/uploads/"

# Fields an owner or admin may change through an update. Anything else is rejected.
UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "title",
        "description",
        "address",
        "property_type",
        "transaction_status",
        "price",
        "size",
        "bedrooms",
        "bathrooms",
        "features",
        "images",
        "featured",
        "published",
    }
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Address:
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = "USA"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: "Address | None" = None) -> "Address":
        """Build an address, keeping fields of ``base`` that ``data`` leaves out."""
        unknown = set(data) - {"street", "city", "state", "zip_code", "country"}
        if unknown:
            raise ValidationError(f"Unknown address fields: {sorted(unknown)}")
        values = {k: str(v).strip() for k, v in data.items() if v is not None}
        return replace(base or cls(), **values)


@dataclass(frozen=True)
class ListingImage:
    """A stored image reference as returned by the image storage service."""

    url: str
    public_id: str


# -----------------------------------------------------------------------------
# Image normalization
# -----------------------------------------------------------------------------


def _temp_public_id() -> str:
    return f"temp_{int(time.time() * 1000)}_{secrets.token_hex(6)}"


def _is_absolute(url: str) -> bool:
    return url.startswith("http://") or url.startswith("https://")


def _image_parts(image: Mapping[str, Any] | ListingImage) -> tuple[str, str | None]:
    if isinstance(image, ListingImage):
        return image.url, image.public_id
    url = str(image.get("url") or "").strip()
    public_id = image.get("public_id")
    return url, (str(public_id) if public_id else None)


def normalize_images_for_create(
    images: Iterable[Mapping[str, Any] | ListingImage],
) -> list[ListingImage]:
    """Bare filenames are moved under /uploads/; a missing public_id gets a temp id."""
    normalized: list[ListingImage] = []
    for image in images:
        url, public_id = _image_parts(image)
        if not url:
            raise ValidationError("Every image needs a url.")
        if not _is_absolute(url) and "/" not in url:
            url = f"{UPLOADS_PREFIX}{url}"
        normalized.append(ListingImage(url=url, public_id=public_id or _temp_public_id()))
    return normalized


def normalize_images_for_update(
    images: Iterable[Mapping[str, Any] | ListingImage],
) -> list[ListingImage]:
    """A missing public_id is taken from the last URL segment when possible."""
    normalized: list[ListingImage] = []
    for image in images:
        url, public_id = _image_parts(image)
        if not url:
            raise ValidationError("Every image needs a url.")
        if not public_id:
            public_id = url.rstrip("/").rsplit("/", 1)[-1] or _temp_public_id()
        normalized.append(ListingImage(url=url, public_id=public_id))
    return normalized


# -----------------------------------------------------------------------------
# Field coercion
# -----------------------------------------------------------------------------


def _require_text(name: str, value: Any, max_length: int) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{name} is required.")
    if len(text) > max_length:
        raise ValidationError(f"{name} cannot be more than {max_length} characters.")
    return text


def _non_negative_int(name: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer.") from None
    if number < 0:
        raise ValidationError(f"{name} cannot be negative.")
    return number


def _non_negative_decimal(name: str, value: Any) -> Decimal:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{name} must be a number.") from None
    if number < 0:
        raise ValidationError(f"{name} cannot be negative.")
    return number


def _enum_value(enum_cls: type, name: str, value: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [member.value for member in enum_cls]  # type: ignore[attr-defined]
        raise ValidationError(f"{name} must be one of {allowed}.") from None


def _validate_address(address: Address) -> Address:
    for name in ("street", "city", "state", "zip_code", "country"):
        if not getattr(address, name):
            raise ValidationError(f"address.{name} is required.")
    return address


@dataclass
class Listing:
    """
    A property listing and its publication/approval state.

    The publication flags are only ever changed through the methods below,
    which consult the PublicationStateMachine. Each mutating method returns
    the patch to persist as a single update and records a domain event.
    """

    # Identity
    id: UUID = field(default_factory=uuid4)
    owner_id: UUID | None = None

    # Property data
    title: str = ""
    description: str = ""
    address: Address = field(default_factory=Address)
    property_type: PropertyType = PropertyType.HOUSE
    transaction_status: TransactionStatus = TransactionStatus.FOR_SALE
    price: Decimal = Decimal("0")
    size: int = 0
    bedrooms: int = 0
    bathrooms: Decimal = Decimal("0")
    features: list[str] = field(default_factory=list)
    images: list[ListingImage] = field(default_factory=list)
    featured: bool = False

    # Publication
    published: bool = False
    approved: bool = False
    rejection_reason: str | None = None

    views: int = 0

    # Timestamps
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # Pending domain events (collected and cleared by the application layer)
    _events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        *,
        creator: Principal,
        title: str,
        description: str,
        address: Address | Mapping[str, Any],
        property_type: PropertyType | str,
        price: Decimal | float | int | str,
        size: int,
        bedrooms: int,
        bathrooms: Decimal | float | int | str,
        transaction_status: TransactionStatus | str = TransactionStatus.FOR_SALE,
        features: Iterable[str] = (),
        images: Iterable[Mapping[str, Any] | ListingImage] = (),
        featured: bool = False,
    ) -> "Listing":
        # The creator's role decides the initial flags, never a stored reference
        flags = _state_machine.initial_flags(creator.role)

        if not isinstance(address, Address):
            address = Address.from_mapping(address)

        listing = cls(
            owner_id=creator.id,
            title=_require_text("title", title, TITLE_MAX_LENGTH),
            description=_require_text("description", description, DESCRIPTION_MAX_LENGTH),
            address=_validate_address(address),
            property_type=_enum_value(PropertyType, "property_type", property_type),
            transaction_status=_enum_value(
                TransactionStatus, "transaction_status", transaction_status
            ),
            price=_non_negative_decimal("price", price),
            size=_non_negative_int("size", size),
            bedrooms=_non_negative_int("bedrooms", bedrooms),
            bathrooms=_non_negative_decimal("bathrooms", bathrooms),
            features=[str(f).strip() for f in features if str(f).strip()],
            images=normalize_images_for_create(images),
            featured=bool(featured),
        )
        listing._set_flags(flags)
        listing._events.append(
            ListingCreatedEvent(
                listing_id=listing.id,
                owner_id=listing.owner_id,
                publication_state=listing.publication_state,
            )
        )
        return listing

    # -------------------------------------------------------------------------
    # Publication state
    # -------------------------------------------------------------------------

    @property
    def publication_flags(self) -> PublicationFlags:
        return PublicationFlags(
            published=self.published,
            approved=self.approved,
            rejection_reason=self.rejection_reason,
        )

    @property
    def publication_state(self) -> PublicationState:
        return self.publication_flags.state

    def _set_flags(self, flags: PublicationFlags) -> dict[str, Any]:
        self.published = flags.published
        self.approved = flags.approved
        self.rejection_reason = flags.rejection_reason
        return {
            "published": flags.published,
            "approved": flags.approved,
            "rejection_reason": flags.rejection_reason,
        }

    def apply_update(self, changes: Mapping[str, Any], editor: Principal) -> dict[str, Any]:
        """
        Apply an allow-listed patch on behalf of ``editor``.

        Returns the full patch to persist, including the publication flags
        the state machine settled on. Unknown fields are rejected outright.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {sorted(unknown)}")

        _state_machine.ensure_can_mutate(editor, self.owner_id, "update")

        patch: dict[str, Any] = {}
        for name, value in changes.items():
            if name == "published":
                continue
            patch[name] = self._coerce(name, value)

        from_state = self.publication_state
        for name, value in patch.items():
            setattr(self, name, value)

        requested = changes.get("published")
        flags = _state_machine.after_update(
            self.publication_flags,
            editor,
            None if requested is None else bool(requested),
        )
        patch.update(self._set_flags(flags))

        self.updated_at = _utcnow()
        patch["updated_at"] = self.updated_at

        self._events.append(
            ListingUpdatedEvent(
                listing_id=self.id,
                updated_by=editor.id,
                changed_fields=tuple(sorted(changes)),
                from_state=from_state,
                to_state=self.publication_state,
            )
        )
        return patch

    def _coerce(self, name: str, value: Any) -> Any:
        if name == "title":
            return _require_text("title", value, TITLE_MAX_LENGTH)
        if name == "description":
            return _require_text("description", value, DESCRIPTION_MAX_LENGTH)
        if name == "address":
            if isinstance(value, Address):
                return _validate_address(value)
            return _validate_address(Address.from_mapping(value or {}, base=self.address))
        if name == "property_type":
            return _enum_value(PropertyType, name, value)
        if name == "transaction_status":
            return _enum_value(TransactionStatus, name, value)
        if name == "price":
            return _non_negative_decimal(name, value)
        if name == "bathrooms":
            return _non_negative_decimal(name, value)
        if name in ("size", "bedrooms"):
            return _non_negative_int(name, value)
        if name == "features":
            return [str(f).strip() for f in (value or []) if str(f).strip()]
        if name == "images":
            return normalize_images_for_update(value or [])
        if name == "featured":
            return bool(value)
        raise ValidationError(f"Field cannot be updated: {name}")

    def review(
        self, reviewer: Principal, *, approved: bool | None, rejection_reason: str | None = None
    ) -> dict[str, Any]:
        """Approve or reject in one step. ``approved`` must be given explicitly."""
        _state_machine.ensure_can_review(reviewer)
        if approved is None:
            raise ValidationError("Approval status is required.")

        from_state = self.publication_state
        if approved:
            flags = _state_machine.approve(self.publication_flags)
        else:
            flags = _state_machine.reject(self.publication_flags, rejection_reason)

        patch = self._set_flags(flags)
        self.updated_at = _utcnow()
        patch["updated_at"] = self.updated_at

        self._events.append(
            ListingReviewedEvent(
                listing_id=self.id,
                reviewed_by=reviewer.id,
                approved=self.approved,
                rejection_reason=self.rejection_reason,
                from_state=from_state,
                to_state=self.publication_state,
            )
        )
        return patch

    def approve(self, reviewer: Principal) -> dict[str, Any]:
        return self.review(reviewer, approved=True)

    def reject(self, reviewer: Principal, reason: str | None = None) -> dict[str, Any]:
        return self.review(reviewer, approved=False, rejection_reason=reason)

    # -------------------------------------------------------------------------
    # Reads and deletion
    # -------------------------------------------------------------------------

    def is_visible_to(self, principal: Principal | None) -> bool:
        return _state_machine.can_view(principal, self.owner_id, self.publication_flags)

    def ensure_visible_to(self, principal: Principal | None) -> None:
        if not self.is_visible_to(principal):
            raise AuthorizationError("This listing is not currently published.")

    def record_view(self) -> dict[str, Any]:
        # Read-modify-write; concurrent detail reads may lose increments
        self.views += 1
        return {"views": self.views}

    def mark_deleted(self, principal: Principal) -> None:
        _state_machine.ensure_can_mutate(principal, self.owner_id, "delete")
        self._events.append(ListingDeletedEvent(listing_id=self.id, deleted_by=principal.id))

    # -------------------------------------------------------------------------
    # Event collection
    # -------------------------------------------------------------------------

    def collect_events(self) -> list[DomainEvent]:
        """Return pending events and clear the internal buffer."""
        events = list(self._events)
        self._events.clear()
        return events
