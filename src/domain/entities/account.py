from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from src.domain.enums.role import Role
from src.domain.errors import ConflictError
from src.domain.principal import Principal


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AlreadyFavoriteError(ConflictError):
    def __init__(self, listing_id: UUID) -> None:
        super().__init__(f"Listing {listing_id} is already in favorites.")


class NotAFavoriteError(ConflictError):
    def __init__(self, listing_id: UUID) -> None:
        super().__init__(f"Listing {listing_id} is not in favorites.")


@dataclass
class Account:
    """
    Persisted counterpart of a Principal.

    Owns its favorites: a set of listing ids kept in insertion order so the
    resolved view is stable. Ids of deleted listings are left in place.
    """

    id: UUID = field(default_factory=uuid4)
    name: str = ""
    email: str = ""
    role: Role = Role.USER
    active: bool = True
    phone: str | None = None
    favorites: list[UUID] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)

    def to_principal(self) -> Principal:
        return Principal(id=self.id, role=self.role, active=self.active)

    def is_favorite(self, listing_id: UUID) -> bool:
        return listing_id in self.favorites

    def add_favorite(self, listing_id: UUID) -> list[UUID]:
        if self.is_favorite(listing_id):
            raise AlreadyFavoriteError(listing_id)
        self.favorites.append(listing_id)
        return list(self.favorites)

    def remove_favorite(self, listing_id: UUID) -> list[UUID]:
        if not self.is_favorite(listing_id):
            raise NotAFavoriteError(listing_id)
        self.favorites = [fid for fid in self.favorites if fid != listing_id]
        return list(self.favorites)

    def toggle_favorite(self, listing_id: UUID) -> bool:
        """Flip membership and return whether the listing is now a favorite."""
        if self.is_favorite(listing_id):
            self.remove_favorite(listing_id)
            return False
        self.add_favorite(listing_id)
        return True
