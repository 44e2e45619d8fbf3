from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from src.domain.entities.listing import Listing
from src.domain.policies.listing_visibility import ListingQuery


@dataclass
class ListingSummary:
    total: int = 0
    published: int = 0
    pending: int = 0
    rejected: int = 0
    by_transaction_status: dict[str, int] = field(default_factory=dict)


class ListingRepository(ABC):
    """Port for persisting and querying Listing aggregates."""

    @abstractmethod
    async def add(self, listing: Listing) -> None:
        ...

    @abstractmethod
    async def get_by_id(self, listing_id: UUID) -> Listing | None:
        ...

    @abstractmethod
    async def get_many(self, listing_ids: list[UUID]) -> list[Listing]:
        """Return the listings that exist, in the order of ``listing_ids``."""
        ...

    @abstractmethod
    async def find(self, query: ListingQuery) -> tuple[list[Listing], int]:
        """Return (page of listings, total matching before pagination)."""
        ...

    @abstractmethod
    async def update(self, listing_id: UUID, patch: Mapping[str, Any]) -> bool:
        """Apply ``patch`` as one update. Returns False if the listing is gone."""
        ...

    @abstractmethod
    async def delete(self, listing_id: UUID) -> bool:
        ...

    @abstractmethod
    async def summarize(self, *, owner_id: UUID | None = None) -> ListingSummary:
        ...
