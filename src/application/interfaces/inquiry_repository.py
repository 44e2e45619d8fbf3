from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from src.domain.entities.inquiry import Inquiry


class InquiryRepository(ABC):
    """Port for persisting and querying inquiries."""

    @abstractmethod
    async def add(self, inquiry: Inquiry) -> None:
        ...

    @abstractmethod
    async def get_by_id(self, inquiry_id: UUID) -> Inquiry | None:
        ...

    @abstractmethod
    async def list_for_listing(self, listing_id: UUID) -> list[Inquiry]:
        """Newest first."""
        ...

    @abstractmethod
    async def list_for_requester(self, requester_id: UUID) -> list[Inquiry]:
        """Newest first."""
        ...

    @abstractmethod
    async def update(self, inquiry_id: UUID, patch: Mapping[str, Any]) -> bool:
        ...

    @abstractmethod
    async def delete(self, inquiry_id: UUID) -> bool:
        ...
