from abc import ABC, abstractmethod
from uuid import UUID

from src.domain.entities.account import Account


class AccountRepository(ABC):
    """Port for the accounts backing authenticated principals."""

    @abstractmethod
    async def add(self, account: Account) -> None:
        ...

    @abstractmethod
    async def get_by_id(self, account_id: UUID) -> Account | None:
        ...

    @abstractmethod
    async def set_favorites(self, account_id: UUID, favorites: list[UUID]) -> bool:
        """Overwrite the favorites set in a single update."""
        ...

    @abstractmethod
    async def find_first_admin(self) -> Account | None:
        """Earliest-created active admin, ties broken by lowest id."""
        ...
