from abc import ABC, abstractmethod

from src.domain.entities.account import Account


class ResponsiblePartyResolver(ABC):
    """
    Port deciding which account handles an inquiry.

    Implementations must be deterministic: with several candidates the same
    one is returned every time.
    """

    @abstractmethod
    async def resolve(self) -> Account | None:
        ...
