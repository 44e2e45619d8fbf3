from abc import ABC, abstractmethod
from collections.abc import Iterable

from src.domain.events.domain_events import DomainEvent


class EventPublisher(ABC):
    """
    Port for announcing listing and inquiry changes.

    Use cases call this once, after the change is flushed and before the
    request commits. Implementations log delivery failures instead of
    raising, so a broker outage never fails the request that caused the
    event.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        ...

    async def publish_many(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)
