"""Event publisher for local runs and tests: nothing leaves the process."""
import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.domain.events.domain_events import DomainEvent

logger = structlog.get_logger(__name__)


class NoOpEventPublisher(EventPublisher):
    """Selected when EVENT_PUBLISHER is "noop" or unrecognised."""

    async def publish(self, event: DomainEvent) -> None:
        logger.debug(
            "event_not_published",
            event_type=type(event).__name__,
            event_id=str(event.event_id),
        )
