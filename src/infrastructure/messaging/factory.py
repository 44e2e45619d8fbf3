import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.config import settings
from src.infrastructure.messaging.noop_publisher import NoOpEventPublisher
from src.infrastructure.messaging.rabbitmq_publisher import RabbitMQPublisher

logger = structlog.get_logger(__name__)


def build_event_publisher(kind: str = settings.event_publisher) -> EventPublisher:
    if kind == "rabbitmq":
        return RabbitMQPublisher(settings.rabbitmq_url)
    if kind != "noop":
        logger.warning("unknown_event_publisher", kind=kind)
    return NoOpEventPublisher()
