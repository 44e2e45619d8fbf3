"""
RabbitMQ event publisher.

Uses pika in a thread-pool executor so blocking I/O doesn't stall the
asyncio event loop. A new connection is opened per publish call.
"""
import asyncio
import json
from dataclasses import fields
from enum import Enum
from functools import partial
from typing import Any

import pika
import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.config import settings
from src.domain.events.domain_events import (
    DomainEvent,
    InquiryCreatedEvent,
    InquiryStatusChangedEvent,
    ListingCreatedEvent,
    ListingDeletedEvent,
    ListingReviewedEvent,
    ListingUpdatedEvent,
)

logger = structlog.get_logger(__name__)

EXCHANGE_NAME = "listings.events"


def event_to_routing_key(event: DomainEvent) -> str:
    if isinstance(event, ListingCreatedEvent):
        return "listing.created"
    if isinstance(event, ListingUpdatedEvent):
        return "listing.updated"
    if isinstance(event, ListingReviewedEvent):
        return "listing.approved" if event.approved else "listing.rejected"
    if isinstance(event, ListingDeletedEvent):
        return "listing.deleted"
    if isinstance(event, InquiryCreatedEvent):
        return "inquiry.created"
    if isinstance(event, InquiryStatusChangedEvent):
        return f"inquiry.status.{event.to_status.value}"
    return "event.unknown"


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [_jsonable(v) for v in value]
    return value


def serialise_event(event: DomainEvent) -> str:
    payload: dict[str, Any] = {"event_type": event_to_routing_key(event)}
    for f in fields(event):
        payload[f.name] = _jsonable(getattr(event, f.name))
    return json.dumps(payload, default=str)


def _blocking_publish(rabbitmq_url: str, routing_key: str, body: str) -> None:
    connection = pika.BlockingConnection(pika.URLParameters(rabbitmq_url))
    try:
        channel = connection.channel()
        channel.exchange_declare(
            exchange=EXCHANGE_NAME, exchange_type="topic", durable=True
        )
        channel.basic_publish(
            exchange=EXCHANGE_NAME,
            routing_key=routing_key,
            body=body.encode(),
            properties=pika.BasicProperties(
                delivery_mode=pika.DeliveryMode.Persistent,
                content_type="application/json",
            ),
        )
    finally:
        connection.close()


class RabbitMQPublisher(EventPublisher):
    """Publishes domain events to a RabbitMQ topic exchange."""

    def __init__(self, rabbitmq_url: str = settings.rabbitmq_url) -> None:
        self._url = rabbitmq_url

    async def publish(self, event: DomainEvent) -> None:
        routing_key = event_to_routing_key(event)
        body = serialise_event(event)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(
                None,
                partial(_blocking_publish, self._url, routing_key, body),
            )
            logger.debug("event_published", routing_key=routing_key, event_id=str(event.event_id))
        except Exception as exc:
            # Sent after flush but before the request commits; delivery is best-effort.
            logger.error(
                "failed_to_publish_event",
                routing_key=routing_key,
                error=str(exc),
            )
