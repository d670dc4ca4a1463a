"""Webhook delivery and destination health tracking."""

from fanout.delivery.client import build_http_client
from fanout.delivery.dispatcher import DeliveryDispatcher
from fanout.delivery.health import (
    DestinationHealth,
    DestinationRegistry,
    DestinationStatus,
    SubscriptionDestination,
)

__all__ = [
    "build_http_client",
    "DeliveryDispatcher",
    "DestinationHealth",
    "DestinationRegistry",
    "DestinationStatus",
    "SubscriptionDestination",
]
