"""Notification fan-out: recipient resolution and webhook delivery."""

from fanout.channels import ChannelType, DeliveryTarget
from fanout.delivery import (
    DeliveryDispatcher,
    DestinationHealth,
    DestinationRegistry,
    DestinationStatus,
    SubscriptionDestination,
    build_http_client,
)
from fanout.models import ChangeEvent, EntityRef, NotificationAction
from fanout.resolution import RecipientResolver

__all__ = [
    "ChannelType",
    "DeliveryTarget",
    "DeliveryDispatcher",
    "DestinationHealth",
    "DestinationRegistry",
    "DestinationStatus",
    "SubscriptionDestination",
    "build_http_client",
    "ChangeEvent",
    "EntityRef",
    "NotificationAction",
    "RecipientResolver",
]
