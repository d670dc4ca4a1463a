"""Webhook endpoint lookup on person/team notification profiles."""

import logging
import uuid
from typing import Callable, Optional

from fanout.channels import ChannelType
from fanout.models.identity import NotificationProfile, SubscriptionConfig, Webhook

logger = logging.getLogger(__name__)

# Email has no entry: email addresses are read from the identity itself.
_WEBHOOK_FIELDS: dict[ChannelType, Callable[[SubscriptionConfig], Optional[Webhook]]] = {
    ChannelType.SLACK: lambda config: config.slack,
    ChannelType.MS_TEAMS: lambda config: config.msteams,
    ChannelType.G_CHAT: lambda config: config.gchat,
    ChannelType.GENERIC: lambda config: config.generic,
}


def extract_webhook_endpoint(
    profile: Optional[NotificationProfile],
    identity_id: uuid.UUID,
    identity_kind: str,
    channel_type: ChannelType,
) -> Optional[str]:
    """
    Return the webhook endpoint configured on a profile for a channel type.

    A missing profile, subscription config or endpoint is the normal
    opt-out case and yields None rather than an error.
    """
    accessor = _WEBHOOK_FIELDS.get(channel_type)
    if accessor is None:
        raise ValueError(f"Channel type {channel_type.value} has no webhook profile field")

    if profile is None or profile.subscription is None:
        logger.debug(
            "No notification profile for %s %s, skipping %s",
            identity_kind,
            identity_id,
            channel_type.value,
        )
        return None

    webhook = accessor(profile.subscription)
    if webhook is not None and webhook.endpoint is not None:
        return str(webhook.endpoint)

    logger.debug(
        "%s %s has no %s webhook configured, webhook config %s",
        identity_kind,
        identity_id,
        channel_type.value,
        webhook,
    )
    return None
