from fanout.models.identity import (
    EntityKind,
    EntityRef,
    Identity,
    NotificationProfile,
    Person,
    SubscriptionConfig,
    Team,
    Webhook,
)
from fanout.models.action import (
    ChangeEvent,
    NotificationAction,
    TaskDetails,
    Thread,
    ThreadType,
)

__all__ = [
    "EntityKind",
    "EntityRef",
    "Identity",
    "NotificationProfile",
    "Person",
    "SubscriptionConfig",
    "Team",
    "Webhook",
    "ChangeEvent",
    "NotificationAction",
    "TaskDetails",
    "Thread",
    "ThreadType",
]
