"""Identities that can receive notifications, and their notification profiles."""

import uuid
from enum import Enum
from typing import Optional, Union

from pydantic import AnyHttpUrl, BaseModel, Field


class EntityKind(str, Enum):
    USER = "user"
    TEAM = "team"
    THREAD = "thread"


class EntityRef(BaseModel):
    id: uuid.UUID
    type: str = Field(..., description="Entity type, e.g. user, team, table")
    name: Optional[str] = None

    model_config = {"frozen": True}


class Webhook(BaseModel):
    endpoint: Optional[AnyHttpUrl] = Field(None, description="Webhook endpoint URL")
    secret_key: Optional[str] = None


class SubscriptionConfig(BaseModel):
    slack: Optional[Webhook] = None
    msteams: Optional[Webhook] = None
    gchat: Optional[Webhook] = None
    generic: Optional[Webhook] = None


class NotificationProfile(BaseModel):
    subscription: Optional[SubscriptionConfig] = None


class Person(BaseModel):
    id: uuid.UUID
    name: str
    email: Optional[str] = None
    is_admin: bool = False
    profile: Optional[NotificationProfile] = None

    @property
    def kind(self) -> EntityKind:
        return EntityKind.USER


class Team(BaseModel):
    id: uuid.UUID
    name: str
    email: Optional[str] = None
    profile: Optional[NotificationProfile] = None

    @property
    def kind(self) -> EntityKind:
        return EntityKind.TEAM


Identity = Union[Person, Team]
