"""Notification actions and the change events that trigger them."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from fanout.models.identity import EntityRef


class NotificationAction(BaseModel):
    """Who should be told about an event. Read-only once built."""

    references: frozenset[EntityRef] = Field(default_factory=frozenset)
    send_to_admins: bool = False
    send_to_owners: bool = False
    send_to_followers: bool = False

    model_config = {"frozen": True}


class ChangeEvent(BaseModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: str = "entityUpdated"
    entity_type: str
    entity_id: Optional[uuid.UUID] = None
    entity: Optional[dict] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ThreadType(str, Enum):
    TASK = "Task"
    CONVERSATION = "Conversation"
    ANNOUNCEMENT = "Announcement"


class TaskDetails(BaseModel):
    assignees: list[EntityRef] = Field(default_factory=list)


class Thread(BaseModel):
    id: uuid.UUID
    type: ThreadType = ThreadType.CONVERSATION
    task: Optional[TaskDetails] = None
