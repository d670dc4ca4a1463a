"""Per-destination delivery health, read by the retry scheduler."""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from fanout.channels import ChannelType

logger = logging.getLogger(__name__)


class DestinationStatus(str, Enum):
    UNKNOWN = "unknown"
    SUCCESS = "success"
    AWAITING_RETRY = "awaitingRetry"
    ERROR = "error"


@dataclass
class DestinationHealth:
    """
    Outcome of the latest delivery attempt to a destination.

    Every attempt overwrites the previous outcome. Transitions are
    serialized per destination, and one whose attempt started before the
    recorded attempt is dropped so the latest attempt always wins.

    The lock binds to the event loop that first waits on it; a record must
    only be updated from one loop.
    """
    status: DestinationStatus = DestinationStatus.UNKNOWN
    last_attempt_at: Optional[datetime] = None
    last_successful_at: Optional[datetime] = None
    last_failed_at: Optional[datetime] = None
    status_code: Optional[int] = None
    reason: Optional[str] = None
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    async def set_success(
        self, attempt_time: datetime, status_code: int = 200, reason: Optional[str] = "OK"
    ) -> bool:
        async with self._lock:
            if self._is_stale(attempt_time):
                return False
            self.status = DestinationStatus.SUCCESS
            self.last_attempt_at = attempt_time
            self.last_successful_at = attempt_time
            self.status_code = status_code
            self.reason = reason
            return True

    async def set_error(
        self, attempt_time: datetime, status_code: Optional[int], reason: Optional[str]
    ) -> bool:
        return await self._set_failed(DestinationStatus.ERROR, attempt_time, status_code, reason)

    async def set_awaiting_retry(
        self, attempt_time: datetime, status_code: Optional[int], reason: Optional[str]
    ) -> bool:
        return await self._set_failed(
            DestinationStatus.AWAITING_RETRY, attempt_time, status_code, reason
        )

    async def _set_failed(
        self,
        status: DestinationStatus,
        attempt_time: datetime,
        status_code: Optional[int],
        reason: Optional[str],
    ) -> bool:
        async with self._lock:
            if self._is_stale(attempt_time):
                return False
            self.status = status
            self.last_attempt_at = attempt_time
            self.last_failed_at = attempt_time
            self.status_code = status_code
            self.reason = reason
            return True

    def _is_stale(self, attempt_time: datetime) -> bool:
        if self.last_attempt_at is not None and attempt_time < self.last_attempt_at:
            logger.debug(
                "Dropping stale outcome from %s, last attempt was %s",
                attempt_time,
                self.last_attempt_at,
            )
            return True
        return False


@dataclass
class SubscriptionDestination:
    channel_type: ChannelType
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    enabled: bool = True
    health: DestinationHealth = field(default_factory=DestinationHealth)


class DestinationRegistry:
    """In-process view of configured destinations for the retry scheduler."""

    def __init__(self):
        self._destinations: dict[uuid.UUID, SubscriptionDestination] = {}

    def add(self, destination: SubscriptionDestination) -> SubscriptionDestination:
        self._destinations[destination.id] = destination
        return destination

    def get(self, destination_id: uuid.UUID) -> Optional[SubscriptionDestination]:
        return self._destinations.get(destination_id)

    def awaiting_retry(self) -> list[SubscriptionDestination]:
        """Enabled destinations awaiting retry, oldest attempt first."""
        waiting = [
            d
            for d in self._destinations.values()
            if d.enabled and d.health.status is DestinationStatus.AWAITING_RETRY
        ]
        return sorted(waiting, key=lambda d: d.health.last_attempt_at)

    def __len__(self) -> int:
        return len(self._destinations)
