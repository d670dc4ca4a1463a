"""Webhook delivery and destination status classification."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import httpx

from fanout.channels import ChannelType, DeliveryTarget
from fanout.delivery.client import BlockedDestinationError
from fanout.delivery.health import DestinationStatus, SubscriptionDestination
from fanout.models.action import ChangeEvent, NotificationAction
from fanout.models.identity import EntityKind
from fanout.resolution.resolver import RecipientResolver

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeliveryDispatcher:
    def __init__(
        self,
        resolver: RecipientResolver,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.resolver = resolver
        self.clock = clock or _utcnow

    async def build_targets(
        self,
        action: NotificationAction,
        channel_type: ChannelType,
        client: httpx.AsyncClient,
        event: ChangeEvent,
    ) -> list[DeliveryTarget]:
        """
        Resolve the action for the event's subject and bind each webhook
        URL to the client.

        Thread subjects (tasks, conversations, announcements) get no
        webhook targets: who should receive those is not defined yet.
        """
        if event.entity_type == EntityKind.THREAD.value:
            logger.debug("No webhook targets for thread event %s", event.id)
            return []

        if event.entity_id is None:
            raise ValueError(f"Change event {event.id} has no entity id")

        urls = await self.resolver.build_receiver_list(
            action, channel_type, event.entity_id, event.entity_type
        )
        return [DeliveryTarget(url=url, client=client) for url in sorted(urls)]

    async def deliver(
        self,
        destination: SubscriptionDestination,
        target: DeliveryTarget,
        payload: Any,
    ) -> DestinationStatus:
        """
        POST the payload once and record the outcome on the destination.

        Non-2xx answers are recorded, not raised. Transport errors
        (connection refused, timeouts) and unusable URLs propagate to the
        caller. Returns the status this attempt produced, or the current
        status when the answer falls outside the classified ranges.
        """
        return await self._attempt(destination, target, payload, self.clock())

    async def _attempt(
        self,
        destination: SubscriptionDestination,
        target: DeliveryTarget,
        payload: Any,
        attempt_time: datetime,
    ) -> DestinationStatus:
        response = await target.client.post(target.url, json=payload)
        status_code = response.status_code
        reason = response.reason_phrase
        logger.debug(
            "Destination %s posted to %s, received %s %s",
            destination.id,
            target.url,
            status_code,
            reason,
        )

        health = destination.health
        if status_code == 200:
            await health.set_success(attempt_time, status_code, reason)
            return DestinationStatus.SUCCESS
        elif 300 <= status_code < 400:
            # Redirects are not acceptable for a callback
            logger.warning(
                "Destination %s got redirect %s from %s, marking as error",
                destination.id,
                status_code,
                target.url,
            )
            await health.set_error(attempt_time, status_code, reason)
            return DestinationStatus.ERROR
        elif 400 <= status_code < 600:
            logger.warning(
                "Destination %s returned status %s from %s: %s",
                destination.id,
                status_code,
                target.url,
                response.text[:200],
            )
            await health.set_awaiting_retry(attempt_time, status_code, reason)
            return DestinationStatus.AWAITING_RETRY
        return health.status

    async def dispatch(
        self,
        destination: SubscriptionDestination,
        action: NotificationAction,
        channel_type: ChannelType,
        client: httpx.AsyncClient,
        event: ChangeEvent,
        payload: Any,
    ) -> list[DestinationStatus]:
        """
        Deliver the payload to every resolved target concurrently.

        A transport failure on one target leaves the destination awaiting
        retry; an unusable or refused URL marks it as error. Neither stops
        delivery to the other targets.

        All targets share the destination's health record, so the outcome
        of the attempt that started last is the one kept. A failure on one
        URL is overwritten by a later success on another and will not be
        retried; the returned statuses hold the per-target outcomes.
        """
        if not destination.enabled:
            logger.debug("Destination %s is disabled, skipping event %s", destination.id, event.id)
            return []

        targets = await self.build_targets(action, channel_type, client, event)
        if not targets:
            return []
        return list(
            await asyncio.gather(*(self._deliver_guarded(destination, t, payload) for t in targets))
        )

    async def _deliver_guarded(
        self,
        destination: SubscriptionDestination,
        target: DeliveryTarget,
        payload: Any,
    ) -> DestinationStatus:
        attempt_time = self.clock()
        try:
            return await self._attempt(destination, target, payload, attempt_time)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, BlockedDestinationError) as e:
            logger.error(
                "Cannot deliver to %s for destination %s: %s", target.url, destination.id, e
            )
            await destination.health.set_error(attempt_time, None, str(e))
            return DestinationStatus.ERROR
        except httpx.TransportError as e:
            logger.error(
                "Failed to deliver to %s for destination %s: %s",
                target.url,
                destination.id,
                e,
                exc_info=True,
            )
            await destination.health.set_awaiting_retry(attempt_time, None, str(e))
            return DestinationStatus.AWAITING_RETRY
