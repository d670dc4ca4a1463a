"""Recipient resolution for notification actions."""

import asyncio
import logging
import uuid
from typing import Awaitable, Iterable, Optional

from fanout.channels import ChannelType
from fanout.channels.profile import extract_webhook_endpoint
from fanout.config import settings
from fanout.models.action import NotificationAction, Thread
from fanout.models.identity import EntityKind, EntityRef, Identity
from fanout.resolution.result import CategoryResult
from fanout.resolution.stores import (
    Direction,
    EntityNotFoundError,
    IdentityStore,
    Relationship,
    RelationshipStore,
)

logger = logging.getLogger(__name__)

_IDENTITY_FIELDS = "email,profile"


class RecipientResolver:
    """
    Turns a NotificationAction into the set of email addresses or webhook
    endpoints to deliver to.

    Each recipient category (references, admins, owners, followers) is
    resolved independently; a store failure empties that category only.
    """

    def __init__(
        self,
        identities: IdentityStore,
        relationships: RelationshipStore,
        admin_page_size: Optional[int] = None,
    ):
        self.identities = identities
        self.relationships = relationships
        self.admin_page_size = admin_page_size or settings.admin_page_size

    async def build_receiver_list(
        self,
        action: NotificationAction,
        channel_type: ChannelType,
        entity_id: uuid.UUID,
        entity_type: str,
    ) -> set[str]:
        receivers: set[str] = set()
        for result in await self.collect_categories(action, channel_type, entity_id, entity_type):
            receivers |= result.addresses
        return receivers

    async def collect_categories(
        self,
        action: NotificationAction,
        channel_type: ChannelType,
        entity_id: uuid.UUID,
        entity_type: str,
    ) -> list[CategoryResult]:
        """Resolve every category the action asks for, keeping per-category faults."""
        pending = [self.resolve_references(action.references, channel_type)]
        if action.send_to_admins:
            pending.append(self.resolve_admins(channel_type))
        if action.send_to_owners:
            pending.append(self.resolve_owners(channel_type, entity_id, entity_type))
        if action.send_to_followers:
            pending.append(self.resolve_followers(channel_type, entity_id, entity_type))
        return list(await asyncio.gather(*pending))

    # --- Categories ---

    async def resolve_references(
        self, references: Iterable[EntityRef], channel_type: ChannelType
    ) -> CategoryResult:
        return await self._category(
            "references", self._addresses_for_refs(references, channel_type)
        )

    async def resolve_admins(self, channel_type: ChannelType) -> CategoryResult:
        return await self._category("admins", self._admin_addresses(channel_type))

    async def resolve_owners(
        self, channel_type: ChannelType, entity_id: uuid.UUID, entity_type: str
    ) -> CategoryResult:
        return await self._category(
            "owners",
            self._related_addresses(channel_type, entity_id, entity_type, Relationship.OWNS),
        )

    async def resolve_followers(
        self, channel_type: ChannelType, entity_id: uuid.UUID, entity_type: str
    ) -> CategoryResult:
        return await self._category(
            "followers",
            self._related_addresses(channel_type, entity_id, entity_type, Relationship.FOLLOWS),
        )

    async def resolve_task_assignees(self, thread: Thread) -> set[uuid.UUID]:
        """Person ids for a task's assignees, with teams expanded to their members."""
        receivers: set[uuid.UUID] = set()
        if thread.task is None:
            return receivers
        for ref in thread.task.assignees:
            if ref.type == EntityKind.USER.value:
                receivers.add(ref.id)
            elif ref.type == EntityKind.TEAM.value:
                members = await self.relationships.find_related(
                    ref.id,
                    EntityKind.TEAM.value,
                    Relationship.HAS,
                    Direction.TO,
                    to_entity=EntityKind.USER.value,
                )
                receivers.update(member.id for member in members)
        return receivers

    # --- Internals ---

    async def _category(self, name: str, pending: Awaitable[set[str]]) -> CategoryResult:
        try:
            addresses = await pending
        except Exception as e:
            logger.error("Failed to resolve %s recipients: %s", name, e, exc_info=True)
            return CategoryResult(name=name, fault=e)
        return CategoryResult(name=name, addresses=addresses)

    async def _admin_addresses(self, channel_type: ChannelType) -> set[str]:
        addresses: set[str] = set()
        after = None
        while True:
            page = await self.identities.list_admins(
                limit=self.admin_page_size, after=after, fields=_IDENTITY_FIELDS
            )
            addresses |= self._addresses_for(page.data, channel_type)
            after = page.after
            if after is None:
                return addresses

    async def _related_addresses(
        self,
        channel_type: ChannelType,
        entity_id: uuid.UUID,
        entity_type: str,
        relationship: Relationship,
    ) -> set[str]:
        related = await self.relationships.find_related(
            entity_id, entity_type, relationship, Direction.FROM
        )
        return await self._addresses_for_refs(related, channel_type)

    async def _addresses_for_refs(
        self, refs: Iterable[EntityRef], channel_type: ChannelType
    ) -> set[str]:
        identities = await self._load_identities(refs)
        return self._addresses_for(identities, channel_type)

    async def _load_identities(self, refs: Iterable[EntityRef]) -> list[Identity]:
        kinds = (EntityKind.USER.value, EntityKind.TEAM.value)
        loaded = await asyncio.gather(
            *(self._load_or_none(ref) for ref in refs if ref.type in kinds)
        )
        return [identity for identity in loaded if identity is not None]

    async def _load_or_none(self, ref: EntityRef) -> Optional[Identity]:
        try:
            return await self.identities.load(ref.type, ref.id, fields=_IDENTITY_FIELDS)
        except EntityNotFoundError:
            logger.warning("Skipping %s %s: not found", ref.type, ref.id)
            return None

    @staticmethod
    def _addresses_for(identities: Iterable[Identity], channel_type: ChannelType) -> set[str]:
        if channel_type is ChannelType.EMAIL:
            return {identity.email for identity in identities if identity.email}

        addresses = set()
        for identity in identities:
            endpoint = extract_webhook_endpoint(
                identity.profile, identity.id, identity.kind.value, channel_type
            )
            if endpoint:
                addresses.add(endpoint)
        return addresses
