"""Storage capabilities the resolver depends on.

The identity and relationship stores live outside this package; anything
implementing these protocols can be handed to ``RecipientResolver``.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

from fanout.models.identity import EntityRef, Identity, Person


class Relationship(str, Enum):
    OWNS = "owns"
    FOLLOWS = "follows"
    HAS = "has"


class Direction(str, Enum):
    # FROM: entities on the "from" side pointing at the given entity
    FROM = "from"
    # TO: entities the given entity points at
    TO = "to"


class EntityNotFoundError(LookupError):
    def __init__(self, kind: str, entity_id: uuid.UUID):
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


@dataclass
class Page:
    """One page of a cursor-paginated listing."""
    data: list[Person] = field(default_factory=list)
    after: Optional[str] = None


class IdentityStore(Protocol):
    async def list_admins(
        self, limit: int, after: Optional[str] = None, fields: str = ""
    ) -> Page:
        ...

    async def load(self, kind: str, entity_id: uuid.UUID, fields: str = "") -> Identity:
        """Load a person or team, raising EntityNotFoundError if missing."""
        ...


class RelationshipStore(Protocol):
    async def find_related(
        self,
        entity_id: uuid.UUID,
        entity_type: str,
        relationship: Relationship,
        direction: Direction,
        to_entity: Optional[str] = None,
    ) -> list[EntityRef]:
        ...
