"""Recipient resolution."""

from fanout.resolution.result import CategoryResult
from fanout.resolution.resolver import RecipientResolver
from fanout.resolution.stores import (
    Direction,
    EntityNotFoundError,
    IdentityStore,
    Page,
    Relationship,
    RelationshipStore,
)

__all__ = [
    "CategoryResult",
    "RecipientResolver",
    "Direction",
    "EntityNotFoundError",
    "IdentityStore",
    "Page",
    "Relationship",
    "RelationshipStore",
]
