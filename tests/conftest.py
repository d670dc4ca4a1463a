"""Shared fixtures: in-memory identity and relationship stores."""

import uuid
from typing import Optional

import pytest

from fanout.models.identity import (
    EntityRef,
    NotificationProfile,
    Person,
    SubscriptionConfig,
    Team,
    Webhook,
)
from fanout.resolution.stores import EntityNotFoundError, Page, Relationship


class FakeIdentityStore:
    def __init__(self):
        self.people: dict[uuid.UUID, Person] = {}
        self.teams: dict[uuid.UUID, Team] = {}
        self.admin_pages: list[list[Person]] = []
        self.list_calls: list[Optional[str]] = []
        self.list_error: Optional[Exception] = None

    def add(self, identity):
        if isinstance(identity, Team):
            self.teams[identity.id] = identity
        else:
            self.people[identity.id] = identity
        return identity

    async def list_admins(self, limit, after=None, fields=""):
        self.list_calls.append(after)
        if self.list_error is not None:
            raise self.list_error
        index = int(after) if after else 0
        data = self.admin_pages[index] if index < len(self.admin_pages) else []
        next_after = str(index + 1) if index + 1 < len(self.admin_pages) else None
        return Page(data=data, after=next_after)

    async def load(self, kind, entity_id, fields=""):
        found = (self.teams if kind == "team" else self.people).get(entity_id)
        if found is None:
            raise EntityNotFoundError(kind, entity_id)
        return found


class FakeRelationshipStore:
    def __init__(self):
        self.relations: dict[tuple, list[EntityRef]] = {}
        self.failing: set[Relationship] = set()
        self.calls: list[tuple] = []

    def relate(self, entity_id, relationship, direction, refs):
        self.relations[(entity_id, relationship, direction)] = list(refs)

    async def find_related(self, entity_id, entity_type, relationship, direction, to_entity=None):
        self.calls.append((entity_id, entity_type, relationship, direction, to_entity))
        if relationship in self.failing:
            raise ConnectionError(f"relationship store unavailable for {relationship.value}")
        return self.relations.get((entity_id, relationship, direction), [])


def make_person(name, email=None, slack=None, msteams=None, gchat=None, generic=None, **kwargs):
    profile = None
    if any((slack, msteams, gchat, generic)):
        profile = NotificationProfile(
            subscription=SubscriptionConfig(
                slack=Webhook(endpoint=slack) if slack else None,
                msteams=Webhook(endpoint=msteams) if msteams else None,
                gchat=Webhook(endpoint=gchat) if gchat else None,
                generic=Webhook(endpoint=generic) if generic else None,
            )
        )
    return Person(
        id=uuid.uuid4(),
        name=name,
        email=email if email is not None else f"{name}@example.com",
        profile=profile,
        **kwargs,
    )


def make_team(name, email=None, slack=None):
    profile = None
    if slack:
        profile = NotificationProfile(subscription=SubscriptionConfig(slack=Webhook(endpoint=slack)))
    return Team(
        id=uuid.uuid4(),
        name=name,
        email=email if email is not None else f"{name}@teams.example.com",
        profile=profile,
    )


def ref(identity):
    kind = "team" if isinstance(identity, Team) else "user"
    return EntityRef(id=identity.id, type=kind, name=identity.name)


@pytest.fixture
def identity_store():
    return FakeIdentityStore()


@pytest.fixture
def relationship_store():
    return FakeRelationshipStore()


@pytest.fixture
def entity_id():
    return uuid.uuid4()
