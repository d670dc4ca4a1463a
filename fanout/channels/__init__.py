"""Channel types and delivery targets."""

from dataclasses import dataclass
from enum import Enum

import httpx


class ChannelType(str, Enum):
    EMAIL = "email"
    SLACK = "slack"
    MS_TEAMS = "msteams"
    G_CHAT = "gchat"
    GENERIC = "generic"


@dataclass
class DeliveryTarget:
    """A resolved webhook URL bound to the client that will POST to it."""
    url: str
    client: httpx.AsyncClient
