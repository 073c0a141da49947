"""Inbound chat messages and command match results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class InboundMessage:
    """A single chat message as delivered by the transport."""

    channel: str
    text: str
    sender_tags: dict[str, str] = field(default_factory=dict)
    is_self: bool = False

    @property
    def sender_name(self) -> str:
        """Display name of the sender, falling back to the login."""
        return self.sender_tags.get("display-name") or self.sender_tags.get("username", "")


@dataclass(frozen=True)
class NoMatch:
    pass


@dataclass(frozen=True)
class Greeting:
    username: str


@dataclass(frozen=True)
class ClipRequest:
    channel: str


CommandMatch = Union[NoMatch, Greeting, ClipRequest]

NO_MATCH = NoMatch()
