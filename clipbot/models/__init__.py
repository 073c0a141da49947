"""Data models for sessions, chat messages and Twitch responses."""

from .message import NO_MATCH, ClipRequest, CommandMatch, Greeting, InboundMessage, NoMatch
from .responses import ClipsResponse, HelixClip, HelixUser, TokenResponse, UsersResponse
from .session import Credentials, PendingSession, Session

__all__ = [
    "ClipRequest",
    "ClipsResponse",
    "CommandMatch",
    "Credentials",
    "Greeting",
    "HelixClip",
    "HelixUser",
    "InboundMessage",
    "NO_MATCH",
    "NoMatch",
    "PendingSession",
    "Session",
    "TokenResponse",
    "UsersResponse",
]
