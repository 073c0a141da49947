"""Twitch API services."""

from .twitch_api import TwitchAPIClient, exchange_code, generate_clip, resolve_broadcaster_id
from .upstream import UpstreamClient

__all__ = [
    "TwitchAPIClient",
    "UpstreamClient",
    "exchange_code",
    "generate_clip",
    "resolve_broadcaster_id",
]
