"""Core modules for the clip bot."""

from .config import BOT_SCOPES, ClipBotSettings, get_settings
from .errors import LaunchError, NoResponseError, RequestSetupError, ResponseError, UpstreamError
from .logging import setup_logging

__all__ = [
    # Settings
    "BOT_SCOPES",
    "ClipBotSettings",
    "get_settings",
    # Errors
    "LaunchError",
    "NoResponseError",
    "RequestSetupError",
    "ResponseError",
    "UpstreamError",
    # Setup functions
    "setup_logging",
]
