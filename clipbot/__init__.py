"""Twitch chat bot that greets chatters and creates clips on command."""

__version__ = "0.1.0"
