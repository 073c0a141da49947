"""Chat command components."""

from .commands import (
    CLIP_FAILED_REPLY,
    CLIP_REPLY,
    GREETINGS,
    Command,
    CommandDispatcher,
    clip_command,
    default_commands,
    greeting_command,
)

__all__ = [
    "CLIP_FAILED_REPLY",
    "CLIP_REPLY",
    "GREETINGS",
    "Command",
    "CommandDispatcher",
    "clip_command",
    "default_commands",
    "greeting_command",
]
