"""Chat commands: greetings and !clip.

Each command is a ``Command(name, trigger, matcher, handler)`` entry. The
dispatcher keeps no state between messages; at most one command fires per
message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Protocol

from clipbot.core.errors import UpstreamError
from clipbot.core.transport import ChatTransport
from clipbot.models import (
    NO_MATCH,
    ClipRequest,
    CommandMatch,
    Greeting,
    InboundMessage,
    NoMatch,
    Session,
)

LOGGER: logging.Logger = logging.getLogger("Bot.Commands")

COMMAND_PREFIX = "!"
CLIP_TRIGGER = "!clip"

GREETINGS = frozenset(
    [
        "hey", "hi", "hello", "sup", "yo", "howdy", "greetings", "hola",
        "bonjour", "hallo", "ciao", "namaste", "salaam", "konnichiwa", "ni hao",
        "shalom", "jambo", "merhaba", "xin chao", "sawubona", "privet",
        "kamusta", "sveiki", "ahoj", "hujambo", "kumusta", "salut", "kia ora",
        "konnichi wa", "konnichiha",
    ]
)

CLIP_REPLY = "Here's your clip: {url}"
CLIP_FAILED_REPLY = "Sorry, I couldn't generate a clip for you. Try again later."

Matcher = Callable[[InboundMessage], CommandMatch]
Handler = Callable[[InboundMessage, CommandMatch], Awaitable[None]]


@dataclass(frozen=True)
class Command:
    """A registered command.

    ``trigger`` is the exact ``!`` text for prefixed commands and ``None``
    for conversational ones such as greetings.
    """

    name: str
    trigger: str | None
    matcher: Matcher
    handler: Handler


class CommandDispatcher:
    """Routes each inbound message to at most one command."""

    def __init__(self, commands: Iterable[Command]) -> None:
        self.commands = tuple(commands)
        self._triggers = frozenset(c.trigger for c in self.commands if c.trigger)

    def is_excluded(self, message: InboundMessage) -> bool:
        """Own messages and unknown ``!`` commands are ignored entirely."""
        if message.is_self:
            return True
        text = message.text.strip().lower()
        return text.startswith(COMMAND_PREFIX) and text not in self._triggers

    def match(self, message: InboundMessage) -> tuple[Command | None, CommandMatch]:
        if self.is_excluded(message):
            return None, NO_MATCH
        for command in self.commands:
            result = command.matcher(message)
            if not isinstance(result, NoMatch):
                return command, result
        return None, NO_MATCH

    async def handle(self, message: InboundMessage) -> None:
        command, result = self.match(message)
        if command is None:
            return

        LOGGER.info(f"[{message.channel}] {message.sender_name}: {command.name}")
        try:
            await command.handler(message, result)
        except Exception:
            LOGGER.exception(f"Command '{command.name}' failed")


# ----------------------------------------------------------------------
# Greeting
# ----------------------------------------------------------------------


def match_greeting(message: InboundMessage) -> CommandMatch:
    text = message.text
    if message.is_self or text.startswith(COMMAND_PREFIX):
        return NO_MATCH
    if text.lower() in GREETINGS:
        return Greeting(username=message.sender_name)
    return NO_MATCH


def greeting_command(transport: ChatTransport) -> Command:
    async def say_hello(message: InboundMessage, result: CommandMatch) -> None:
        assert isinstance(result, Greeting)
        await transport.say(message.channel, f"Hello, {result.username}!")

    return Command(name="greeting", trigger=None, matcher=match_greeting, handler=say_hello)


# ----------------------------------------------------------------------
# Clip
# ----------------------------------------------------------------------


def match_clip(message: InboundMessage) -> CommandMatch:
    if message.is_self:
        return NO_MATCH
    if message.text.strip().lower() == CLIP_TRIGGER:
        return ClipRequest(channel=message.channel)
    return NO_MATCH


class ClipGenerator(Protocol):
    async def generate_clip(self, session: Session) -> str: ...


def clip_command(
    transport: ChatTransport,
    clips: ClipGenerator,
    get_session: Callable[[], Session],
) -> Command:
    """Build the !clip command.

    Upstream failures are answered with a fixed apology; they never end the
    session.
    """

    async def create_clip(message: InboundMessage, result: CommandMatch) -> None:
        assert isinstance(result, ClipRequest)
        try:
            edit_url = await clips.generate_clip(get_session())
        except UpstreamError as e:
            LOGGER.warning(f"Clip creation failed: {e}")
            await transport.say(result.channel, CLIP_FAILED_REPLY)
            return
        await transport.say(result.channel, CLIP_REPLY.format(url=edit_url))

    return Command(name="clip", trigger=CLIP_TRIGGER, matcher=match_clip, handler=create_clip)


def default_commands(
    transport: ChatTransport,
    clips: ClipGenerator,
    get_session: Callable[[], Session],
) -> list[Command]:
    return [greeting_command(transport), clip_command(transport, clips, get_session)]
