"""Chat transport interface and the twitchio-backed implementation."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

import twitchio
from twitchio import eventsub

from clipbot.models import InboundMessage, Session

LOGGER: logging.Logger = logging.getLogger("Bot.Transport")

MessageHandler = Callable[[InboundMessage], Awaitable[None]]


class ChatTransport(Protocol):
    """What the session needs from a chat connection."""

    async def connect(self) -> None: ...

    async def say(self, channel: str, text: str) -> None: ...

    def on_message(self, handler: MessageHandler) -> None: ...

    async def close(self) -> None: ...


SessionGetter = Callable[[], Session]
TransportFactory = Callable[[SessionGetter], ChatTransport]

CLOSE_TIMEOUT = 5.0


class _ChatClient(twitchio.Client):
    def __init__(self, transport: TwitchIOTransport, **kwargs) -> None:
        super().__init__(**kwargs)
        self._transport = transport

    async def setup_hook(self) -> None:
        await self._transport._setup(self)

    async def event_message(self, payload: twitchio.ChatMessage) -> None:
        await self._transport._deliver(payload)


class TwitchIOTransport:
    """EventSub chat over twitchio, acting as the session's account."""

    def __init__(
        self, get_session: SessionGetter, *, client_id: str, client_secret: str
    ) -> None:
        self._get_session = get_session
        self._handlers: list[MessageHandler] = []
        self._channel_id: str | None = None
        self._ready = asyncio.Event()
        self._runner: asyncio.Task | None = None
        self.client = _ChatClient(
            self,
            client_id=client_id,
            client_secret=client_secret,
            bot_id=get_session().broadcaster_id,
        )

    @property
    def session(self) -> Session:
        return self._get_session()

    @property
    def bot_id(self) -> str:
        return self.session.broadcaster_id

    def on_message(self, handler: MessageHandler) -> None:
        self._handlers.append(handler)

    async def connect(self) -> None:
        """Start the client and return once the chat subscription is live."""
        self._runner = asyncio.create_task(
            self.client.start(with_adapter=False, load_tokens=False, save_tokens=False)
        )
        ready = asyncio.create_task(self._ready.wait())
        done, _ = await asyncio.wait({self._runner, ready}, return_when=asyncio.FIRST_COMPLETED)
        if self._runner in done:
            ready.cancel()
            # Raises if the client failed during login or subscription
            self._runner.result()
            raise ConnectionError("Chat client stopped before joining the channel")
        LOGGER.info(f"Joined #{self.session.channel} as {self.session.username}")

    async def wait_closed(self) -> None:
        if self._runner:
            await self._runner

    async def say(self, channel: str, text: str) -> None:
        if not self._channel_id:
            raise ConnectionError("Chat transport is not connected")
        target = self.client.create_partialuser(user_id=self._channel_id, user_login=channel)
        await target.send_message(message=text, sender=self.bot_id, token_for=self.bot_id)

    async def close(self) -> None:
        await self.client.close()
        if self._runner and not self._runner.done():
            # Let the runner finish its own shutdown before giving up on it
            await asyncio.wait({self._runner}, timeout=CLOSE_TIMEOUT)
            if not self._runner.done():
                LOGGER.warning("Chat client did not stop in time, cancelling")
                self._runner.cancel()

    async def _setup(self, client: twitchio.Client) -> None:
        credentials = self.session.credentials
        await client.add_token(credentials.access_token, credentials.refresh_token)

        users = await client.fetch_users(logins=[self.session.channel])
        if not users:
            raise ConnectionError(f"Channel not found: {self.session.channel}")
        self._channel_id = users[0].id

        await client.subscribe_websocket(
            eventsub.ChatMessageSubscription(
                broadcaster_user_id=self._channel_id, user_id=self.bot_id
            ),
            token_for=self.bot_id,
        )
        self._ready.set()

    async def _deliver(self, payload: twitchio.ChatMessage) -> None:
        message = to_inbound_message(payload, self.bot_id)
        for handler in self._handlers:
            await handler(message)


def to_inbound_message(payload: twitchio.ChatMessage, bot_id: str) -> InboundMessage:
    """Convert a twitchio chat payload into an ``InboundMessage``."""
    chatter = payload.chatter
    tags = {
        "username": chatter.name,
        "display-name": chatter.display_name,
        "user-id": chatter.id,
    }
    return InboundMessage(
        channel=payload.broadcaster.name or "",
        text=payload.text,
        sender_tags={k: v for k, v in tags.items() if v},
        is_self=chatter.id == bot_id,
    )
