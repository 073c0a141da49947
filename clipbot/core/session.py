"""Session lifecycle: authenticate, resolve identity, connect, listen."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from clipbot.components.commands import CommandDispatcher, default_commands
from clipbot.core.errors import LaunchError, UpstreamError
from clipbot.core.transport import ChatTransport, TransportFactory
from clipbot.models import Credentials, PendingSession, Session

if TYPE_CHECKING:
    from clipbot.core.config import ClipBotSettings
    from clipbot.services.twitch_api import TwitchAPIClient

LOGGER: logging.Logger = logging.getLogger("Bot")


class SessionController:
    """Owns the session's credentials for the lifetime of the connection.

    ``launch`` runs the startup steps strictly in order. A failure while
    fetching the token or the broadcaster id aborts the launch before any
    chat connection is attempted.
    """

    def __init__(
        self,
        settings: ClipBotSettings,
        api: TwitchAPIClient,
        transport_factory: TransportFactory,
    ) -> None:
        self.settings = settings
        self.api = api
        self.transport_factory = transport_factory
        self.pending = PendingSession(channel=settings.channel, username=settings.username)
        self.transport: ChatTransport | None = None
        self.dispatcher: CommandDispatcher | None = None
        self._session: Session | None = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("Session has not been launched")
        return self._session

    def get_session(self) -> Session:
        return self.session

    @property
    def is_ready(self) -> bool:
        return self._session is not None and self.transport is not None

    async def launch(self) -> Session:
        try:
            credentials = await self.api.exchange_code(
                self.settings.token_endpoint, self.settings.authorization_code
            )
        except UpstreamError as e:
            LOGGER.error("Failed to get Twitch OAuth token, aborting launch")
            raise LaunchError("token", e) from e

        try:
            broadcaster_id = await self.api.resolve_broadcaster_id(credentials)
        except UpstreamError as e:
            LOGGER.error("Failed to get broadcaster id, aborting launch")
            raise LaunchError("identity", e) from e

        session = self.pending.authenticate(credentials, broadcaster_id)
        self._session = session

        # Transport and commands read the session through this getter so a
        # credentials swap reaches both
        transport = self.transport_factory(self.get_session)
        dispatcher = CommandDispatcher(default_commands(transport, self.api, self.get_session))
        # Listen before connecting so no early message is missed
        transport.on_message(dispatcher.handle)
        self.dispatcher = dispatcher

        try:
            await transport.connect()
        except Exception:
            LOGGER.exception(f"Failed to connect to #{session.channel}")
            self._session = None
            self.dispatcher = None
            try:
                await transport.close()
            except Exception:
                LOGGER.exception("Failed to close chat transport after connect error")
            raise

        self.transport = transport
        LOGGER.info(f"Session ready: #{session.channel} as {session.username} ({broadcaster_id})")
        return session

    def replace_credentials(self, credentials: Credentials) -> Session:
        """Swap in new credentials for a future token refresh.

        The whole ``Session`` is replaced in one assignment, so a handler
        reading ``session`` sees either the old or the new token.
        """
        self._session = dataclasses.replace(self.session, credentials=credentials)
        return self._session

    async def close(self) -> None:
        if self.transport is not None:
            await self.transport.close()
            self.transport = None
