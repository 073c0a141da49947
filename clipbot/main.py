import asyncio
import logging
import sys

import httpx
from pydantic import ValidationError

from clipbot.core.config import ClipBotSettings, get_settings
from clipbot.core.errors import LaunchError
from clipbot.core.health_server import HealthCheckServer
from clipbot.core.logging import setup_logging
from clipbot.core.session import SessionController
from clipbot.core.transport import SessionGetter, TwitchIOTransport
from clipbot.services.twitch_api import TwitchAPIClient
from clipbot.services.upstream import UpstreamClient

LOGGER: logging.Logger = logging.getLogger("Bot")


async def run(settings: ClipBotSettings) -> None:
    def make_transport(get_session: SessionGetter) -> TwitchIOTransport:
        return TwitchIOTransport(
            get_session, client_id=settings.client_id, client_secret=settings.client_secret
        )

    async with httpx.AsyncClient(timeout=settings.request_timeout) as http:
        api = TwitchAPIClient(
            UpstreamClient(http),
            settings.client_id,
            settings.client_secret,
            helix_url=settings.helix_url,
            redirect_uri=settings.redirect_uri,
        )
        controller = SessionController(settings, api, make_transport)

        health: HealthCheckServer | None = None
        if settings.health_port:
            health = HealthCheckServer(controller, port=settings.health_port)
            await health.start()

        try:
            await controller.launch()
            transport = controller.transport
            if isinstance(transport, TwitchIOTransport):
                await transport.wait_closed()
        finally:
            await controller.close()
            if health:
                await health.stop()


def main() -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        LOGGER.error(f"Invalid configuration:\n{e}")
        sys.exit(1)

    setup_logging(settings.log_level)

    try:
        asyncio.run(run(settings))
    except LaunchError as e:
        LOGGER.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down due to KeyboardInterrupt...")


if __name__ == "__main__":
    main()
