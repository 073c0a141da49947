"""
Pytest configuration
Provides common fixtures (settings, sessions, fake HTTP and chat transport)
"""
from typing import Callable
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from clipbot.core.config import ClipBotSettings
from clipbot.models import Credentials, InboundMessage, PendingSession
from clipbot.services.twitch_api import TwitchAPIClient
from clipbot.services.upstream import UpstreamClient

TOKEN_ENDPOINT = "https://id.twitch.tv/oauth2/token"
HELIX_URL = "https://api.twitch.tv/helix"


@pytest.fixture
def settings_values():
    """Raw configuration values (no real credentials)"""
    return {
        "channel": "testchannel",
        "username": "testbot",
        "client_id": "test_client_id",
        "client_secret": "test_client_secret",
        "authorization_code": "test_auth_code",
        "token_endpoint": TOKEN_ENDPOINT,
    }


@pytest.fixture
def settings(settings_values):
    return ClipBotSettings(_env_file=None, **settings_values)


@pytest.fixture
def credentials():
    return Credentials(access_token="user_token", token_type="bearer", refresh_token="refresh")


@pytest.fixture
def session(credentials):
    return PendingSession(channel="testchannel", username="testbot").authenticate(
        credentials, "12345"
    )


@pytest.fixture
def make_upstream():
    """Build an UpstreamClient whose requests are answered by *handler*."""
    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> UpstreamClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=5.0)
        return UpstreamClient(http)

    return factory


@pytest.fixture
def make_api(make_upstream):
    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> TwitchAPIClient:
        return TwitchAPIClient(
            make_upstream(handler),
            "test_client_id",
            "test_client_secret",
            helix_url=HELIX_URL,
        )

    return factory


@pytest.fixture
def transport():
    """Chat transport double recording every say() call"""
    fake = Mock()
    fake.connect = AsyncMock()
    fake.say = AsyncMock()
    fake.close = AsyncMock()
    fake.on_message = Mock()
    return fake


@pytest.fixture
def message():
    def factory(text: str, *, is_self: bool = False, channel: str = "testchannel") -> InboundMessage:
        return InboundMessage(
            channel=channel,
            text=text,
            sender_tags={"username": "viewer", "display-name": "Viewer"},
            is_self=is_self,
        )

    return factory
