"""Twitch API calls used by the bot.

Token: the user access token from the authorization code exchange. It is
used both to resolve the account's broadcaster id and to create clips.
"""

from __future__ import annotations

import logging

from clipbot.core.errors import RequestSetupError
from clipbot.models import (
    ClipsResponse,
    Credentials,
    Session,
    TokenResponse,
    UsersResponse,
)
from clipbot.services.upstream import UpstreamClient

logger = logging.getLogger(__name__)

HELIX_BASE = "https://api.twitch.tv/helix"
DEFAULT_REDIRECT_URI = "http://localhost"


def _require(**values: str) -> None:
    empty = [name for name, value in values.items() if not value or not value.strip()]
    if empty:
        raise RequestSetupError(f"empty value for: {', '.join(empty)}")


class TwitchAPIClient:
    """Client for the token, users and clips endpoints.

    All calls go through one ``UpstreamClient`` so they share its failure
    classification.
    """

    def __init__(
        self,
        upstream: UpstreamClient,
        client_id: str,
        client_secret: str,
        *,
        helix_url: str = HELIX_BASE,
        redirect_uri: str = DEFAULT_REDIRECT_URI,
    ) -> None:
        self.upstream = upstream
        self.client_id = client_id
        self.client_secret = client_secret
        self.helix_url = helix_url.rstrip("/")
        self.redirect_uri = redirect_uri

    def _auth_headers(self, credentials: Credentials) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {credentials.access_token}",
            "Client-Id": self.client_id,
        }

    # ------------------------------------------------------------------
    # OAuth
    # ------------------------------------------------------------------

    async def exchange_code(self, endpoint: str, authorization_code: str) -> Credentials:
        """Exchange an authorization code for a user access token.

        Single attempt, no retry. Raises an ``UpstreamError`` on failure.
        """
        _require(
            endpoint=endpoint,
            client_id=self.client_id,
            client_secret=self.client_secret,
            authorization_code=authorization_code,
        )

        logger.info("Fetching Twitch OAuth token")
        token = await self.upstream.request(
            "POST",
            endpoint,
            schema=TokenResponse,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": authorization_code,
                "grant_type": "authorization_code",
                "redirect_uri": self.redirect_uri,
            },
        )
        logger.debug(f"Token granted with scopes: {token.scope}")
        return Credentials(
            access_token=token.access_token,
            token_type=token.token_type,
            refresh_token=token.refresh_token,
            expires_in=token.expires_in,
            scopes=tuple(token.scope),
        )

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def resolve_broadcaster_id(self, credentials: Credentials) -> str:
        """Return the id of the account that owns *credentials*."""
        _require(access_token=credentials.access_token, client_id=self.client_id)

        logger.info("Fetching broadcaster id")
        users = await self.upstream.request(
            "GET",
            f"{self.helix_url}/users",
            schema=UsersResponse,
            headers=self._auth_headers(credentials),
        )
        broadcaster_id = users.data[0].id
        logger.info(f"Successfully fetched broadcaster id: {broadcaster_id}")
        return broadcaster_id

    # ------------------------------------------------------------------
    # Clips
    # ------------------------------------------------------------------

    async def generate_clip(self, session: Session) -> str:
        """Create a clip of the live stream and return its edit URL."""
        clips = await self.upstream.request(
            "POST",
            f"{self.helix_url}/clips",
            schema=ClipsResponse,
            headers=self._auth_headers(session.credentials),
            params={"broadcaster_id": session.broadcaster_id},
        )
        edit_url = clips.data[0].edit_url
        logger.info(f"Created clip for {session.channel}: {edit_url}")
        return edit_url


async def exchange_code(
    upstream: UpstreamClient,
    endpoint: str,
    client_id: str,
    client_secret: str,
    authorization_code: str,
) -> Credentials:
    api = TwitchAPIClient(upstream, client_id, client_secret)
    return await api.exchange_code(endpoint, authorization_code)


async def resolve_broadcaster_id(
    upstream: UpstreamClient, credentials: Credentials, client_id: str
) -> str:
    api = TwitchAPIClient(upstream, client_id, client_secret="")
    return await api.resolve_broadcaster_id(credentials)


async def generate_clip(upstream: UpstreamClient, session: Session, client_id: str) -> str:
    api = TwitchAPIClient(upstream, client_id, client_secret="")
    return await api.generate_clip(session)
