"""Response bodies of the Twitch endpoints we call.

Each schema is validated before any field is read; a body that does not
match becomes a ``ResponseError`` in the upstream client.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _TwitchBody(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TokenResponse(_TwitchBody):
    """Body of ``POST oauth2/token`` with ``grant_type=authorization_code``."""

    access_token: str = Field(..., min_length=1)
    token_type: str = Field(default="bearer")
    refresh_token: str = Field(default="")
    expires_in: int | None = Field(default=None)
    scope: list[str] = Field(default_factory=list)


class HelixUser(_TwitchBody):
    id: str = Field(..., min_length=1)
    login: str | None = None
    display_name: str | None = None


class UsersResponse(_TwitchBody):
    """Body of ``GET helix/users``; the first entry is the token owner."""

    data: list[HelixUser] = Field(..., min_length=1)


class HelixClip(_TwitchBody):
    id: str | None = None
    edit_url: str = Field(..., min_length=1)


class ClipsResponse(_TwitchBody):
    """Body of ``POST helix/clips``."""

    data: list[HelixClip] = Field(..., min_length=1)
