"""Credentials and session records."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credentials:
    """OAuth user token obtained from the code exchange."""

    access_token: str
    token_type: str = "bearer"
    refresh_token: str = ""
    expires_in: int | None = None
    scopes: tuple[str, ...] = field(default_factory=tuple)

    def __repr__(self) -> str:
        return f"Credentials(token_type={self.token_type!r}, scopes={self.scopes!r})"


@dataclass(frozen=True)
class Session:
    """An authenticated chat session.

    Only ``PendingSession.authenticate`` should build one, so anything that
    takes a ``Session`` can rely on the token and broadcaster id being set.
    """

    channel: str
    username: str
    credentials: Credentials
    broadcaster_id: str

    def __post_init__(self) -> None:
        if not self.credentials.access_token:
            raise ValueError("Session requires an access token")
        if not self.broadcaster_id:
            raise ValueError("Session requires a broadcaster id")


@dataclass(frozen=True)
class PendingSession:
    """Channel and account known from config, not yet authenticated."""

    channel: str
    username: str

    def authenticate(self, credentials: Credentials, broadcaster_id: str) -> Session:
        return Session(
            channel=self.channel,
            username=self.username,
            credentials=credentials,
            broadcaster_id=broadcaster_id,
        )
