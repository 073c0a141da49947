"""Errors raised by upstream calls and the launch sequence."""

from __future__ import annotations

from typing import Any


class UpstreamError(Exception):
    """Base class for every failed call to the platform API."""


class ResponseError(UpstreamError):
    """The platform answered, but with an error status or an unusable body."""

    def __init__(self, status_code: int, body: Any) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Twitch responded with HTTP {status_code}: {body!r}")


class NoResponseError(UpstreamError):
    """The request was sent but no response ever arrived."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"No response from Twitch: {reason}")


class RequestSetupError(UpstreamError):
    """The request could not be built or dispatched."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Could not set up Twitch request: {reason}")


class LaunchError(Exception):
    """A launch step failed; no chat connection was attempted."""

    def __init__(self, step: str, cause: UpstreamError) -> None:
        self.step = step
        self.cause = cause
        super().__init__(f"Launch aborted at '{step}' step: {cause}")
