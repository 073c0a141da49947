"""Single call path for every request to the Twitch API.

Failures are sorted into three kinds so callers can choose what to tell the
user:

- ``ResponseError``: Twitch answered. Error status, non-JSON body, or a body
  that does not match the expected schema.
- ``NoResponseError``: the request went out but nothing came back (network
  failure, timeout).
- ``RequestSetupError``: the request could not be built or sent at all.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from clipbot.core.errors import NoResponseError, RequestSetupError, ResponseError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _decode_body(response: httpx.Response) -> Any:
    """Return the JSON body if it parses, otherwise the raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text


class UpstreamClient:
    """Performs requests on a shared ``httpx.AsyncClient`` and validates replies.

    The timeout configured on the injected client applies to every call; a
    timeout surfaces as ``NoResponseError``.
    """

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def close(self) -> None:
        await self._http.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        schema: type[ModelT],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
    ) -> ModelT:
        try:
            target = httpx.URL(url)
            if target.scheme not in ("http", "https") or not target.host:
                raise httpx.InvalidURL(f"not an absolute http(s) URL: {url!r}")
            request = self._http.build_request(
                method, target, headers=headers, params=params, data=data
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            logger.error(f"Could not build {method} {url}: {e}")
            raise RequestSetupError(str(e)) from e

        try:
            response = await self._http.send(request)
        except httpx.UnsupportedProtocol as e:
            logger.error(f"Could not dispatch {method} {url}: {e}")
            raise RequestSetupError(str(e)) from e
        except httpx.TimeoutException as e:
            logger.error(f"{method} {url} timed out before a response arrived")
            raise NoResponseError(f"timeout: {type(e).__name__}") from e
        except httpx.TransportError as e:
            logger.error(f"{method} {url} failed without a response: {type(e).__name__}: {e}")
            raise NoResponseError(f"{type(e).__name__}: {e}") from e

        if response.is_error:
            body = _decode_body(response)
            logger.error(f"{method} {url} returned HTTP {response.status_code}: {body!r}")
            raise ResponseError(response.status_code, body)

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"{method} {url} returned a non-JSON body")
            raise ResponseError(response.status_code, response.text) from e

        try:
            return schema.model_validate(payload)
        except ValidationError as e:
            logger.error(f"{method} {url} returned an unexpected body: {e.error_count()} error(s)")
            raise ResponseError(response.status_code, payload) from e
