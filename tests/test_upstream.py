"""
Tests for the upstream client failure classification
"""
import httpx
import pytest

from clipbot.core.errors import NoResponseError, RequestSetupError, ResponseError
from clipbot.models import UsersResponse

USERS_URL = "https://api.twitch.tv/helix/users"


@pytest.mark.unit
class TestResponseErrors:
    async def test_error_status_carries_body(self, make_upstream):
        upstream = make_upstream(lambda request: httpx.Response(401, json={"error": "invalid_token"}))

        with pytest.raises(ResponseError) as exc_info:
            await upstream.request("GET", USERS_URL, schema=UsersResponse)

        assert exc_info.value.status_code == 401
        assert exc_info.value.body == {"error": "invalid_token"}

    async def test_error_status_with_text_body(self, make_upstream):
        upstream = make_upstream(lambda request: httpx.Response(500, text="upstream down"))

        with pytest.raises(ResponseError) as exc_info:
            await upstream.request("GET", USERS_URL, schema=UsersResponse)

        assert exc_info.value.status_code == 500
        assert exc_info.value.body == "upstream down"

    async def test_non_json_success_body(self, make_upstream):
        upstream = make_upstream(lambda request: httpx.Response(200, text="<html>ok</html>"))

        with pytest.raises(ResponseError) as exc_info:
            await upstream.request("GET", USERS_URL, schema=UsersResponse)

        assert exc_info.value.status_code == 200
        assert exc_info.value.body == "<html>ok</html>"

    async def test_schema_mismatch_on_success(self, make_upstream):
        upstream = make_upstream(lambda request: httpx.Response(200, json={"users": []}))

        with pytest.raises(ResponseError) as exc_info:
            await upstream.request("GET", USERS_URL, schema=UsersResponse)

        assert exc_info.value.status_code == 200
        assert exc_info.value.body == {"users": []}

    async def test_valid_body_is_parsed(self, make_upstream):
        upstream = make_upstream(lambda request: httpx.Response(200, json={"data": [{"id": "1"}]}))

        users = await upstream.request("GET", USERS_URL, schema=UsersResponse)

        assert users.data[0].id == "1"


@pytest.mark.unit
class TestNoResponseErrors:
    async def test_timeout(self, make_upstream):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        upstream = make_upstream(handler)

        with pytest.raises(NoResponseError):
            await upstream.request("GET", USERS_URL, schema=UsersResponse)

    async def test_connection_failure(self, make_upstream):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        upstream = make_upstream(handler)

        with pytest.raises(NoResponseError) as exc_info:
            await upstream.request("GET", USERS_URL, schema=UsersResponse)

        assert "ConnectError" in exc_info.value.reason


@pytest.mark.unit
class TestRequestSetupErrors:
    @pytest.mark.parametrize("url", ["ftp://api.twitch.tv/helix/users", "not a url", "/helix/users"])
    async def test_invalid_url_is_never_sent(self, make_upstream, url):
        sent = []
        upstream = make_upstream(lambda request: sent.append(request) or httpx.Response(200, json={}))

        with pytest.raises(RequestSetupError):
            await upstream.request("GET", url, schema=UsersResponse)

        assert sent == []

    async def test_unsupported_protocol_from_transport(self, make_upstream):
        def handler(request):
            raise httpx.UnsupportedProtocol("unsupported", request=request)

        upstream = make_upstream(handler)

        with pytest.raises(RequestSetupError):
            await upstream.request("GET", USERS_URL, schema=UsersResponse)
