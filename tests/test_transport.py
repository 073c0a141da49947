"""
Tests for the twitchio chat transport
"""
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from clipbot.core import transport as transport_module
from clipbot.core.transport import TwitchIOTransport, to_inbound_message


def make_payload(chatter_id: str, text: str = "hi"):
    payload = Mock()
    payload.text = text
    payload.broadcaster.name = "testchannel"
    payload.chatter.id = chatter_id
    payload.chatter.name = "viewer"
    payload.chatter.display_name = "Viewer"
    return payload


@pytest.mark.unit
class TestInboundConversion:
    def test_viewer_message(self):
        message = to_inbound_message(make_payload("777"), bot_id="12345")

        assert message.channel == "testchannel"
        assert message.text == "hi"
        assert message.is_self is False
        assert message.sender_name == "Viewer"
        assert message.sender_tags["user-id"] == "777"

    def test_own_message_is_flagged(self):
        message = to_inbound_message(make_payload("12345", "!clip"), bot_id="12345")

        assert message.is_self is True


def make_fake_client():
    """twitchio client double; start() runs the setup hook then idles until close()"""
    client = Mock()
    stopped = asyncio.Event()
    client.add_token = AsyncMock()
    client.fetch_users = AsyncMock(return_value=[Mock(id="555")])
    client.subscribe_websocket = AsyncMock()
    client.close = AsyncMock(side_effect=lambda: stopped.set())
    client.stopped = stopped
    return client


@pytest.fixture
def fake_client(monkeypatch):
    client = make_fake_client()
    monkeypatch.setattr(transport_module, "_ChatClient", Mock(return_value=client))
    return client


@pytest.fixture
def chat(fake_client, session):
    transport = TwitchIOTransport(lambda: session, client_id="cid", client_secret="secret")

    async def start(**kwargs):
        await transport._setup(fake_client)
        await fake_client.stopped.wait()

    fake_client.start = AsyncMock(side_effect=start)
    return transport


@pytest.mark.unit
class TestTwitchIOTransport:
    async def test_connect_subscribes_to_channel_chat(self, chat, fake_client):
        await chat.connect()

        fake_client.start.assert_awaited_once_with(
            with_adapter=False, load_tokens=False, save_tokens=False
        )
        fake_client.add_token.assert_awaited_once_with("user_token", "refresh")
        fake_client.fetch_users.assert_awaited_once_with(logins=["testchannel"])
        (subscription,), kwargs = fake_client.subscribe_websocket.call_args
        assert kwargs == {"token_for": "12345"}

        await chat.close()

    async def test_connect_raises_setup_failure(self, chat, fake_client):
        fake_client.fetch_users.return_value = []

        with pytest.raises(ConnectionError, match="Channel not found"):
            await chat.connect()

        fake_client.subscribe_websocket.assert_not_awaited()

    async def test_connect_raises_when_client_stops_early(self, chat, fake_client):
        fake_client.start = AsyncMock(return_value=None)

        with pytest.raises(ConnectionError, match="stopped before joining"):
            await chat.connect()

    async def test_say_before_connect(self, chat):
        with pytest.raises(ConnectionError):
            await chat.say("testchannel", "hello")

    async def test_say_sends_as_bot(self, chat, fake_client):
        target = Mock()
        target.send_message = AsyncMock()
        fake_client.create_partialuser = Mock(return_value=target)
        await chat.connect()

        await chat.say("testchannel", "hello")

        fake_client.create_partialuser.assert_called_once_with(user_id="555", user_login="testchannel")
        target.send_message.assert_awaited_once_with(message="hello", sender="12345", token_for="12345")

        await chat.close()

    async def test_deliver_fans_out_to_handlers(self, chat):
        first, second = AsyncMock(), AsyncMock()
        chat.on_message(first)
        chat.on_message(second)

        await chat._deliver(make_payload("777", "!clip"))

        (message,), _ = first.call_args
        assert message.text == "!clip"
        second.assert_awaited_once_with(message)

    async def test_close_waits_for_runner(self, chat, fake_client):
        await chat.connect()

        await chat.close()

        fake_client.close.assert_awaited_once()
        assert chat._runner.done()
        assert not chat._runner.cancelled()

    async def test_close_cancels_stuck_runner(self, chat, fake_client, monkeypatch):
        monkeypatch.setattr(transport_module, "CLOSE_TIMEOUT", 0.01)
        fake_client.close = AsyncMock()
        await chat.connect()

        await chat.close()

        with pytest.raises(asyncio.CancelledError):
            await chat._runner

    def test_reads_current_session(self, fake_client, session):
        from dataclasses import replace

        current = {"session": session}
        chat = TwitchIOTransport(lambda: current["session"], client_id="cid", client_secret="secret")
        current["session"] = replace(session, channel="otherchannel")

        assert chat.session.channel == "otherchannel"
