"""
Tests for the chat-completion client, using httpx.MockTransport as the service.
"""

import json

import httpx
import pytest

from edit_pilot.config.models import CompletionConfig
from edit_pilot.core.llm_client import (
    CompletionClient, CompletionError, DecodeError, ProtocolError, TransportError,
)

from .fixtures.workspace import completion_transport


def make_client(transport, **config):
    return CompletionClient(CompletionConfig(**config), transport=transport)


@pytest.mark.unit
class TestCompletionRequest:

    @pytest.mark.asyncio
    async def test_returns_first_choice_content(self):
        client = make_client(completion_transport('{"command": "togglePanel"}'))

        content = await client.request("http://localhost:1234", "system", "show the panel")

        assert content == '{"command": "togglePanel"}'

    @pytest.mark.asyncio
    async def test_request_shape(self):
        requests = []
        client = make_client(completion_transport("ok", requests=requests), model="qwen")

        await client.request("http://localhost:1234/", "SYSTEM PROMPT", "go to line 25")

        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://localhost:1234/v1/chat/completions"
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {
            "model": "qwen",
            "messages": [
                {"role": "system", "content": "SYSTEM PROMPT"},
                {"role": "user", "content": "go to line 25"},
            ],
            "temperature": 0.1,
            "max_tokens": 500,
        }

    @pytest.mark.asyncio
    async def test_https_endpoint(self):
        requests = []
        client = make_client(completion_transport("ok", requests=requests))

        await client.request("https://models.example.com", "s", "u")

        assert requests[0].url.scheme == "https"
        assert requests[0].url.host == "models.example.com"

    @pytest.mark.asyncio
    async def test_custom_chat_path(self):
        requests = []
        client = make_client(completion_transport("ok", requests=requests), chat_path="api/chat")

        await client.request("http://localhost:8080", "s", "u")

        assert requests[0].url.path == "/api/chat"


@pytest.mark.unit
class TestCompletionFailures:

    @pytest.mark.asyncio
    async def test_connection_refused_is_transport_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(completion_transport(handler=refuse))

        with pytest.raises(TransportError) as exc_info:
            await client.request("http://localhost:1234", "s", "u")

        assert "localhost:1234" in exc_info.value.message
        assert isinstance(exc_info.value, CompletionError)

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self):
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(completion_transport(handler=slow), request_timeout=0.5)

        with pytest.raises(TransportError):
            await client.request("http://localhost:1234", "s", "u")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["ftp://localhost:1234", "localhost:1234", ""])
    async def test_unsupported_scheme_is_transport_error(self, url):
        requests = []
        client = make_client(completion_transport("ok", requests=requests))

        with pytest.raises(TransportError):
            await client.request(url, "s", "u")
        assert requests == []

    @pytest.mark.asyncio
    async def test_non_json_body_is_decode_error(self):
        client = make_client(completion_transport(raw=b"<html>bad gateway</html>"))

        with pytest.raises(DecodeError):
            await client.request("http://localhost:1234", "s", "u")

    @pytest.mark.asyncio
    async def test_error_status_is_protocol_error(self):
        client = make_client(completion_transport(raw=b'{"error": "model not loaded"}', status_code=500))

        with pytest.raises(ProtocolError) as exc_info:
            await client.request("http://localhost:1234", "s", "u")

        assert exc_info.value.status_code == 500
        assert "500" in exc_info.value.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {},
        {"choices": []},
        {"choices": [{}]},
        {"choices": [{"message": {}}]},
        [1, 2, 3],
    ])
    async def test_unexpected_shape_is_protocol_error(self, body):
        client = make_client(completion_transport(raw=json.dumps(body).encode()))

        with pytest.raises(ProtocolError):
            await client.request("http://localhost:1234", "s", "u")

    @pytest.mark.asyncio
    async def test_non_text_content_is_protocol_error(self):
        client = make_client(completion_transport(content={"command": "goToLine"}))

        with pytest.raises(ProtocolError, match="expected text"):
            await client.request("http://localhost:1234", "s", "u")


@pytest.mark.unit
def test_build_payload_uses_configured_sampling():
    client = CompletionClient(CompletionConfig(model="m", temperature=0.7, max_tokens=64))

    payload = client.build_payload("sys", "user")

    assert payload["model"] == "m"
    assert payload["temperature"] == 0.7
    assert payload["max_tokens"] == 64
    assert [m["role"] for m in payload["messages"]] == ["system", "user"]
