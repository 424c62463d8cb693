import json
from typing import Any, Dict, List

import httpx
import pytest

from chatsession.sessions import BackendError
from chatsession.upstream import OpenAIChatBackend, extract_reply


MESSAGES = [
    {"role": "system", "content": "Be helpful."},
    {"role": "user", "content": "hello"},
]


def _backend(handler, **kwargs) -> OpenAIChatBackend:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAIChatBackend(
        client=client,
        base_url="https://mock.local/v1/",
        model="test-model",
        **kwargs,
    )


@pytest.mark.asyncio
async def test_complete_posts_chat_completion_and_returns_content():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"choices": [{"message": {"role": "assistant", "content": "hi there"}}]},
        )

    backend = _backend(handler, api_key="sk-test", max_tokens=2000)
    reply = await backend.complete(MESSAGES, 0.7)

    assert reply == "hi there"
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://mock.local/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    body: Dict[str, Any] = json.loads(request.content.decode("utf-8"))
    assert body == {
        "model": "test-model",
        "messages": MESSAGES,
        "temperature": 0.7,
        "max_tokens": 2000,
    }


@pytest.mark.asyncio
async def test_no_authorization_header_without_key():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "Authorization" not in request.headers
        return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

    assert await _backend(handler).complete(MESSAGES, 0.5) == "ok"


@pytest.mark.asyncio
async def test_http_error_status_raises_backend_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, text="rate limited")

    with pytest.raises(BackendError) as exc_info:
        await _backend(handler).complete(MESSAGES, 0.5)

    assert exc_info.value.status_code == 429
    assert exc_info.value.text == "rate limited"


@pytest.mark.asyncio
async def test_transport_error_raises_backend_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendError) as exc_info:
        await _backend(handler).complete(MESSAGES, 0.5)

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_invalid_json_raises_backend_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(BackendError):
        await _backend(handler).complete(MESSAGES, 0.5)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"choices": []},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": None}}]},
        ["not", "a", "dict"],
    ],
)
def test_extract_reply_rejects_malformed_payloads(payload):
    with pytest.raises(BackendError):
        extract_reply(payload)
