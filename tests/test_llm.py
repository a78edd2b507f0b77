"""Tests for the streaming Anthropic client."""

import json
from unittest.mock import patch

import httpx
import pytest

from oracle.config import settings
from oracle.services import llm
from oracle.services.llm import ANTHROPIC_URL, LLMError, stream_chat


def _event(event_type: str, data: dict) -> str:
    return f"event: {event_type}\ndata: {json.dumps(data)}\n\n"


def _text_delta(text: str) -> str:
    return _event(
        "content_block_delta",
        {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": text}},
    )


MESSAGE_START = _event("message_start", {"type": "message_start", "message": {"id": "msg_1"}})
MESSAGE_STOP = _event("message_stop", {"type": "message_stop"})


async def _collect(**kwargs) -> list[str]:
    return [token async for token in stream_chat(**kwargs)]


@pytest.fixture
def upstream(api_key: str):
    """Patch the shared client; yields a setter for the upstream handler."""
    state: dict = {"requests": []}

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        return state["respond"](request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    with patch.object(llm, "get_http_client", return_value=client):
        yield state


@pytest.mark.asyncio
async def test_stream_chat_yields_text_deltas(upstream: dict) -> None:
    body = (
        MESSAGE_START
        + _event("content_block_start", {"type": "content_block_start", "index": 0})
        + _text_delta("The ")
        + _event("ping", {"type": "ping"})
        + _text_delta("king is ")
        + _text_delta("Aldric.")
        + _event("message_delta", {"type": "message_delta", "delta": {"stop_reason": "end_turn"}})
        + MESSAGE_STOP
    )
    upstream["respond"] = lambda request: httpx.Response(200, text=body)

    messages = [{"role": "user", "content": "Who is the king?"}]
    tokens = await _collect(system_prompt="sys", messages=messages)

    assert tokens == ["The ", "king is ", "Aldric."]

    request = upstream["requests"][0]
    assert str(request.url) == ANTHROPIC_URL
    assert request.headers["x-api-key"] == "test-key"
    assert request.headers["anthropic-version"] == "2023-06-01"
    payload = json.loads(request.content)
    assert payload == {
        "model": settings.anthropic_model,
        "max_tokens": settings.anthropic_max_tokens,
        "system": "sys",
        "messages": messages,
        "stream": True,
    }


@pytest.mark.asyncio
async def test_stream_chat_skips_unparseable_lines(upstream: dict) -> None:
    body = _text_delta("a") + "data: {broken\n\n" + _text_delta("b") + MESSAGE_STOP
    upstream["respond"] = lambda request: httpx.Response(200, text=body)

    assert await _collect(system_prompt="sys", messages=[]) == ["a", "b"]


@pytest.mark.asyncio
async def test_stream_chat_non_200_raises(upstream: dict) -> None:
    upstream["respond"] = lambda request: httpx.Response(529, json={"type": "error"})

    with pytest.raises(LLMError, match="529"):
        await _collect(system_prompt="sys", messages=[])


@pytest.mark.asyncio
async def test_stream_chat_error_event_raises(upstream: dict) -> None:
    body = (
        _text_delta("partial")
        + _event(
            "error",
            {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}},
        )
    )
    upstream["respond"] = lambda request: httpx.Response(200, text=body)

    received: list[str] = []
    with pytest.raises(LLMError, match="Overloaded"):
        async for token in stream_chat(system_prompt="sys", messages=[]):
            received.append(token)
    assert received == ["partial"]


@pytest.mark.asyncio
async def test_close_http_client_resets_shared_client() -> None:
    client = llm.get_http_client()
    assert llm.get_http_client() is client
    await llm.close_http_client()
    assert llm._http_client is None
