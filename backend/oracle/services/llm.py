import json as json_mod
import logging
from collections.abc import AsyncIterator

import httpx

from oracle.config import settings

logger = logging.getLogger(__name__)

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

# Shared persistent HTTP client — avoids TCP+TLS handshake per call
_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Lazily create and return a shared httpx.AsyncClient.

    The read timeout doubles as the upstream deadline: a stream that goes
    silent for longer than ``upstream_timeout_seconds`` raises
    ``httpx.ReadTimeout`` instead of hanging the relay.
    """
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                settings.upstream_timeout_seconds,
                connect=settings.upstream_connect_timeout_seconds,
            ),
        )
    return _http_client


async def close_http_client() -> None:
    """Close the shared HTTP client (call on app shutdown)."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


class LLMError(Exception):
    """Raised when the LLM service fails."""


def _build_headers() -> dict[str, str]:
    return {
        "x-api-key": settings.anthropic_api_key,
        "anthropic-version": ANTHROPIC_VERSION,
        "content-type": "application/json",
    }


async def stream_chat(
    system_prompt: str,
    messages: list[dict[str, str]],
    max_tokens: int | None = None,
) -> AsyncIterator[str]:
    """Stream assistant text deltas from the Anthropic Messages API (SSE).

    Messages should be a list of {"role": "user"|"assistant", "content": ...}
    and are sent as-is; the conversation is never trimmed.
    Raises LLMError on non-200 status before streaming begins, and on an
    upstream ``error`` event mid-stream.
    """
    payload = {
        "model": settings.anthropic_model,
        "max_tokens": max_tokens or settings.anthropic_max_tokens,
        "system": system_prompt,
        "messages": messages,
        "stream": True,
    }

    client = get_http_client()
    async with client.stream(
        "POST", ANTHROPIC_URL, json=payload, headers=_build_headers()
    ) as resp:
        if resp.status_code != 200:
            body = await resp.aread()
            logger.error("Anthropic returned %s: %s", resp.status_code, body)
            raise LLMError(f"LLM service returned {resp.status_code}")

        async for line in resp.aiter_lines():
            if not line.startswith("data:"):
                continue
            data_str = line[5:].strip()
            try:
                event = json_mod.loads(data_str)
            except json_mod.JSONDecodeError:
                continue

            event_type = event.get("type")
            if event_type == "content_block_delta":
                delta = event.get("delta") or {}
                if delta.get("type") == "text_delta" and delta.get("text"):
                    yield delta["text"]
            elif event_type == "message_stop":
                break
            elif event_type == "error":
                error = event.get("error") or {}
                message = error.get("message") or "Unknown upstream error"
                logger.error("Anthropic stream error: %s", error)
                raise LLMError(message)
