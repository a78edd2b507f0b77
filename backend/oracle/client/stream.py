import logging
from collections.abc import Callable

import httpx

from oracle.client.consumer import (
    ChatState,
    complete,
    fail,
    outgoing_messages,
    receive_delta,
    submit,
)
from oracle.services.sse import ContentFrame, DoneFrame, ErrorFrame, Frame, FrameDecoder

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"


def _apply_frame(state: ChatState, frame: Frame) -> ChatState:
    if isinstance(frame, ContentFrame):
        return receive_delta(state, frame.text)
    if isinstance(frame, DoneFrame):
        return complete(state)
    if isinstance(frame, ErrorFrame):
        return fail(state, frame.message)
    return state


async def run_turn(
    client: httpx.AsyncClient,
    state: ChatState,
    text: str,
    *,
    url: str = CHAT_PATH,
    on_update: Callable[[ChatState], None] | None = None,
) -> ChatState:
    """Send one user turn to the relay and fold the reply into the state.

    The full history is posted every turn. The response body is read chunk by
    chunk; the turn ends at the first ``[DONE]`` or error frame, or when the
    connection closes.
    """
    state = submit(state, text)
    if not state.busy:
        return state

    def _notify(s: ChatState) -> None:
        if on_update is not None:
            on_update(s)

    _notify(state)
    decoder = FrameDecoder()
    try:
        async with client.stream(
            "POST", url, json={"messages": outgoing_messages(state)}
        ) as resp:
            if resp.status_code != 200:
                await resp.aread()
                logger.error("Relay returned %s: %s", resp.status_code, resp.text)
                state = fail(state, "Failed to get response")
                _notify(state)
                return state

            async for chunk in resp.aiter_text():
                for frame in decoder.feed(chunk):
                    state = _apply_frame(state, frame)
                    _notify(state)
                    if not state.busy:
                        return state

            for frame in decoder.flush():
                state = _apply_frame(state, frame)
                _notify(state)
                if not state.busy:
                    return state
    except httpx.HTTPError as exc:
        logger.error("Relay request failed: %s", exc)
        state = fail(state, str(exc) or type(exc).__name__)
        _notify(state)
        return state

    logger.warning("Stream closed without a completion marker")
    state = fail(state, "Stream ended before completion")
    _notify(state)
    return state
