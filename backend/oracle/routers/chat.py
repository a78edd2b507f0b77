import logging
from contextlib import aclosing

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from oracle.config import settings
from oracle.dependencies import require_upstream_credentials
from oracle.models.schemas import ChatRequest
from oracle.services.document import load_document_snapshot
from oracle.services.llm import LLMError, stream_chat
from oracle.services.prompt import build_system_prompt
from oracle.services.sse import DONE_FRAME, encode_content, encode_error

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", dependencies=[Depends(require_upstream_credentials)])
async def chat_stream(body: ChatRequest, request: Request):
    """Relay the conversation to the LLM and stream the reply via SSE.

    Configuration problems are reported with a status code; anything that
    goes wrong once the stream has started is reported as a single in-band
    error frame, since the headers are already committed by then.
    """
    return StreamingResponse(
        _stream_response(body, request),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


async def _stream_response(body: ChatRequest, request: Request):
    """Async generator that yields SSE frames for one relay call.

    Emits either every delta followed by ``[DONE]``, or the deltas received so
    far followed by exactly one error frame, never both markers.

    Client disconnects are polled only at two points: once after the
    document fetch (before the upstream call is opened) and after each
    forwarded delta. A client that leaves mid-fetch or while the upstream is
    silent is noticed only when Starlette cancels this generator or the
    httpx read timeout fires.
    """
    messages = [m.model_dump() for m in body.messages]
    try:
        # 1. Fresh document snapshot + system prompt for every request
        document_text = await load_document_snapshot(settings.document_url)
        system_prompt = build_system_prompt(document_text)
        if await request.is_disconnected():
            logger.info("Client disconnected before the upstream call was opened")
            return

        # 2. Forward each delta as soon as it arrives
        async with aclosing(
            stream_chat(system_prompt=system_prompt, messages=messages)
        ) as tokens:
            async for token in tokens:
                yield encode_content(token)
                if await request.is_disconnected():
                    # aclosing() tears down the upstream request on the way out
                    logger.info("Client disconnected during streaming")
                    return
    except LLMError as exc:
        logger.error("LLM streaming failed: %s", exc)
        yield encode_error(str(exc))
        return
    except httpx.HTTPError as exc:
        logger.error("Upstream connection failed: %s", exc)
        yield encode_error(f"Upstream connection failed ({type(exc).__name__})")
        return
    except Exception:
        logger.exception("Streaming error")
        yield encode_error("An unexpected error occurred. Please try again.")
        return

    yield DONE_FRAME
