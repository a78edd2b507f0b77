"""Conversation state for the chat client.

All state lives in one ``ChatState`` object. Transitions are plain functions
that take a state and return a new one, so a turn can be driven (and tested)
without any UI or network.

    IDLE --submit--> AWAITING --delta--> STREAMING --delta--> STREAMING
    AWAITING/STREAMING --complete|fail--> IDLE
"""

import logging
from enum import Enum

from pydantic import BaseModel, Field

from oracle.models.schemas import ChatMessage, UsageSnapshot
from oracle.services.token_budget import usage_snapshot

logger = logging.getLogger(__name__)


class TurnPhase(str, Enum):
    IDLE = "idle"
    AWAITING = "awaiting"
    STREAMING = "streaming"


class ChatState(BaseModel):
    messages: list[ChatMessage] = Field(default_factory=list)
    phase: TurnPhase = TurnPhase.IDLE
    draft: str = ""
    usage: UsageSnapshot = Field(default_factory=UsageSnapshot)

    @property
    def busy(self) -> bool:
        return self.phase is not TurnPhase.IDLE


def submit(state: ChatState, text: str) -> ChatState:
    """Start a turn with a new user message.

    Blank input, or input while a turn is in flight, leaves the state as is.
    """
    if not text.strip() or state.busy:
        return state
    messages = [*state.messages, ChatMessage(role="user", content=text)]
    return ChatState(
        messages=messages,
        phase=TurnPhase.AWAITING,
        draft="",
        usage=usage_snapshot(messages),
    )


def receive_delta(state: ChatState, text: str) -> ChatState:
    if state.phase is TurnPhase.IDLE:
        logger.warning("Ignoring delta received outside a turn")
        return state
    return state.model_copy(
        update={"phase": TurnPhase.STREAMING, "draft": state.draft + text}
    )


def _finish(state: ChatState, content: str) -> ChatState:
    messages = [*state.messages, ChatMessage(role="assistant", content=content)]
    return ChatState(
        messages=messages,
        phase=TurnPhase.IDLE,
        draft="",
        usage=usage_snapshot(messages),
    )


def complete(state: ChatState) -> ChatState:
    """Commit the draft (empty if nothing arrived) as the assistant reply."""
    if state.phase is TurnPhase.IDLE:
        return state
    return _finish(state, state.draft)


def fail(state: ChatState, error: str) -> ChatState:
    """Commit a readable error message in place of the assistant reply."""
    if state.phase is TurnPhase.IDLE:
        return state
    return _finish(state, f"Error: {error}")


def outgoing_messages(state: ChatState) -> list[dict[str, str]]:
    return [m.model_dump() for m in state.messages]
