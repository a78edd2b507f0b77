"""Token and cost estimation for the advisory usage readout.

Uses a fixed character-based heuristic (~4 chars/token) rather than a real
tokenizer. The numbers are display aids only: nothing is truncated or blocked
when the context limit is approached or exceeded.
"""

import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from oracle.models.schemas import ChatMessage, UsageSnapshot

# Advertised context window of the upstream model
CONTEXT_LIMIT = 200_000

# USD per 1K tokens
PRICE_PER_1K_INPUT = 0.003
PRICE_PER_1K_OUTPUT = 0.015

_CHARS_PER_TOKEN = 4

# Percent-of-context thresholds for the readout colour
_WARNING_PERCENT = 50
_HIGH_PERCENT = 75
_CRITICAL_PERCENT = 90


def estimate_tokens(text: str) -> int:
    """Estimate token count from text using character heuristic."""
    return math.ceil(len(text) / _CHARS_PER_TOKEN)


def estimate_cost(input_tokens: int, output_tokens: int = 0) -> float:
    input_cost = input_tokens / 1000 * PRICE_PER_1K_INPUT
    output_cost = output_tokens / 1000 * PRICE_PER_1K_OUTPUT
    return input_cost + output_cost


def context_percentage(tokens: int) -> float:
    """Share of the context window used, clamped to [0, 100]."""
    return max(0.0, min(tokens / CONTEXT_LIMIT * 100, 100.0))


def context_level(tokens: int) -> str:
    """Classify usage as ``ok``, ``warning``, ``high`` or ``critical``."""
    percent = context_percentage(tokens)
    if percent >= _CRITICAL_PERCENT:
        return "critical"
    if percent >= _HIGH_PERCENT:
        return "high"
    if percent >= _WARNING_PERCENT:
        return "warning"
    return "ok"


def _fixed(value: float, places: int) -> str:
    """Fixed-point text with halves rounded up, from the exact float value."""
    return str(Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def format_tokens(tokens: int) -> str:
    """Bare count below 1000, else one decimal with a ``K`` suffix.

    Halves round up (1250 -> ``1.3K``), applied to the exact value of the
    float quotient.
    """
    if tokens >= 1000:
        return f"{_fixed(tokens / 1000, 1)}K"
    return str(tokens)


def format_cost(cost: float) -> str:
    return f"${cost:.4f}"


def conversation_text(messages: Sequence[ChatMessage]) -> str:
    return " ".join(m.content for m in messages)


def usage_snapshot(messages: Sequence[ChatMessage]) -> UsageSnapshot:
    """Recompute token count and cost over the whole conversation.

    Every message counts as input; the estimate is not split by role.
    """
    tokens = estimate_tokens(conversation_text(messages))
    return UsageSnapshot(token_count=tokens, cost_estimate=estimate_cost(tokens))


def render_usage(usage: UsageSnapshot) -> str:
    """One-line readout, e.g. ``1.5K tokens (0.8% of context) · $0.0045``."""
    percent = context_percentage(usage.token_count)
    return (
        f"{format_tokens(usage.token_count)} tokens "
        f"({_fixed(percent, 1)}% of context) · {format_cost(usage.cost_estimate)}"
    )
