"""Talk to a running Oracle relay from the terminal.

Streams each reply as it arrives and prints the estimated token/cost usage
after every turn. Type /quit (or Ctrl-D) to leave.

Usage (from project root):
    python scripts/chat.py [relay_url]
"""

import asyncio
import logging
import sys
from pathlib import Path

import httpx

# Add backend to path so we can import oracle modules
backend_dir = Path(__file__).resolve().parent.parent / "backend"
sys.path.insert(0, str(backend_dir))

from oracle.client.consumer import ChatState, TurnPhase
from oracle.client.stream import run_turn
from oracle.services.token_budget import context_level, render_usage

logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(message)s")

DEFAULT_URL = "http://localhost:8000"


class DraftPrinter:
    """Print only the part of the draft that has not been shown yet."""

    def __init__(self) -> None:
        self.shown = ""

    def __call__(self, state: ChatState) -> None:
        if state.phase is TurnPhase.STREAMING:
            print(state.draft[len(self.shown):], end="", flush=True)
            self.shown = state.draft
        elif state.phase is TurnPhase.IDLE:
            reply = state.messages[-1].content
            if reply.startswith(self.shown):
                print(reply[len(self.shown):], flush=True)
            else:
                # Failed mid-stream: the error replaces the partial draft
                print(f"\n{reply}", flush=True)
            self.shown = ""


async def main():
    base_url = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_URL
    state = ChatState()
    print(f"The Oracle @ {base_url}. Type /quit to exit.")

    # No overall timeout: replies stream for as long as the relay keeps sending
    async with httpx.AsyncClient(base_url=base_url, timeout=httpx.Timeout(None, connect=10.0)) as client:
        while True:
            try:
                text = input("\nyou> ")
            except EOFError:
                break
            if text.strip() == "/quit":
                break
            if not text.strip():
                continue

            print("oracle> ", end="", flush=True)
            state = await run_turn(client, state, text, on_update=DraftPrinter())
            print(f"[{context_level(state.usage.token_count)}] {render_usage(state.usage)}")


if __name__ == "__main__":
    asyncio.run(main())
