"""Wire framing between the relay and its clients.

Every frame is a single ``data: <payload>\\n\\n`` line. The payload is either a
JSON object (``{"content": ...}`` or ``{"error": ...}``) or the literal
terminal marker ``[DONE]``.
"""

import json as json_mod
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_MARKER = "[DONE]"
DONE_FRAME = f"{DATA_PREFIX}{DONE_MARKER}\n\n"


@dataclass(frozen=True)
class ContentFrame:
    text: str


@dataclass(frozen=True)
class ErrorFrame:
    message: str


@dataclass(frozen=True)
class DoneFrame:
    pass


Frame = ContentFrame | ErrorFrame | DoneFrame


def _data_frame(data: dict) -> str:
    return f"{DATA_PREFIX}{json_mod.dumps(data)}\n\n"


def encode_content(text: str) -> str:
    return _data_frame({"content": text})


def encode_error(message: str) -> str:
    return _data_frame({"error": message})


def parse_frame_line(line: str) -> Frame | None:
    """Interpret one line of the stream.

    Returns None for blank lines, lines without the ``data: `` prefix, and
    malformed payloads (the latter are logged and dropped).
    """
    if not line.startswith(DATA_PREFIX):
        return None
    data = line[len(DATA_PREFIX):]
    if data == DONE_MARKER:
        return DoneFrame()

    try:
        parsed = json_mod.loads(data)
    except json_mod.JSONDecodeError as exc:
        logger.warning("Skipping malformed frame %r: %s", data, exc)
        return None

    if not isinstance(parsed, dict):
        logger.warning("Skipping non-object frame: %r", data)
        return None
    if isinstance(parsed.get("content"), str):
        return ContentFrame(parsed["content"])
    if parsed.get("error") is not None:
        return ErrorFrame(str(parsed["error"]))
    logger.warning("Skipping frame with no content or error: %r", data)
    return None


class FrameDecoder:
    """Incremental decoder for text chunks that need not align with frames.

    Partial lines are buffered until their newline arrives.
    """

    def __init__(self) -> None:
        self._buffer = ""

    def feed(self, chunk: str) -> list[Frame]:
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        return self._parse_lines(lines)

    def flush(self) -> list[Frame]:
        """Interpret whatever is left once the stream has ended."""
        rest, self._buffer = self._buffer, ""
        return self._parse_lines([rest])

    @staticmethod
    def _parse_lines(lines: list[str]) -> list[Frame]:
        frames: list[Frame] = []
        for line in lines:
            frame = parse_frame_line(line.rstrip("\r"))
            if frame is not None:
                frames.append(frame)
        return frames
