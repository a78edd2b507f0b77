"""Tests for the relay's wire framing."""

import json

from oracle.services.sse import (
    DONE_FRAME,
    ContentFrame,
    DoneFrame,
    ErrorFrame,
    FrameDecoder,
    encode_content,
    encode_error,
    parse_frame_line,
)


def test_encode_content() -> None:
    frame = encode_content('He said "hi"\n')
    assert frame.startswith("data: ")
    assert frame.endswith("\n\n")
    assert json.loads(frame[len("data: "):]) == {"content": 'He said "hi"\n'}


def test_encode_error() -> None:
    assert encode_error("boom") == 'data: {"error": "boom"}\n\n'


def test_done_frame() -> None:
    assert DONE_FRAME == "data: [DONE]\n\n"


def test_decoder_reads_encoded_frames() -> None:
    decoder = FrameDecoder()
    stream = encode_content("Hello") + encode_content(" world") + DONE_FRAME
    assert decoder.feed(stream) == [
        ContentFrame("Hello"),
        ContentFrame(" world"),
        DoneFrame(),
    ]


def test_decoder_buffers_partial_lines() -> None:
    stream = encode_content("The ") + encode_content("king") + encode_error("late")
    decoder = FrameDecoder()
    frames = []
    # Split at every offset: no chunk boundary lines up with a frame
    for i in range(0, len(stream), 3):
        frames.extend(decoder.feed(stream[i:i + 3]))
    assert frames == [ContentFrame("The "), ContentFrame("king"), ErrorFrame("late")]
    assert decoder.flush() == []


def test_decoder_flush_handles_unterminated_last_line() -> None:
    decoder = FrameDecoder()
    assert decoder.feed("data: [DONE]") == []
    assert decoder.flush() == [DoneFrame()]


def test_decoder_skips_malformed_frames() -> None:
    decoder = FrameDecoder()
    stream = encode_content("a") + "data: {not json\n\n" + encode_content("b")
    assert decoder.feed(stream) == [ContentFrame("a"), ContentFrame("b")]


def test_decoder_handles_crlf() -> None:
    decoder = FrameDecoder()
    assert decoder.feed('data: {"content": "x"}\r\n\r\n') == [ContentFrame("x")]


def test_parse_frame_line_ignores_other_lines() -> None:
    assert parse_frame_line("") is None
    assert parse_frame_line(": keep-alive") is None
    assert parse_frame_line("event: ping") is None


def test_parse_frame_line_rejects_unknown_payloads() -> None:
    assert parse_frame_line("data: [1, 2]") is None
    assert parse_frame_line('data: {"other": 1}') is None
    assert parse_frame_line('data: {"content": 5}') is None
