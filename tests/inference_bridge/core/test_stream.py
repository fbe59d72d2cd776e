from __future__ import annotations

import json
import logging

import pytest

from inference_bridge.core.stream import ReassemblerState, StreamReassembler, reassemble


def sse(*contents: str) -> bytes:
    """Encode one ``data:`` line carrying a choice per content fragment."""
    choices = [{'index': i, 'delta': {'content': c}} for i, c in enumerate(contents)]
    return f'data: {json.dumps({"choices": choices}, ensure_ascii=False)}\n\n'.encode()


DONE = b'data: [DONE]\n\n'
PAYLOAD = sse('Hel') + sse('lo, ') + sse('wörld 🌍') + b': keep-alive\n\n' + sse('!') + DONE


def collect(chunks: list[bytes]) -> list[str]:
    reassembler = StreamReassembler()
    deltas: list[str] = []
    for chunk in chunks:
        for event in reassembler.feed(chunk):
            if event.is_terminal:
                return deltas
            deltas.append(event.content)
    deltas.extend(e.content for e in reassembler.finish() if not e.is_terminal)
    return deltas


async def agen(chunks: list[bytes]):  # noqa: ANN201
    for chunk in chunks:
        yield chunk


def test_unsplit_stream() -> None:
    assert collect([PAYLOAD]) == ['Hel', 'lo, ', 'wörld 🌍', '!']


def test_every_split_offset_yields_identical_deltas() -> None:
    expected = collect([PAYLOAD])
    for offset in range(len(PAYLOAD) + 1):
        assert collect([PAYLOAD[:offset], PAYLOAD[offset:]]) == expected, offset


def test_byte_at_a_time() -> None:
    chunks = [PAYLOAD[i : i + 1] for i in range(len(PAYLOAD))]
    assert collect(chunks) == ['Hel', 'lo, ', 'wörld 🌍', '!']


def test_done_stops_processing_of_trailing_bytes() -> None:
    reassembler = StreamReassembler()
    events = reassembler.feed(sse('a') + DONE + sse('never'))
    assert [e.content for e in events if not e.is_terminal] == ['a']
    assert events[-1].is_terminal
    assert reassembler.state is ReassemblerState.done
    assert reassembler.feed(sse('late')) == []


def test_malformed_event_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    reassembler = StreamReassembler()
    with caplog.at_level(logging.WARNING):
        events = reassembler.feed(sse('a') + b'data: {not json\n' + sse('b'))
    assert [e.content for e in events] == ['a', 'b']
    assert reassembler.dropped_events == 1
    assert 'malformed stream event' in caplog.text


def test_end_of_stream_without_sentinel_flushes_last_line() -> None:
    data = sse('a') + sse('b').rstrip(b'\n')
    assert collect([data]) == ['a', 'b']


def test_choices_emitted_in_list_order_and_empty_content_skipped() -> None:
    data = sse('first', '', 'third') + b'data: {"choices": [{"delta": {}}]}\n'
    assert collect([data]) == ['first', 'third']


def test_crlf_line_endings() -> None:
    data = sse('x').replace(b'\n', b'\r\n') + b'data: [DONE]\r\n'
    assert collect([data]) == ['x']


def test_state_returns_to_reading_between_chunks() -> None:
    reassembler = StreamReassembler()
    reassembler.feed(sse('a')[:5])
    assert reassembler.state is ReassemblerState.reading
    reassembler.finish()
    assert reassembler.state is ReassemblerState.done


@pytest.mark.asyncio
async def test_reassemble_with_sync_callback() -> None:
    received: list[str] = []
    await reassemble(agen([PAYLOAD[:7], PAYLOAD[7:40], PAYLOAD[40:]]), received.append)
    assert received == ['Hel', 'lo, ', 'wörld 🌍', '!']


@pytest.mark.asyncio
async def test_callback_is_awaited_before_next_read() -> None:
    log: list[str] = []

    async def chunks():  # noqa: ANN202
        for i, chunk in enumerate([sse('a'), sse('b'), DONE]):
            log.append(f'read{i}')
            yield chunk

    async def on_delta(text: str) -> None:
        log.append(text)

    await reassemble(chunks(), on_delta)
    assert log == ['read0', 'a', 'read1', 'b', 'read2']


@pytest.mark.asyncio
async def test_reassemble_stops_reading_after_done() -> None:
    reads: list[int] = []

    async def chunks():  # noqa: ANN202
        for i, chunk in enumerate([sse('a') + DONE, sse('b')]):
            reads.append(i)
            yield chunk

    received: list[str] = []
    reassembler = await reassemble(chunks(), received.append)
    assert received == ['a']
    assert reads == [0]
    assert reassembler.done
