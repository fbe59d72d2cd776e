"""core.stream

Reassemble a chunked ``text/event-stream`` body into ordered text deltas.

`StreamReassembler` is a small state machine that knows nothing about the
transport: it is fed raw byte chunks, whatever their boundaries, and returns
the events completed by each chunk. `reassemble` drives it over an async byte
iterator and hands every delta to the caller's callback.

States
======
``reading``          waiting for the next chunk
``draining_buffer``  processing the complete lines currently buffered
``done``             ``[DONE]`` seen or end of stream; further input ignored

Transport errors are not a state: they propagate from the iterator.
"""

from __future__ import annotations

import codecs
import inspect
import json
import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from inference_bridge.core.types import StreamEvent

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, Awaitable, Callable

    DeltaCallback = Callable[[str], Awaitable[None] | None]

logger = logging.getLogger(__name__)

DATA_PREFIX = 'data:'
DONE_SENTINEL = '[DONE]'


class ReassemblerState(StrEnum):
    reading = 'reading'
    draining_buffer = 'draining_buffer'
    done = 'done'


class StreamReassembler:
    """Incremental SSE decoder for one streaming call.

    Multi-byte characters split across chunks are handled by an incremental
    UTF-8 decoder; a ``data:`` line split across chunks stays in the buffer
    until its newline arrives.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
        self._buffer = ''
        self.state: ReassemblerState = ReassemblerState.reading
        self.dropped_events = 0

    @property
    def done(self) -> bool:
        return self.state is ReassemblerState.done

    def feed(self, chunk: bytes) -> list[StreamEvent]:
        """Consume *chunk* and return the events it completed, in order."""
        if self.done:
            return []
        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split('\n')
        return self._drain(lines)

    def finish(self) -> list[StreamEvent]:
        """Signal end of stream and process whatever is still buffered."""
        if self.done:
            return []
        tail = self._buffer + self._decoder.decode(b'', final=True)
        self._buffer = ''
        events = self._drain([tail]) if tail.strip() else []
        self.state = ReassemblerState.done
        return events

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _drain(self, lines: list[str]) -> list[StreamEvent]:
        self.state = ReassemblerState.draining_buffer
        events: list[StreamEvent] = []
        for line in lines:
            if not line.startswith(DATA_PREFIX):
                continue  # comments, heartbeats, event:/id: fields
            payload = line[len(DATA_PREFIX) :].strip()
            if payload == DONE_SENTINEL:
                events.append(StreamEvent.done())
                self._buffer = ''
                self.state = ReassemblerState.done
                return events
            events.extend(self._decode_event(payload))
        self.state = ReassemblerState.reading
        return events

    def _decode_event(self, payload: str) -> list[StreamEvent]:
        try:
            data = json.loads(payload)
        except ValueError as exc:
            self.dropped_events += 1
            logger.warning('Skipping malformed stream event: %s', exc, extra={'payload': payload[:200]})
            return []

        choices = data.get('choices') if isinstance(data, dict) else None
        if not isinstance(choices, list):
            return []

        events: list[StreamEvent] = []
        for choice in choices:
            delta = choice.get('delta') if isinstance(choice, dict) else None
            content = delta.get('content') if isinstance(delta, dict) else None
            if isinstance(content, str) and content:
                events.append(StreamEvent.delta(content))
        return events


async def reassemble(chunks: AsyncIterable[bytes], on_delta: DeltaCallback) -> StreamReassembler:
    """Feed *chunks* through a fresh reassembler, calling *on_delta* per delta.

    *on_delta* may be a plain function or a coroutine function. It is awaited
    before the next chunk is read, so a slow consumer stalls the reader
    instead of letting buffers grow. Returns the finished reassembler.
    """
    reassembler = StreamReassembler()

    async def _emit(events: list[StreamEvent]) -> bool:
        for event in events:
            if event.is_terminal:
                return True
            result = on_delta(event.content)
            if inspect.isawaitable(result):
                await result
        return False

    async for chunk in chunks:
        if await _emit(reassembler.feed(chunk)):
            return reassembler

    await _emit(reassembler.finish())
    return reassembler
