"""core.types

Shared DTOs and enums used throughout *inference_bridge*.

These models live in the **core** layer so that *adapters*, *registry*, and
higher application layers can depend on them without causing circular imports.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Chat roles (OpenAI-style for broad compatibility)
# ---------------------------------------------------------------------------


class Role(StrEnum):
    system = 'system'
    user = 'user'
    assistant = 'assistant'


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class Message(BaseModel):
    """Single chat message."""

    role: Role
    content: str

    # Immutable value-object
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Generation options (caller-supplied, every field optional)
#   • Unknown fields are dropped so they never reach the wire
# ---------------------------------------------------------------------------


class GenerationOptions(BaseModel):
    """Requested sampling options. Absent fields receive the model defaults."""

    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    stop: str | list[str] | None = None
    logit_bias: dict[str, float] | None = None

    model_config = ConfigDict(frozen=True, extra='ignore')


class ValidatedParameters(BaseModel):
    """Sampling parameters clamped to a model's legal ranges.

    Penalties are ``None`` when the model does not support them or the caller
    did not ask for them; ``None`` fields are never serialised.
    """

    max_tokens: int
    temperature: float
    top_p: float
    frequency_penalty: float | None = None
    presence_penalty: float | None = None

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Wire request
# ---------------------------------------------------------------------------


class RequestBody(BaseModel):
    """Transport-ready ``/chat/completions`` request body."""

    messages: list[Message]
    model: str
    stream: bool
    max_tokens: int
    temperature: float
    top_p: float
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    stop: str | list[str] | None = None
    logit_bias: dict[str, float] | None = None

    model_config = ConfigDict(frozen=True)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body with absent optional fields omitted."""
        return self.model_dump(mode='json', exclude_none=True)


# ---------------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------------


class StreamEvent(BaseModel):
    """Decoded server-sent event: a text delta or the terminal sentinel."""

    kind: Literal['delta', 'done']
    content: str = ''

    model_config = ConfigDict(frozen=True)

    @classmethod
    def delta(cls, content: str) -> StreamEvent:
        return cls(kind='delta', content=content)

    @classmethod
    def done(cls) -> StreamEvent:
        return cls(kind='done')

    @property
    def is_terminal(self) -> bool:
        return self.kind == 'done'
