"""core.abc

Abstract base class that *all* transport adapters must implement.

Design goals
============
1. **Provider-agnostic public API** - callers interact exclusively via
    `send_completion()` / `send_streaming_completion()` passing domain models
    (`Message`, `GenerationOptions`). They never touch wire payloads.
2. **One request-construction path** - both modes build their body through
    `build_request()`, so validation and capability filtering cannot drift
    between streaming and non-streaming calls.
3. **No hidden retries** - a failed call surfaces as `InferenceError`
    immediately; retry policy belongs to the caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from inference_bridge.core.request_builder import build_request

if TYPE_CHECKING:
    from collections.abc import Sequence

    from inference_bridge.core.stream import DeltaCallback
    from inference_bridge.core.types import GenerationOptions, Message, RequestBody


class AbstractInferenceClient(ABC):
    """Provider-independent inference client interface."""

    # ---------------------------------------------------------------------
    # Construction
    # ---------------------------------------------------------------------

    def __init__(self, model: str) -> None:
        """Store the default *model* used when a call names none."""
        self._model: str = model

    @property
    def model(self) -> str:
        return self._model

    def update_model(self, model: str) -> None:
        """Switch the default model for subsequent calls."""
        self._model = model

    # ------------------------------------------------------------------
    # Public asynchronous API
    # ------------------------------------------------------------------

    async def send_completion(
        self,
        model_id: str | None,
        messages: Sequence[Message],
        options: GenerationOptions | None = None,
    ) -> str:
        """Return the full completion text for *messages*.

        Subclasses **must not** override this - override `_invoke()` instead.
        """
        body = build_request(model_id or self._model, messages, options, streaming=False)
        return await self._invoke(body)

    async def send_streaming_completion(
        self,
        model_id: str | None,
        messages: Sequence[Message],
        options: GenerationOptions | None,
        on_delta: DeltaCallback,
    ) -> None:
        """Stream the completion, calling *on_delta* for every text fragment.

        Fragments arrive in generation order. Subclasses **must not** override
        this - override `_invoke_stream()` instead.
        """
        body = build_request(model_id or self._model, messages, options, streaming=True)
        await self._invoke_stream(body, on_delta)

    # ------------------------------------------------------------------
    # Methods to implement in concrete adapters
    # ------------------------------------------------------------------

    @abstractmethod
    async def _invoke(self, body: RequestBody) -> str:
        """Transport-specific non-streaming call (to be overridden)."""

    @abstractmethod
    async def _invoke_stream(self, body: RequestBody, on_delta: DeltaCallback) -> None:
        """Transport-specific streaming call (to be overridden)."""

    # ------------------------------------------------------------------
    # Helper - string representation
    # ------------------------------------------------------------------

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f'<{self.__class__.__name__} model={self._model!r}>'
