"""adapters.http_adapter

Concrete adapter that bridges :class:`inference_bridge.core.abc.AbstractInferenceClient`
with an OpenAI-compatible ``/chat/completions`` HTTP endpoint (Azure AI
inference, Azure OpenAI, ...).

The adapter speaks raw HTTP through ``httpx.AsyncClient`` so it owns the
event-stream reassembly: bytes are handed to
:func:`inference_bridge.core.stream.reassemble` exactly as they arrive.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import httpx

from inference_bridge.core.abc import AbstractInferenceClient
from inference_bridge.core.exceptions import InferenceError
from inference_bridge.core.stream import reassemble

if TYPE_CHECKING:
    from types import TracebackType

    from inference_bridge.core.config import InferenceConfig
    from inference_bridge.core.stream import DeltaCallback
    from inference_bridge.core.types import RequestBody

logger = logging.getLogger(__name__)

UNPARSABLE_ERROR_DETAILS = 'Unable to parse error details'

# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------


def describe_error_body(body: object) -> str:
    """Return a human-readable message for whatever error shape *body* has.

    Handles a bare string, ``{"error": "..."}``, ``{"error": {"message": ...}}``
    and ``{"error": {"code": ..., "message": ...}}``; anything else is
    JSON-dumped, and if even that fails a fixed placeholder is returned.
    """
    if isinstance(body, str) and body.strip():
        return body.strip()
    if isinstance(body, Mapping):
        error = body.get('error')
        if isinstance(error, str) and error:
            return error
        if isinstance(error, Mapping):
            message = error.get('message')
            if isinstance(message, str) and message:
                code = error.get('code')
                return f'{code}: {message}' if code else message
    try:
        return json.dumps(body)
    except (TypeError, ValueError):
        return UNPARSABLE_ERROR_DETAILS


def _status_message(status: int) -> str:
    return f'HTTP operation failed with {status} code'


def _response_body(response: httpx.Response) -> Any:  # noqa: ANN401 - arbitrary JSON
    try:
        return response.json()
    except ValueError:
        return response.text


def _first_choice_content(payload: Any) -> str:  # noqa: ANN401 - arbitrary JSON
    choices = payload.get('choices') if isinstance(payload, Mapping) else None
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], Mapping):
        return ''
    message = choices[0].get('message')
    content = message.get('content') if isinstance(message, Mapping) else None
    return content if isinstance(content, str) else ''


async def _streaming_error(response: httpx.Response) -> InferenceError:
    """Interpret the first chunk of a failed streaming response as an error body."""
    message = _status_message(response.status_code)
    try:
        chunk = await anext(response.aiter_bytes(), b'')
        if chunk:
            message = describe_error_body(json.loads(chunk))
    except (httpx.HTTPError, ValueError):
        logger.debug('Could not read error body of streaming response', exc_info=True)
    logger.error('Streaming completion failed', extra={'status': response.status_code, 'detail': message})
    return InferenceError(message, status=response.status_code)


async def _release(response: httpx.Response) -> None:
    """Close *response*; a failure here must never mask the call's outcome."""
    try:
        await response.aclose()
    except Exception:
        logger.warning('Error releasing response stream', exc_info=True)


# ---------------------------------------------------------------------------
# Adapter implementation
# ---------------------------------------------------------------------------


class HttpInferenceClient(AbstractInferenceClient):
    """Adapter for OpenAI-compatible chat completion endpoints."""

    def __init__(
        self,
        model: str,
        *,
        endpoint: str,
        api_key: str,
        completions_path: str = '/chat/completions',
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(model)
        self._url = f'{endpoint.rstrip("/")}{completions_path}'
        self._headers = {
            'Authorization': f'Bearer {api_key}',
            'api-key': api_key,
            'Content-Type': 'application/json',
        }
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(cls, config: InferenceConfig, **kwargs: Any) -> HttpInferenceClient:  # noqa: ANN401
        return cls(
            config.model_name,
            endpoint=config.endpoint,
            api_key=config.api_key,
            completions_path=config.completions_path,
            timeout=config.timeout_seconds,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpInferenceClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Non-streaming path
    # ------------------------------------------------------------------

    async def _invoke(self, body: RequestBody) -> str:
        try:
            response = await self._client.post(self._url, json=body.to_payload(), headers=self._headers)
        except httpx.HTTPError as exc:
            logger.error('Completion request failed: %s', exc, extra={'model': body.model})
            raise InferenceError(f'Request to inference endpoint failed: {exc}') from exc

        if not response.is_success:
            raw = _response_body(response)
            message = describe_error_body(raw) if raw else _status_message(response.status_code)
            logger.error('Completion failed', extra={'status': response.status_code, 'detail': message})
            raise InferenceError(message, status=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise InferenceError('Inference endpoint returned a non-JSON body', status=response.status_code) from exc
        return _first_choice_content(payload)

    # ------------------------------------------------------------------
    # Streaming path
    # ------------------------------------------------------------------

    async def _invoke_stream(self, body: RequestBody, on_delta: DeltaCallback) -> None:
        request = self._client.build_request(
            'POST',
            self._url,
            json=body.to_payload(),
            headers={**self._headers, 'Accept': 'text/event-stream'},
        )
        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            logger.error('Streaming request failed: %s', exc, extra={'model': body.model})
            raise InferenceError(f'Request to inference endpoint failed: {exc}') from exc

        try:
            if not response.is_success:
                raise await _streaming_error(response)
            try:
                reassembler = await reassemble(response.aiter_bytes(), on_delta)
            except httpx.HTTPError as exc:
                logger.error('Stream interrupted: %s', exc, extra={'model': body.model})
                raise InferenceError(f'Stream interrupted: {exc}', status=response.status_code) from exc
            if reassembler.dropped_events:
                logger.warning('Dropped %d malformed stream events', reassembler.dropped_events)
        finally:
            await _release(response)
