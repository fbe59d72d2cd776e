"""core.exceptions

Centralised exception hierarchy for *inference_bridge*.

Each error carries an `http_status` attribute so that upper layers (REST API
controllers, FastAPI exception handlers, etc.) can translate exceptions to
appropriate HTTP responses *without* scattering status-code logic throughout
business code.

Only failures the caller must react to are raised. Malformed stream events,
unparsable structured output and unknown model ids are recovered locally and
never surface as exceptions.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Mapping


# ---------------------------------------------------------------------------
# Base mixin with HTTP status information
# ---------------------------------------------------------------------------


class InferenceBridgeError(Exception):
    """Base class for all *inference_bridge* domain errors."""

    #: Default HTTP status if not overridden by subclass.
    http_status: ClassVar[HTTPStatus] = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__name__)

    def to_json(self) -> dict[str, dict[str, str]]:
        """Unified error body."""
        return {'error': {'type': self.__class__.__name__, 'message': str(self)}}


# ---------------------------------------------------------------------------
# Concrete error classes
# ---------------------------------------------------------------------------


class InferenceError(InferenceBridgeError):
    """The inference endpoint rejected the request or could not be reached.

    ``status`` is the upstream HTTP status code, or ``None`` when the request
    never produced a response (DNS failure, connection reset, ...).
    """

    http_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_GATEWAY  # 502

    def __init__(self, message: str | None = None, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status: int | None = status

    def to_json(self) -> dict[str, dict[str, str]]:
        body = super().to_json()
        if self.status is not None:
            body['error']['status'] = str(self.status)
        return body

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f'{self.__class__.__name__}(status={self.status!r}, message={str(self)!r})'


class ConfigurationError(InferenceBridgeError):
    """Raised when the endpoint URL or credential is missing."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.INTERNAL_SERVER_ERROR  # 500


HTTP_STATUS_MAP: Mapping[type[InferenceBridgeError], HTTPStatus] = {
    InferenceError: InferenceError.http_status,
    ConfigurationError: ConfigurationError.http_status,
}
