"""registry.client_factory

Factory responsible for converting an :class:`InferenceConfig` (or the
process environment) into a ready-to-use inference client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from inference_bridge.adapters.http_adapter import HttpInferenceClient
from inference_bridge.core.config import InferenceConfig

if TYPE_CHECKING:
    from inference_bridge.core.abc import AbstractInferenceClient


class InferenceClientFactory:
    """Factory for creating configured inference clients.

    This class is stateless. An explicit class is provided rather than a bare
    function to keep room for pooled client caching without changing call
    sites.
    """

    @staticmethod
    def initialize_client(
        config: InferenceConfig | None = None,
        *,
        model: str | None = None,
        **adapter_kwargs: Any,  # noqa: ANN401
    ) -> AbstractInferenceClient:
        """Return an adapter bound to *config*.

        Parameters
        ----------
        config
            Resolved endpoint/credential/model. Read from the environment via
            :meth:`InferenceConfig.from_env` when omitted.
        model
            Overrides the configured default model.
        **adapter_kwargs
            Forwarded to the adapter's constructor (e.g. a shared
            ``httpx.AsyncClient``) without changing the factory signature.

        Raises
        ------
        ConfigurationError
            If *config* is omitted and the environment is incomplete.

        """
        resolved = config or InferenceConfig.from_env()
        if model is not None:
            resolved = resolved.with_model(model)
        return HttpInferenceClient.from_config(resolved, **adapter_kwargs)
