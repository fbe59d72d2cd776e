"""core.config

Resolved connection settings for the inference endpoint.

The request layer only consumes the resolved triple (endpoint, credential,
default model). `InferenceConfig.from_env` is the one place that reads the
process environment, after loading a local ``.env`` file when present.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from inference_bridge.core.exceptions import ConfigurationError

DEFAULT_MODEL_NAME = 'Ministral-3B'
DEFAULT_COMPLETIONS_PATH = '/chat/completions'


class InferenceConfig(BaseModel):
    """Endpoint, credential and default model for one inference service."""

    endpoint: str = Field(..., min_length=1, description='base URL of the inference service')
    api_key: str = Field(..., min_length=1, repr=False, description='credential sent with every request')
    model_name: str = Field(DEFAULT_MODEL_NAME, min_length=1, description='model used when the caller names none')
    completions_path: str = Field(DEFAULT_COMPLETIONS_PATH, description='path appended to endpoint')
    timeout_seconds: float | None = Field(
        None,
        gt=0,
        description='HTTP timeout; None leaves timeouts to the caller',
    )

    model_config = {
        'frozen': True,
        'str_strip_whitespace': True,
    }

    # --------------------------- Validators ---------------------------

    @field_validator('endpoint')
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')

    @field_validator('completions_path')
    @classmethod
    def _leading_slash(cls, v: str) -> str:
        return v if v.startswith('/') else f'/{v}'

    # --------------------------- Constructors -------------------------

    @classmethod
    def from_env(cls) -> InferenceConfig:
        """Build a config from ``INFERENCE_*`` environment variables.

        Raises
        ------
        ConfigurationError
            If ``INFERENCE_ENDPOINT`` or ``INFERENCE_API_KEY`` is unset.

        """
        load_dotenv()
        endpoint = os.getenv('INFERENCE_ENDPOINT', '').strip()
        api_key = os.getenv('INFERENCE_API_KEY', '').strip()
        if not endpoint or not api_key:
            raise ConfigurationError(
                'Inference configuration missing. Please set INFERENCE_ENDPOINT and '
                'INFERENCE_API_KEY environment variables.'
            )

        timeout = os.getenv('INFERENCE_TIMEOUT_SECONDS', '').strip()
        try:
            timeout_seconds = float(timeout) if timeout else None
        except ValueError as exc:
            raise ConfigurationError(f'INFERENCE_TIMEOUT_SECONDS must be a number, got: {timeout}') from exc

        return cls(
            endpoint=endpoint,
            api_key=api_key,
            model_name=os.getenv('INFERENCE_MODEL_NAME') or DEFAULT_MODEL_NAME,
            timeout_seconds=timeout_seconds,
        )

    def with_model(self, model_name: str) -> InferenceConfig:
        """Return a copy of this config targeting *model_name*."""
        return self.model_copy(update={'model_name': model_name})

    @property
    def completions_url(self) -> str:
        return f'{self.endpoint}{self.completions_path}'
