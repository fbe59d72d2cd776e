"""core.model_descriptor

Value-objects describing one inference model: its token/parameter limits,
the optional request features it supports, and its recommended sampling
parameters.

Descriptors are immutable. They are created once when the catalog is loaded
and handed out by value, so every layer may hold on to one without worrying
about someone else mutating it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------


class ParameterRange(BaseModel):
    """Inclusive legal range plus the provider default for one parameter."""

    min: float
    max: float
    default: float

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def _check_bounds(self) -> ParameterRange:
        if self.min > self.max:
            raise ValueError(f'min ({self.min}) must not exceed max ({self.max})')
        return self

    def clamp(self, value: float) -> float:
        """Return *value* forced into ``[min, max]``."""
        return max(self.min, min(value, self.max))


class TokenLimits(BaseModel):
    input: int = Field(..., ge=1, description='context window available to the prompt')
    output: int = Field(..., ge=1, description='maximum tokens the model may generate')

    model_config = ConfigDict(frozen=True)


class ModelLimits(BaseModel):
    max_tokens: TokenLimits
    temperature: ParameterRange
    top_p: ParameterRange
    frequency_penalty: ParameterRange | None = None
    presence_penalty: ParameterRange | None = None

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


class ModelCapabilities(BaseModel):
    """Closed record of capability flags. Every flag defaults to ``False``."""

    supports_vision: bool = False
    supports_code_generation: bool = False
    supports_analysis: bool = False
    supports_image_generation: bool = False
    supports_system_messages: bool = False
    supports_json_mode: bool = False
    supports_function_calling: bool = False
    supports_streaming: bool = False
    supports_stop: bool = False
    supports_logit_bias: bool = False
    supports_frequency_penalty: bool = False
    supports_presence_penalty: bool = False

    model_config = ConfigDict(frozen=True, extra='forbid')


class RecommendedParams(BaseModel):
    max_tokens: int = Field(..., ge=1)
    temperature: float
    top_p: float
    frequency_penalty: float | None = None
    presence_penalty: float | None = None

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class ModelDescriptor(BaseModel):
    """Everything the request layer needs to know about one model.

    * `id` … identifier sent on the wire (e.g. ``gpt-4o-mini``)
    * `name` … human readable label
    * `provider` … vendor (e.g. ``Mistral AI``)
    """

    id: str
    name: str
    provider: str
    context_length: int = Field(..., ge=1)
    limits: ModelLimits
    capabilities: ModelCapabilities
    recommended_params: RecommendedParams
    special_instructions: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f'{self.provider}:{self.id}'
