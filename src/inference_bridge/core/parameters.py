"""core.parameters

Clamp requested sampling options to a model's legal ranges.

`validate_parameters` never fails: unknown models resolve to the registry's
fallback descriptor, absent options take the model defaults, and options the
model does not support are dropped rather than sent as zero.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from inference_bridge.core.types import GenerationOptions, ValidatedParameters
from inference_bridge.registry.model_registry import model_registry

if TYPE_CHECKING:
    from inference_bridge.core.model_descriptor import ModelDescriptor

logger = logging.getLogger(__name__)


def validate_parameters(model_id: str, options: GenerationOptions | None = None) -> ValidatedParameters:
    """Return *options* clamped to the limits of *model_id*."""
    return validate_for_descriptor(model_registry.lookup(model_id), options)


def validate_for_descriptor(
    descriptor: ModelDescriptor,
    options: GenerationOptions | None = None,
) -> ValidatedParameters:
    """Same as `validate_parameters` for an already resolved descriptor."""
    opts = options or GenerationOptions()
    limits = descriptor.limits
    capabilities = descriptor.capabilities

    requested_tokens = opts.max_tokens if opts.max_tokens is not None else descriptor.recommended_params.max_tokens
    max_tokens = max(1, min(int(requested_tokens), limits.max_tokens.output))

    temperature = limits.temperature.clamp(
        opts.temperature if opts.temperature is not None else limits.temperature.default
    )
    top_p = limits.top_p.clamp(opts.top_p if opts.top_p is not None else limits.top_p.default)

    # Greedy sampling: the provider requires top_p == 1 whenever temperature is 0.
    if temperature == 0:
        top_p = 1.0
        logger.debug('temperature=0 for %s; forcing top_p=1 for greedy sampling', descriptor.id)

    frequency_penalty = None
    if (
        capabilities.supports_frequency_penalty
        and limits.frequency_penalty is not None
        and opts.frequency_penalty is not None
    ):
        frequency_penalty = limits.frequency_penalty.clamp(opts.frequency_penalty)

    presence_penalty = None
    if (
        capabilities.supports_presence_penalty
        and limits.presence_penalty is not None
        and opts.presence_penalty is not None
    ):
        presence_penalty = limits.presence_penalty.clamp(opts.presence_penalty)

    return ValidatedParameters(
        max_tokens=max_tokens,
        temperature=temperature,
        top_p=top_p,
        frequency_penalty=frequency_penalty,
        presence_penalty=presence_penalty,
    )


def optimized_parameters(model_id: str) -> ValidatedParameters:
    """Validated form of the model's own recommended parameters."""
    descriptor = model_registry.lookup(model_id)
    recommended = descriptor.recommended_params
    return validate_for_descriptor(
        descriptor,
        GenerationOptions(
            max_tokens=recommended.max_tokens,
            temperature=recommended.temperature,
            top_p=recommended.top_p,
            frequency_penalty=recommended.frequency_penalty,
            presence_penalty=recommended.presence_penalty,
        ),
    )
