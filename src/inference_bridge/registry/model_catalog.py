"""registry.model_catalog

Static catalog of the models served by the inference endpoint, keyed by the
identifier sent on the wire.

Parameter limits follow each vendor's published ranges. Only the OpenAI
family declares penalty ranges; every other family rejects penalties, stop
sequences are universally accepted and logit bias is OpenAI-only.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from inference_bridge.core.model_descriptor import (
    ModelCapabilities,
    ModelDescriptor,
    ModelLimits,
    ParameterRange,
    RecommendedParams,
    TokenLimits,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

# ---------------------------------------------------------------------------
# Shared building blocks
# ---------------------------------------------------------------------------

_PENALTY = ParameterRange(min=-2, max=2, default=0)


def _limits(
    *,
    context: int,
    output: int,
    temperature: tuple[float, float, float],
    top_p: tuple[float, float, float],
    penalties: bool = False,
) -> ModelLimits:
    t_min, t_max, t_default = temperature
    p_min, p_max, p_default = top_p
    return ModelLimits(
        max_tokens=TokenLimits(input=context, output=output),
        temperature=ParameterRange(min=t_min, max=t_max, default=t_default),
        top_p=ParameterRange(min=p_min, max=p_max, default=p_default),
        frequency_penalty=_PENALTY if penalties else None,
        presence_penalty=_PENALTY if penalties else None,
    )


def _capabilities(**overrides: bool) -> ModelCapabilities:
    base = {
        'supports_code_generation': True,
        'supports_analysis': True,
        'supports_system_messages': True,
        'supports_streaming': True,
        'supports_stop': True,
    }
    base.update(overrides)
    return ModelCapabilities(**base)


def _openai_capabilities(*, vision: bool) -> ModelCapabilities:
    return _capabilities(
        supports_vision=vision,
        supports_json_mode=True,
        supports_function_calling=True,
        supports_logit_bias=True,
        supports_frequency_penalty=True,
        supports_presence_penalty=True,
    )


def _openai(model_id: str, name: str, *, context: int, output: int, recommended: int, vision: bool) -> ModelDescriptor:
    return ModelDescriptor(
        id=model_id,
        name=name,
        provider='Azure OpenAI',
        context_length=context,
        limits=_limits(context=context, output=output, temperature=(0, 2, 0.7), top_p=(0.01, 1, 0.95), penalties=True),
        capabilities=_openai_capabilities(vision=vision),
        recommended_params=RecommendedParams(max_tokens=recommended, temperature=0.7, top_p=0.95),
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

_DESCRIPTORS: tuple[ModelDescriptor, ...] = (
    # Azure OpenAI
    _openai('gpt-4o', 'GPT-4o', context=128000, output=16384, recommended=4096, vision=True),
    _openai('gpt-4o-mini', 'GPT-4o Mini', context=128000, output=16384, recommended=4096, vision=False),
    _openai('gpt-4-turbo', 'GPT-4 Turbo', context=128000, output=4096, recommended=3072, vision=True),
    _openai('gpt-3.5-turbo', 'GPT-3.5 Turbo', context=16385, output=4096, recommended=2048, vision=False),
    # Microsoft
    ModelDescriptor(
        id='phi-4',
        name='Phi-4',
        provider='Microsoft',
        context_length=16384,
        limits=_limits(context=16384, output=4096, temperature=(0, 1, 0.6), top_p=(0.1, 1, 0.9)),
        capabilities=_capabilities(),
        recommended_params=RecommendedParams(max_tokens=2048, temperature=0.6, top_p=0.9),
        special_instructions=(
            'Phi models prefer shorter, more concise prompts',
            'Works best with structured programming tasks',
        ),
    ),
    # Mistral AI
    ModelDescriptor(
        id='ministral-3b',
        name='Ministral 3B',
        provider='Mistral AI',
        context_length=131072,
        limits=_limits(context=131072, output=8192, temperature=(0, 1, 0.7), top_p=(0, 1, 1)),
        capabilities=_capabilities(),
        recommended_params=RecommendedParams(max_tokens=4096, temperature=0.7, top_p=1),
        special_instructions=(
            'Mistral models prefer top_p = 1 for best performance',
            'Lower temperature for more focused responses',
        ),
    ),
    ModelDescriptor(
        id='mistral-large-2411',
        name='Mistral Large 2411',
        provider='Mistral AI',
        context_length=128000,
        limits=_limits(context=128000, output=8192, temperature=(0, 1, 0.7), top_p=(0, 1, 1)),
        capabilities=_capabilities(supports_json_mode=True, supports_function_calling=True),
        recommended_params=RecommendedParams(max_tokens=4096, temperature=0.7, top_p=1),
        special_instructions=(
            'Mistral Large supports function calling and JSON mode',
            'Use top_p = 1 for optimal performance',
        ),
    ),
    # Meta
    ModelDescriptor(
        id='llama-3.3-70b-instruct',
        name='Llama 3.3 70B Instruct',
        provider='Meta',
        context_length=128000,
        limits=_limits(context=128000, output=4096, temperature=(0, 2, 0.6), top_p=(0, 1, 0.9)),
        capabilities=_capabilities(),
        recommended_params=RecommendedParams(max_tokens=3072, temperature=0.6, top_p=0.9),
        special_instructions=(
            'Llama models perform best with temperature between 0.5-0.8',
            'Prefers detailed, specific instructions',
        ),
    ),
    ModelDescriptor(
        id='llama-3.2-11b-vision-instruct',
        name='Llama 3.2 11B Vision',
        provider='Meta',
        context_length=128000,
        limits=_limits(context=128000, output=4096, temperature=(0, 2, 0.6), top_p=(0, 1, 0.9)),
        capabilities=_capabilities(supports_vision=True),
        recommended_params=RecommendedParams(max_tokens=3072, temperature=0.6, top_p=0.9),
        special_instructions=(
            'Vision-capable Llama model - can process images',
            'Best performance with detailed image descriptions',
        ),
    ),
    # Cohere
    ModelDescriptor(
        id='cohere-command-r-plus',
        name='Command R+',
        provider='Cohere',
        context_length=131072,
        limits=_limits(context=131072, output=4096, temperature=(0, 1, 0.3), top_p=(0, 1, 0.75)),
        capabilities=_capabilities(supports_function_calling=True),
        recommended_params=RecommendedParams(max_tokens=3072, temperature=0.3, top_p=0.75),
        special_instructions=(
            'Cohere models prefer lower temperature (0.1-0.5)',
            'Excellent for RAG and tool use scenarios',
            'Works best with clear, structured prompts',
        ),
    ),
)

MODEL_CATALOG: Mapping[str, ModelDescriptor] = MappingProxyType({d.id: d for d in _DESCRIPTORS})


def fallback_descriptor(model_id: str) -> ModelDescriptor:
    """Return the conservative descriptor used for unknown model ids.

    Every optional request feature is disabled so nothing the model might
    reject is ever sent.
    """
    return ModelDescriptor(
        id=model_id,
        name=model_id,
        provider='Unknown',
        context_length=16384,
        limits=_limits(context=16384, output=4096, temperature=(0, 1, 0.7), top_p=(0.1, 1, 0.9)),
        capabilities=_capabilities(supports_stop=False),
        recommended_params=RecommendedParams(max_tokens=2048, temperature=0.7, top_p=0.9),
        special_instructions=('Using fallback configuration - model parameters may not be optimal',),
    )
