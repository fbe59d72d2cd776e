from __future__ import annotations

import logging

import pytest

from inference_bridge.core.parameters import optimized_parameters, validate_parameters
from inference_bridge.core.types import GenerationOptions
from inference_bridge.registry.model_catalog import MODEL_CATALOG

OPTION_GRID = [
    GenerationOptions(),
    GenerationOptions(max_tokens=0, temperature=-3, top_p=-1, frequency_penalty=-9, presence_penalty=-9),
    GenerationOptions(max_tokens=10**6, temperature=9, top_p=5, frequency_penalty=9, presence_penalty=9),
    GenerationOptions(max_tokens=512, temperature=0.5, top_p=0.5, frequency_penalty=0.3, presence_penalty=-0.3),
]


def test_clamps_out_of_range_request() -> None:
    params = validate_parameters('gpt-4o-mini', GenerationOptions(temperature=5, top_p=2))
    assert params.temperature == 2  # noqa: PLR2004
    assert params.top_p == 1


@pytest.mark.parametrize('model_id', sorted(MODEL_CATALOG))
@pytest.mark.parametrize('options', OPTION_GRID)
def test_output_within_declared_limits(model_id: str, options: GenerationOptions) -> None:
    descriptor = MODEL_CATALOG[model_id]
    limits = descriptor.limits
    params = validate_parameters(model_id, options)

    assert 1 <= params.max_tokens <= limits.max_tokens.output
    assert limits.temperature.min <= params.temperature <= limits.temperature.max
    assert limits.top_p.min <= params.top_p <= limits.top_p.max

    if descriptor.capabilities.supports_frequency_penalty and options.frequency_penalty is not None:
        assert limits.frequency_penalty is not None
        assert limits.frequency_penalty.min <= params.frequency_penalty <= limits.frequency_penalty.max
    else:
        assert params.frequency_penalty is None

    if descriptor.capabilities.supports_presence_penalty and options.presence_penalty is not None:
        assert limits.presence_penalty is not None
        assert limits.presence_penalty.min <= params.presence_penalty <= limits.presence_penalty.max
    else:
        assert params.presence_penalty is None


@pytest.mark.parametrize('model_id', [*sorted(MODEL_CATALOG), 'no-such-model'])
@pytest.mark.parametrize('top_p', [None, 0.2, 0.95, 3.0])
def test_zero_temperature_forces_top_p_one(model_id: str, top_p: float | None) -> None:
    params = validate_parameters(model_id, GenerationOptions(temperature=0, top_p=top_p))
    assert params.temperature == 0
    assert params.top_p == 1


def test_negative_temperature_clamped_to_zero_triggers_greedy_rule() -> None:
    params = validate_parameters('phi-4', GenerationOptions(temperature=-1, top_p=0.3))
    assert params.temperature == 0
    assert params.top_p == 1


def test_defaults_come_from_descriptor() -> None:
    params = validate_parameters('gpt-4o')
    assert params.max_tokens == 4096  # noqa: PLR2004
    assert params.temperature == 0.7  # noqa: PLR2004
    assert params.top_p == 0.95  # noqa: PLR2004
    assert params.frequency_penalty is None
    assert params.presence_penalty is None


def test_max_tokens_clamped_to_output_limit() -> None:
    assert validate_parameters('gpt-4-turbo', GenerationOptions(max_tokens=50_000)).max_tokens == 4096  # noqa: PLR2004
    assert validate_parameters('gpt-4-turbo', GenerationOptions(max_tokens=-5)).max_tokens == 1


def test_supported_penalties_are_clamped() -> None:
    params = validate_parameters('gpt-4o', GenerationOptions(frequency_penalty=5, presence_penalty=-5))
    assert params.frequency_penalty == 2  # noqa: PLR2004
    assert params.presence_penalty == -2  # noqa: PLR2004


def test_unsupported_penalties_are_omitted_not_zeroed() -> None:
    params = validate_parameters('phi-4', GenerationOptions(frequency_penalty=1, presence_penalty=1))
    dumped = params.model_dump(exclude_none=True)
    assert 'frequency_penalty' not in dumped
    assert 'presence_penalty' not in dumped


def test_unknown_model_uses_fallback_ranges(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        params = validate_parameters('mystery-model', GenerationOptions(temperature=1.5, top_p=0.05, max_tokens=9000))
    assert params.temperature == 1
    assert params.top_p == 0.1  # noqa: PLR2004
    assert params.max_tokens == 4096  # noqa: PLR2004
    assert 'mystery-model' in caplog.text


def test_optimized_parameters_match_recommendations() -> None:
    params = optimized_parameters('cohere-command-r-plus')
    assert params.max_tokens == 3072  # noqa: PLR2004
    assert params.temperature == 0.3  # noqa: PLR2004
    assert params.top_p == 0.75  # noqa: PLR2004
