"""core.request_builder

Assemble the ``/chat/completions`` body for one model.

The builder is a pure function of its inputs plus registry state. Validated
sampling parameters come from :mod:`inference_bridge.core.parameters`; stop
sequences and logit bias are forwarded only when the caller supplied them and
the model's capability flag allows them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from inference_bridge.core.parameters import validate_for_descriptor
from inference_bridge.core.types import GenerationOptions, RequestBody
from inference_bridge.registry.model_registry import model_registry

if TYPE_CHECKING:
    from collections.abc import Sequence

    from inference_bridge.core.types import Message


def build_request(
    model_id: str,
    messages: Sequence[Message],
    options: GenerationOptions | None = None,
    *,
    streaming: bool,
) -> RequestBody:
    """Return a transport-ready request body for *model_id*."""
    opts = options or GenerationOptions()
    descriptor = model_registry.lookup(model_id)
    capabilities = descriptor.capabilities
    params = validate_for_descriptor(descriptor, opts)

    stop = opts.stop if capabilities.supports_stop and opts.stop else None
    logit_bias = opts.logit_bias if capabilities.supports_logit_bias and opts.logit_bias else None

    return RequestBody(
        messages=list(messages),
        model=model_id,
        stream=streaming,
        max_tokens=params.max_tokens,
        temperature=params.temperature,
        top_p=params.top_p,
        frequency_penalty=params.frequency_penalty,
        presence_penalty=params.presence_penalty,
        stop=stop,
        logit_bias=logit_bias,
    )
