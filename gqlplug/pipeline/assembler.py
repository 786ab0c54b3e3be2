"""
Pipeline assembly for one request.

Builds the request's pipeline with the configured builder, inserts the
HTTP method check once the operation is known, then lets the document
provider that claimed the request trim the phases it already satisfied.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from . import sequence
from .phase import PhaseDescriptor
from .phases import CurrentOperation, HTTPMethodValidation

if TYPE_CHECKING:
    from gqlplug.config import PlugConfig
    from gqlplug.request import ParsedRequest

logger = logging.getLogger(__name__)


def configured_pipeline(
    request: "ParsedRequest",
    config: "PlugConfig",
    method: str,
) -> list[PhaseDescriptor]:
    """The full pipeline for `request`, including the HTTP method check."""
    base = config.pipeline(config, request.to_pipeline_options())
    return sequence.insert_after(
        sequence.normalize(base),
        CurrentOperation,
        PhaseDescriptor(HTTPMethodValidation, {"method": method.upper()}),
    )


def assemble(
    request: "ParsedRequest",
    config: "PlugConfig",
    method: str,
) -> list[PhaseDescriptor]:
    """
    Work out the phases still to run for `request`.

    Args:
        request: Request resolved by the document provider chain
        config: Mount configuration (pipeline builder, schema)
        method: HTTP method of the incoming request

    Returns:
        Ordered phase descriptors to hand to the runner
    """
    pipeline = configured_pipeline(request, config, method)

    if request.document_provider is None:
        return pipeline

    provider = request.document_provider.provider
    remaining = sequence.normalize(provider.pipeline(replace(request, pipeline=pipeline)))
    if len(remaining) != len(pipeline):
        logger.debug(
            f"[assembler] {provider.name} trimmed pipeline to "
            f"{sequence.phase_names(remaining)}"
        )
    return remaining
