"""
gqlplug Pipeline

The ordered phases a GraphQL document goes through once a request has been
resolved, and the machinery to build, edit and run them.

Core Components:
- Phase / PhaseDescriptor: One step and the options it runs with
- Blueprint / RunResult: Per-run document state and outcome
- PipelineRunner: Sequential executor
- for_document / default_pipeline: The standard pipeline
- sequence: Insert / prefix / slice helpers
- assemble: Per-request pipeline assembly
"""

from . import sequence
from .assembler import assemble, configured_pipeline
from .blueprint import Blueprint, RunResult
from .builder import default_pipeline, for_document
from .phase import Phase, PhaseDescriptor, PipelineHalt
from .phases import (
    CoerceVariables,
    CurrentOperation,
    Execute,
    HTTPMethodValidation,
    Parse,
    Validate,
    ValidationResult,
)
from .runner import PipelineRunner, run_pipeline

__all__ = [
    # Core
    "Phase",
    "PhaseDescriptor",
    "PipelineHalt",
    "Blueprint",
    "RunResult",
    "PipelineRunner",
    "run_pipeline",
    # Construction
    "for_document",
    "default_pipeline",
    "assemble",
    "configured_pipeline",
    "sequence",
    # Phases
    "Parse",
    "Validate",
    "ValidationResult",
    "CoerceVariables",
    "CurrentOperation",
    "HTTPMethodValidation",
    "Execute",
]
