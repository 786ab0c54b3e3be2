"""
gqlplug Document Providers

Decide which document a request executes and how much of the pipeline
still has to run for it.

Provider Types:
- DefaultProvider: executes the document the client sent
- CompiledProvider: serves precompiled documents selected by id

Features:
- First-claim-wins provider chain (Cont / Halt)
- Per-provider options via (provider, options) pairs
- Startup compilation of persisted documents
"""

from .base import (
    NO_PROVIDER_MESSAGE,
    Cont,
    DocumentProvider,
    Halt,
    ProviderConfig,
    ProviderResult,
    normalize,
    process,
)
from .compiled import CompiledEntry, CompiledProvider, compilation_pipeline_for
from .default import DefaultProvider, default_document_providers

__all__ = [
    # Protocol
    "DocumentProvider",
    "ProviderConfig",
    "ProviderResult",
    "Cont",
    "Halt",
    "normalize",
    "process",
    "NO_PROVIDER_MESSAGE",
    # Providers
    "DefaultProvider",
    "default_document_providers",
    "CompiledProvider",
    "CompiledEntry",
    "compilation_pipeline_for",
]
