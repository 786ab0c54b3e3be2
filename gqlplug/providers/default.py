"""
Default document provider.

Executes the document the client sent (the `query` field or an
application/graphql body). Requests without one are passed on, so
providers later in the list (or the "no query" error) can handle them.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .base import Cont, DocumentProvider, Halt, ProviderResult

if TYPE_CHECKING:
    from ..config import PlugConfig
    from ..pipeline import PhaseDescriptor
    from ..request import ParsedRequest


class DefaultProvider(DocumentProvider):
    @property
    def name(self) -> str:
        return "default"

    async def resolve(
        self,
        request: "ParsedRequest",
        options: Mapping[str, Any],
    ) -> ProviderResult:
        if request.document is None:
            return Cont(request)
        return Halt(request)

    def pipeline(self, request: "ParsedRequest") -> list["PhaseDescriptor"]:
        # Nothing was done ahead of time; every phase still runs.
        return list(request.pipeline)


def default_document_providers(config: "PlugConfig") -> list[DocumentProvider]:
    """Provider list builder used when the mount configures none."""
    return [DefaultProvider()]
