"""
Document Provider protocol for gqlplug.

A document provider decides what document a request should execute and
which part of the configured pipeline still has to run for it.

Providers are tried strictly in the configured order. Each one either
passes (Cont) or claims the request (Halt); the first claim wins and no
later provider is consulted.

Configuring:
    PlugConfig.build(
        schema,
        document_providers=[
            (persisted_queries, {"key_param": "documentId"}),
            DefaultProvider(),
        ],
    )

A bare provider is shorthand for (provider, {}).
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Union

from ..errors import InputError

if TYPE_CHECKING:
    from ..pipeline import PhaseDescriptor
    from ..request import ParsedRequest

logger = logging.getLogger(__name__)

NO_PROVIDER_MESSAGE = "No document provider could process the request"


@dataclass(frozen=True, slots=True)
class Cont:
    """This provider passes; try the next one."""

    request: "ParsedRequest"


@dataclass(frozen=True, slots=True)
class Halt:
    """This provider claims the request; stop here."""

    request: "ParsedRequest"


ProviderResult = Union[Cont, Halt]


class DocumentProvider(ABC):
    """
    Base class for document providers.

    Subclasses must implement:
    - name: Identifier used in logs and error messages
    - resolve(): Claim or pass on a request
    - pipeline(): Phases still to run for a request this provider claimed
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def resolve(
        self,
        request: "ParsedRequest",
        options: Mapping[str, Any],
    ) -> ProviderResult:
        """
        Attempt to resolve the request's document.

        Args:
            request: The extracted request (possibly updated by earlier providers)
            options: Options configured next to this provider

        Returns:
            Cont(request) to pass, Halt(request) to claim
        """
        ...

    @abstractmethod
    def pipeline(self, request: "ParsedRequest") -> list["PhaseDescriptor"]:
        """
        Phases still to run for a request this provider claimed.

        `request.pipeline` holds the full configured pipeline.
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


@dataclass(frozen=True)
class ProviderConfig:
    """A provider and the options it is resolved with."""

    provider: DocumentProvider
    options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def of(cls, entry: "ProviderConfig | DocumentProvider | tuple") -> "ProviderConfig":
        if isinstance(entry, ProviderConfig):
            return entry
        if isinstance(entry, tuple):
            provider, options = entry
            return cls(provider=provider, options=dict(options))
        if isinstance(entry, DocumentProvider):
            return cls(provider=entry)
        raise TypeError(f"Not a document provider: {entry!r}")


def normalize(providers: Iterable[Any]) -> list[ProviderConfig]:
    """Normalize bare providers to ProviderConfig entries."""
    return [ProviderConfig.of(entry) for entry in providers]


async def process(providers: Iterable[Any], request: "ParsedRequest") -> "ParsedRequest":
    """
    Run the request through the providers until one claims it.

    Args:
        providers: Providers, (provider, options) pairs or ProviderConfigs
        request: The extracted request

    Returns:
        The request as left by the providers. When one claimed it, its
        `document_provider` names that provider. A request without a
        document is returned unclaimed so the caller can report it.

    Raises:
        InputError: If a provider returned neither Cont nor Halt, or the
            request carries a document that no provider claimed
    """
    for config in normalize(providers):
        result = await config.provider.resolve(request, config.options)

        if isinstance(result, Halt):
            logger.debug(f"[providers] Request claimed by {config.provider.name}")
            return replace(result.request, document_provider=config)
        if isinstance(result, Cont):
            request = result.request
            continue

        logger.warning(
            f"[providers] {config.provider.name} returned {result!r}, expected Cont or Halt"
        )
        raise InputError(NO_PROVIDER_MESSAGE)

    if request.document is not None:
        raise InputError(NO_PROVIDER_MESSAGE)
    return request
