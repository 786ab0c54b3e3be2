"""
Mount configuration for gqlplug.

PlugConfig is built once per mount and is read-only afterwards. It holds
the schema plus every hook a request passes through:

- codec: decodes `variables` and encodes response bodies
- adapter: translates document names to the schema's naming
- pipeline: builder (config, options) -> phases
- document_providers: provider list, or builder (config) -> provider list
- context: static context merged into every request's context

Usage:
    config = PlugConfig.build(
        schema,
        json_codec=(StdlibJSONCodec, {"sort_keys": True}),
        document_providers=[item_queries, DefaultProvider()],
        context={"db": database},
    )
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from graphql import GraphQLSchema

from ..adapter import Adapter, PassthroughAdapter
from ..codec import JSONCodec, resolve_codec
from ..pipeline.builder import default_pipeline
from ..providers.base import ProviderConfig, normalize
from ..providers.default import default_document_providers
from ..utils import resolve_hook
from .schemas import DEFAULT_NO_QUERY_MESSAGE, DEFAULT_PATH, PlugSettings

logger = logging.getLogger(__name__)

PipelineBuilder = Callable[["PlugConfig", dict[str, Any]], Sequence[Any]]
ProvidersSelection = Union[Callable[["PlugConfig"], Sequence[Any]], Sequence[Any]]


@dataclass(frozen=True)
class PlugConfig:
    schema: GraphQLSchema
    codec: JSONCodec
    adapter: Adapter = field(default_factory=PassthroughAdapter)
    context: Mapping[str, Any] = field(default_factory=dict)
    pipeline: PipelineBuilder = default_pipeline
    document_providers: ProvidersSelection = default_document_providers
    no_query_message: str = DEFAULT_NO_QUERY_MESSAGE
    path: str = DEFAULT_PATH

    @classmethod
    def build(
        cls,
        schema: Any,
        *,
        json_codec: Any = None,
        adapter: Any = None,
        context: Mapping[str, Any] | None = None,
        pipeline: Any = None,
        document_providers: Any = None,
        no_query_message: str = DEFAULT_NO_QUERY_MESSAGE,
        path: str = DEFAULT_PATH,
    ) -> "PlugConfig":
        """
        Normalize mount options into a PlugConfig.

        Hooks may be given as objects or as import paths.

        Raises:
            TypeError: If `schema` is not a GraphQLSchema
            ImportError: If an import path cannot be resolved
        """
        if not isinstance(schema, GraphQLSchema):
            raise TypeError(
                f"The supplied schema: {schema!r} is not a valid GraphQLSchema"
            )

        adapter = resolve_hook(adapter)
        if isinstance(adapter, type):
            adapter = adapter()
        pipeline = resolve_hook(pipeline)
        document_providers = resolve_hook(document_providers)

        return cls(
            schema=schema,
            codec=resolve_codec(json_codec),
            adapter=adapter if adapter is not None else PassthroughAdapter(),
            context=dict(context or {}),
            pipeline=pipeline if pipeline is not None else default_pipeline,
            document_providers=(
                document_providers
                if document_providers is not None
                else default_document_providers
            ),
            no_query_message=no_query_message,
            path=path,
        )

    @classmethod
    def from_settings(
        cls,
        settings: PlugSettings,
        schema: Any,
        **overrides: Any,
    ) -> "PlugConfig":
        """Build from PlugSettings; keyword overrides win over settings."""
        json_codec: Any = settings.json_codec
        if json_codec and settings.json_codec_options:
            json_codec = (json_codec, settings.json_codec_options)

        options: dict[str, Any] = {
            "json_codec": json_codec,
            "pipeline": settings.pipeline,
            "document_providers": settings.document_providers,
            "no_query_message": settings.no_query_message,
            "path": settings.path,
        }
        options.update(overrides)
        return cls.build(schema, **options)

    def providers(self) -> list[ProviderConfig]:
        """The configured document providers, normalized."""
        selection = self.document_providers
        if callable(selection):
            selection = selection(self)
        providers = normalize(selection)
        if not providers:
            logger.warning("[config] No document providers configured")
        return providers

