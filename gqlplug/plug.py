"""
GraphQL HTTP plug.

Ties the request flow together for one mount:

    HTTP request
      -> read_http_input        (transport)
      -> extract                (ParsedRequest)
      -> providers.process      (document provider chain)
      -> assemble               (phases still to run)
      -> PipelineRunner.run     (RunResult)
      -> map_result             (status, body, content type)

Usage:
    plug = GraphQLPlug.build(schema, document_providers=[item_queries, DefaultProvider()])
    await plug.initialize()          # compiles persisted documents
    response = await plug.handle(request)
"""
from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from starlette.responses import Response

from .codec import JSONCodec
from .config import PlugConfig
from .errors import InputError, MethodError
from .pipeline import PipelineRunner, RunResult, assemble
from .providers import CompiledProvider, ProviderConfig, process
from .request import extract
from .transports import HTTPInput, read_http_input

if TYPE_CHECKING:
    from starlette.requests import Request

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain"
NO_RESULT_MESSAGE = "The pipeline finished without producing a result"

PlugResult = Union[RunResult, InputError]


@dataclass(frozen=True)
class PlugResponse:
    """Status, body and content type of one response."""

    status_code: int
    body: str
    media_type: str

    def to_response(self) -> Response:
        return Response(
            content=self.body,
            status_code=self.status_code,
            media_type=self.media_type,
        )


# =============================================================================
# Response mapping
# =============================================================================


def map_result(result: PlugResult, codec: JSONCodec) -> PlugResponse:
    """
    Translate a plug outcome into an HTTP response.

        InputError                   -> 400, message
        ok, result without errors    -> 200, encoded result
        ok, result with errors       -> 400, encoded result
        MethodError                  -> 405, message
        any other failure            -> 500, message
    """
    if isinstance(result, InputError):
        return PlugResponse(400, result.message, TEXT_CONTENT_TYPE)

    if not result.ok:
        if isinstance(result.error, MethodError):
            return PlugResponse(405, result.error.message, TEXT_CONTENT_TYPE)
        return PlugResponse(500, str(result.error), TEXT_CONTENT_TYPE)

    if result.result is None:
        logger.error(f"[plug] {NO_RESULT_MESSAGE} (last phase: {result.last_phase})")
        return PlugResponse(500, NO_RESULT_MESSAGE, TEXT_CONTENT_TYPE)

    body = codec.encode(result.result)
    status_code = 400 if result.result.get("errors") else 200
    return PlugResponse(status_code, body, JSON_CONTENT_TYPE)


# =============================================================================
# Plug
# =============================================================================


class GraphQLPlug:
    """
    One GraphQL endpoint.

    Holds the mount configuration and the resolved document providers.
    Everything it holds is read-only once initialize() has run, so a
    single instance serves concurrent requests.
    """

    def __init__(self, config: PlugConfig, runner: PipelineRunner | None = None):
        self.config = config
        self.runner = runner or PipelineRunner()
        self._providers = config.providers()
        self._initialized = False

    @classmethod
    def build(cls, schema: Any, **options: Any) -> "GraphQLPlug":
        return cls(PlugConfig.build(schema, **options))

    @property
    def providers(self) -> Sequence[ProviderConfig]:
        return tuple(self._providers)

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Compile every compiled provider of this mount.

        Raises:
            DocumentCompileError: If any registered document is invalid
        """
        for entry in self._providers:
            provider = entry.provider
            if isinstance(provider, CompiledProvider) and not provider.compiled:
                await provider.compile()
        self._initialized = True
        logger.info(
            f"[plug] {self.config.path} ready with providers "
            f"{[entry.provider.name for entry in self._providers]}"
        )

    async def execute(self, http_input: HTTPInput) -> PlugResult:
        """Run one request; returns the outcome before response mapping."""
        try:
            request = extract(http_input, self.config)
            request = await process(self._providers, request)
        except InputError as e:
            logger.info(f"[plug] Rejected request: {e.message}")
            return e

        if not request.has_document:
            return InputError(self.config.no_query_message)

        phases = assemble(request, self.config, http_input.method)
        return await self.runner.run(request.document, phases)

    async def call(self, http_input: HTTPInput) -> PlugResponse:
        start_time = time.perf_counter()
        response = map_result(await self.execute(http_input), self.config.codec)
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"[plug] {http_input.method} {self.config.path} -> "
            f"{response.status_code} in {duration_ms:.1f}ms"
        )
        return response

    async def handle(self, request: "Request") -> Response:
        """
        Serve a Starlette/FastAPI request.

        A parsed form, with its uploaded files, stays open until the
        response body is built and is closed before returning.
        """
        try:
            http_input = await read_http_input(request, self.config.codec)
            response = await self.call(http_input)
        except InputError as e:
            response = map_result(e, self.config.codec)
        finally:
            await request.close()
        return response.to_response()
