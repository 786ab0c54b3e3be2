"""
Request extraction for gqlplug.

Turns an HTTPInput into a ParsedRequest: document source, variables,
operation name, context and root value. Each step is a plain function so
it can be reused or replaced on its own.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from graphql import DocumentNode

from .errors import CodecError, InputError
from .transports.protocol import GRAPHQL_MEDIA_TYPE, HTTPInput
from .uploads import UPLOADS_KEY, collect_uploads

if TYPE_CHECKING:
    from .codec import JSONCodec
    from .config import PlugConfig
    from .pipeline import PhaseDescriptor
    from .providers import ProviderConfig

logger = logging.getLogger(__name__)

VARIABLES_DECODE_ERROR = "The variable values could not be decoded"
QUERY_TYPE_ERROR = "The query document must be a string"

# Literal `variables` values that mean "no variables"
_EMPTY_VARIABLES = ("", "null", None)


@dataclass
class ParsedRequest:
    """
    A GraphQL request normalized from any supported encoding.

    Created fresh for every HTTP request and discarded after the response.

    Attributes:
        document: Raw text, a resolved syntax tree, or None when absent
        params: Raw request fields (query string overlaid with body)
        variables: Decoded variable values
        operation_name: Operation to run; None when absent or empty
        context: Execution context (config, then connection, then uploads)
        root_value: Root value for top-level resolvers
        pipeline: Phases to run (set during assembly)
        document_provider: Provider that claimed the request
        document_provider_key: Key the provider resolved the document by
    """

    document: str | DocumentNode | None
    params: dict[str, Any]
    variables: dict[str, Any]
    operation_name: str | None
    context: dict[str, Any]
    root_value: Any
    pipeline: list["PhaseDescriptor"] = field(default_factory=list)
    document_provider: "ProviderConfig | None" = None
    document_provider_key: Any = None

    @property
    def has_document(self) -> bool:
        return self.document is not None

    def to_pipeline_options(self) -> dict[str, Any]:
        """Request fields handed to the pipeline builder."""
        return {
            "document": self.document,
            "params": self.params,
            "variables": self.variables,
            "operation_name": self.operation_name,
            "context": self.context,
            "root_value": self.root_value,
        }


def extract(http_input: HTTPInput, config: "PlugConfig") -> ParsedRequest:
    """
    Build a ParsedRequest from an HTTPInput.

    Args:
        http_input: The incoming request
        config: Mount configuration (codec, static context)

    Returns:
        ParsedRequest with no document provider applied yet

    Raises:
        InputError: If the variables cannot be decoded or the query is not text
    """
    body, params = extract_body_and_params(http_input)
    variables = extract_variables(params, config.codec)

    return ParsedRequest(
        document=extract_raw_document(body, params),
        params=params,
        variables=variables,
        operation_name=extract_operation_name(params),
        context=extract_context(http_input, params, config),
        root_value=extract_root_value(http_input),
    )


# =============================================================================
# Body / params
# =============================================================================


def extract_body_and_params(http_input: HTTPInput) -> tuple[str, dict[str, Any]]:
    """
    Split the request into document source text and parsed fields.

    A parsed `query` field wins over the raw body. Otherwise only an
    application/graphql body is taken as the document source.
    """
    params = http_input.params
    if "query" in http_input.body_params:
        return "", params
    if http_input.media_type == GRAPHQL_MEDIA_TYPE:
        try:
            return http_input.body.decode("utf-8"), params
        except UnicodeDecodeError as e:
            raise InputError("The request body is not valid UTF-8") from e
    return "", params


# =============================================================================
# Document
# =============================================================================


def extract_raw_document(body: str, params: Mapping[str, Any]) -> str | None:
    """
    Raises:
        InputError: If `query` is present but not text (a number, an
            object or an uploaded file)
    """
    document = params.get("query", body)
    if document == "" or document is None:
        return None
    if not isinstance(document, str):
        raise InputError(QUERY_TYPE_ERROR)
    return document


# =============================================================================
# Operation name
# =============================================================================


def extract_operation_name(params: Mapping[str, Any]) -> str | None:
    # An empty operation name means no operation name (as in GraphQL.js)
    name = params.get("operationName")
    if name == "":
        return None
    return name


# =============================================================================
# Variables
# =============================================================================


def extract_variables(params: Mapping[str, Any], codec: "JSONCodec") -> dict[str, Any]:
    return decode_variables(params.get("variables", "{}"), codec)


def decode_variables(value: Any, codec: "JSONCodec") -> dict[str, Any]:
    """
    Decode the `variables` field.

    "", "null", None and {} all mean no variables; mappings pass through
    unchanged; any other string is decoded with the codec.

    Raises:
        InputError: If the value cannot be decoded into an object
    """
    if isinstance(value, Mapping):
        return dict(value)
    if value in _EMPTY_VARIABLES:
        return {}

    try:
        decoded = codec.decode(value)
    except CodecError as e:
        logger.info(f"[request] Undecodable variables: {e}")
        raise InputError(VARIABLES_DECODE_ERROR) from e

    if decoded is None:
        return {}
    if not isinstance(decoded, dict):
        raise InputError(VARIABLES_DECODE_ERROR)
    return decoded


# =============================================================================
# Context / root value
# =============================================================================


def extract_context(
    http_input: HTTPInput,
    params: Mapping[str, Any],
    config: "PlugConfig",
) -> dict[str, Any]:
    """Static config context, then connection context, then the uploads bucket."""
    return {
        **config.context,
        **(http_input.private.get("context") or {}),
        UPLOADS_KEY: {"uploads": collect_uploads(params)},
    }


def extract_root_value(http_input: HTTPInput) -> Any:
    root_value = http_input.private.get("root_value")
    return root_value if root_value is not None else {}
