"""
Starlette/FastAPI transport.

Normalizes a Starlette Request into an HTTPInput, reading the body at most
once:

- application/json: parsed with the configured codec into body_params
- application/x-www-form-urlencoded, multipart/form-data: request.form()
- application/graphql: raw body kept verbatim
- anything else: body left unread

Host applications inject per-connection context and root value through
`assign_private`, typically from a middleware or dependency:

    @app.middleware("http")
    async def add_viewer(request, call_next):
        assign_private(request, context={"viewer": await load_viewer(request)})
        return await call_next(request)
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..codec import JSONCodec, StdlibJSONCodec
from ..errors import CodecError, InputError
from .protocol import (
    FORM_MEDIA_TYPE,
    GRAPHQL_MEDIA_TYPE,
    JSON_MEDIA_TYPE,
    MULTIPART_MEDIA_TYPE,
    HTTPInput,
    media_type_of,
)

if TYPE_CHECKING:
    from starlette.requests import Request

logger = logging.getLogger(__name__)

PRIVATE_STATE_KEY = "gqlplug"
BODY_PARSE_ERROR = "Could not parse the request body"


def assign_private(
    request: "Request",
    *,
    context: dict[str, Any] | None = None,
    root_value: Any = None,
) -> None:
    """
    Attach per-connection context and/or root value to a request.

    Context is merged over anything assigned earlier; root value replaces.
    """
    private = dict(getattr(request.state, PRIVATE_STATE_KEY, None) or {})
    if context is not None:
        private["context"] = {**(private.get("context") or {}), **context}
    if root_value is not None:
        private["root_value"] = root_value
    setattr(request.state, PRIVATE_STATE_KEY, private)


async def read_http_input(
    request: "Request",
    codec: JSONCodec | None = None,
) -> HTTPInput:
    """
    Convert a Starlette request to an HTTPInput.

    Args:
        request: The incoming HTTP request
        codec: Codec for JSON bodies (stdlib json when omitted)

    Returns:
        HTTPInput with parsed fields

    Raises:
        InputError: If a JSON body is malformed or not an object
    """
    codec = codec or StdlibJSONCodec()
    content_type = request.headers.get("content-type", "")
    media_type = media_type_of(content_type)

    body = b""
    body_params: dict[str, Any] = {}

    if media_type == JSON_MEDIA_TYPE:
        raw = await request.body()
        if raw.strip():
            try:
                parsed = codec.decode(raw)
            except CodecError as e:
                logger.info(f"[transport] Malformed JSON body: {e}")
                raise InputError(BODY_PARSE_ERROR) from e
            if not isinstance(parsed, dict):
                raise InputError(BODY_PARSE_ERROR)
            body_params = parsed
    elif media_type in (FORM_MEDIA_TYPE, MULTIPART_MEDIA_TYPE):
        form = await request.form()
        body_params = dict(form)
    elif media_type == GRAPHQL_MEDIA_TYPE:
        body = await request.body()

    return HTTPInput(
        method=request.method,
        content_type=content_type,
        body=body,
        query_params=dict(request.query_params),
        body_params=body_params,
        private=dict(getattr(request.state, PRIVATE_STATE_KEY, None) or {}),
    )
