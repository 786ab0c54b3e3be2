"""
gqlplug Transports

Adapters between web frameworks and the transport-neutral HTTPInput the
request extractor works on.
"""

from .asgi import assign_private, read_http_input
from .protocol import (
    FORM_MEDIA_TYPE,
    GRAPHQL_MEDIA_TYPE,
    JSON_MEDIA_TYPE,
    MULTIPART_MEDIA_TYPE,
    HTTPInput,
    media_type_of,
)

__all__ = [
    "HTTPInput",
    "media_type_of",
    "read_http_input",
    "assign_private",
    "GRAPHQL_MEDIA_TYPE",
    "JSON_MEDIA_TYPE",
    "FORM_MEDIA_TYPE",
    "MULTIPART_MEDIA_TYPE",
]
