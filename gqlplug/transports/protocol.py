"""
Transport-neutral view of an incoming HTTP request.

The request extractor never touches the web framework. Transports read the
request once and hand over an HTTPInput: the method, the content type, the
raw body (only for bodies no parser consumed) and the already parsed
fields.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

GRAPHQL_MEDIA_TYPE = "application/graphql"
JSON_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"
MULTIPART_MEDIA_TYPE = "multipart/form-data"


def media_type_of(content_type: str | None) -> str:
    """'application/json; charset=utf-8' -> 'application/json'"""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


@dataclass(frozen=True, slots=True)
class HTTPInput:
    """
    An HTTP request as the extractor sees it.

    Attributes:
        method: HTTP method ("GET", "POST", ...)
        content_type: Raw Content-Type header value
        body: Raw body bytes (empty when a body parser consumed the body)
        query_params: Parsed query string fields
        body_params: Parsed body fields (JSON object, form or multipart)
        private: Per-connection values injected by the host application
            ("context" and "root_value")
    """

    method: str = "POST"
    content_type: str = ""
    body: bytes = b""
    query_params: Mapping[str, Any] = field(default_factory=dict)
    body_params: Mapping[str, Any] = field(default_factory=dict)
    private: Mapping[str, Any] = field(default_factory=dict)

    @property
    def media_type(self) -> str:
        return media_type_of(self.content_type)

    @property
    def params(self) -> dict[str, Any]:
        """Query string fields overlaid with body fields."""
        return {**self.query_params, **self.body_params}
