"""
File upload support.

Multipart requests may carry file parts next to the `query` field. The
extractor collects every uploaded file into a reserved bucket of the
execution context:

    context["__gqlplug__"]["uploads"] == {"users_csv": <UploadFile>, ...}

A schema argument typed with the `Upload` scalar receives the *name* of a
file part; resolvers turn that name into the file with `get_upload`.
Treating uploads as arguments keeps them visible (and required, where the
argument is non-null) in the schema.

Example:
    curl -X POST \\
      -F query='mutation { importUsers(users: "users_csv") }' \\
      -F users_csv=@users.csv \\
      localhost:8000/graphql
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from graphql import GraphQLError, GraphQLScalarType, GraphQLResolveInfo
from starlette.datastructures import UploadFile

UPLOADS_KEY = "__gqlplug__"


def _parse_upload_name(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise GraphQLError(f"Upload must be the name of a file part, got {value!r}.")
    return value


Upload = GraphQLScalarType(
    name="Upload",
    description=(
        "The name of a multipart file part uploaded with the request. "
        "Resolvers read the file with gqlplug.uploads.get_upload."
    ),
    serialize=str,
    parse_value=_parse_upload_name,
)


def is_upload(value: Any) -> bool:
    return isinstance(value, UploadFile)


def collect_uploads(params: Mapping[str, Any]) -> dict[str, UploadFile]:
    """Pick the uploaded files out of the parsed request fields."""
    return {name: value for name, value in params.items() if is_upload(value)}


def uploads_from_context(context: Mapping[str, Any] | None) -> dict[str, UploadFile]:
    if not context:
        return {}
    bucket = context.get(UPLOADS_KEY) or {}
    return dict(bucket.get("uploads") or {})


def get_upload(info: GraphQLResolveInfo, name: str) -> UploadFile:
    """
    Return the file uploaded under `name`.

    Raises:
        GraphQLError: If the request carried no file part with that name
    """
    uploads = uploads_from_context(info.context)
    if name not in uploads:
        raise GraphQLError(
            f'Argument refers to upload "{name}", but no such file was uploaded.'
        )
    return uploads[name]
