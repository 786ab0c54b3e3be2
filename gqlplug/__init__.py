"""
gqlplug - GraphQL over HTTP for FastAPI/Starlette applications.

gqlplug turns HTTP requests into GraphQL executions and results back into
HTTP responses:

- **Request Extraction**: JSON, form, multipart and application/graphql bodies
- **Document Providers**: Ordered strategies deciding what document runs
- **Persisted Documents**: Documents compiled once at startup, selected by id
- **Phase Pipeline**: Parse, validate, coerce, select, check method, execute
- **Response Mapping**: 200 / 400 / 405 / 500 with stable JSON bodies

Quick Start:
    >>> from gqlplug import CompiledProvider, DefaultProvider
    >>> from gqlplug.app.main import create_app
    >>>
    >>> item_queries = CompiledProvider(schema).provide(
    ...     "item", 'query Item($id: ID!) { item(id: $id) { name } }'
    ... )
    >>> app = create_app(schema, document_providers=[item_queries, DefaultProvider()])
"""

__version__ = "0.1.0"

from gqlplug.config import PlugConfig, PlugSettings
from gqlplug.errors import (
    CodecError,
    DocumentCompileError,
    InputError,
    MethodError,
    PhaseError,
    PlugError,
)
from gqlplug.plug import GraphQLPlug, PlugResponse, map_result
from gqlplug.providers import CompiledProvider, DefaultProvider, DocumentProvider
from gqlplug.uploads import Upload, get_upload

__all__ = [
    "__version__",
    # Plug
    "GraphQLPlug",
    "PlugResponse",
    "map_result",
    # Configuration
    "PlugConfig",
    "PlugSettings",
    # Providers
    "DocumentProvider",
    "DefaultProvider",
    "CompiledProvider",
    # Uploads
    "Upload",
    "get_upload",
    # Errors
    "PlugError",
    "InputError",
    "MethodError",
    "CodecError",
    "PhaseError",
    "DocumentCompileError",
]
