"""
gqlplug - GraphQL over HTTP

FastAPI application entry point.

Run a schema straight from the environment:

    GQLPLUG_SCHEMA=myapp.schema:schema uvicorn --factory gqlplug.app.main:create_app_from_env

or build the app in code:

    app = create_app(schema, document_providers=[item_queries, DefaultProvider()])
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gqlplug import __version__
from gqlplug.app.dependencies import get_settings
from gqlplug.app.router import create_graphql_router
from gqlplug.config import PlugConfig, PlugSettings
from gqlplug.plug import GraphQLPlug
from gqlplug.utils import import_string

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    schema: Any,
    settings: PlugSettings | None = None,
    **plug_options: Any,
) -> FastAPI:
    """
    Create a FastAPI application serving `schema`.

    Args:
        schema: The GraphQLSchema to serve
        settings: Mount settings (environment settings when omitted)
        **plug_options: PlugConfig.build options; these win over settings

    Returns:
        FastAPI app whose startup compiles every persisted document
    """
    settings = settings or get_settings()
    plug = GraphQLPlug(PlugConfig.from_settings(settings, schema, **plug_options))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        A document that fails to compile aborts startup.
        """
        logger.info("Starting gqlplug...")
        try:
            await plug.initialize()
            logger.info(f"gqlplug serving GraphQL at {plug.config.path}")
        except Exception as e:
            logger.error(f"Failed to initialize GraphQL endpoint: {e}", exc_info=True)
            raise

        yield

        logger.info("Shutting down gqlplug...")

    app = FastAPI(
        title="gqlplug",
        description="GraphQL over HTTP with persisted documents",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.graphql_plug = plug

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_graphql_router(plug))

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, Any]:
        """Health check endpoint: readiness and configured providers."""
        return {
            "status": "healthy" if plug.initialized else "starting",
            "path": plug.config.path,
            "providers": [entry.provider.name for entry in plug.providers],
        }

    return app


def create_app_from_env() -> FastAPI:
    """App factory reading the schema import path from GQLPLUG_SCHEMA."""
    settings = get_settings()
    if not settings.schema_path:
        raise RuntimeError("GQLPLUG_SCHEMA must name the schema to serve, e.g. myapp.schema:schema")
    return create_app(import_string(settings.schema_path), settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gqlplug.app.main:create_app_from_env",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=get_settings().debug,
    )
