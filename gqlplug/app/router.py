"""
FastAPI router for a GraphQL mount.

Both GET and POST are served on the mount path; the plug decides per
operation whether the method is acceptable (mutations need POST).
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response

from gqlplug.plug import GraphQLPlug

logger = logging.getLogger(__name__)


def create_graphql_router(plug: GraphQLPlug, *, tags: list[str] | None = None) -> APIRouter:
    """
    Build an APIRouter serving `plug` on its configured path.

    Example:
        plug = GraphQLPlug.build(schema)
        app.include_router(create_graphql_router(plug))
    """
    router = APIRouter(tags=tags or ["graphql"])

    @router.api_route(plug.config.path, methods=["GET", "POST"], include_in_schema=False)
    async def graphql_endpoint(request: Request) -> Response:
        return await plug.handle(request)

    logger.debug(f"[router] GraphQL endpoint registered at {plug.config.path}")
    return router
