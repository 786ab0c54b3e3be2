"""
gqlplug Application

FastAPI surface: the GraphQL router and the application factory.
"""

from .router import create_graphql_router

__all__ = ["create_graphql_router"]
