"""
Persisted Queries Example

This example demonstrates serving precompiled documents:
1. Define a schema with graphql-core
2. Register documents on a CompiledProvider
3. Mount the endpoint; documents compile at startup
4. Clients send {"id": ..., "variables": ...} instead of the query text

Run: uvicorn --factory examples.01-persisted-queries.main:build_app

    curl -X POST localhost:8000/graphql \\
      -H 'content-type: application/json' \\
      -d '{"id": "book", "variables": {"id": "1"}}'
"""

from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLID,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLString,
)

from gqlplug import CompiledProvider, DefaultProvider, PlugSettings
from gqlplug.app.main import create_app

# =============================================================================
# Schema
# =============================================================================

BOOKS = {
    "1": {"id": "1", "title": "The Left Hand of Darkness", "author": "Ursula K. Le Guin"},
    "2": {"id": "2", "title": "Kindred", "author": "Octavia E. Butler"},
}

BookType = GraphQLObjectType(
    "Book",
    {
        "id": GraphQLField(GraphQLNonNull(GraphQLID)),
        "title": GraphQLField(GraphQLString),
        "author": GraphQLField(GraphQLString),
    },
)

schema = GraphQLSchema(
    query=GraphQLObjectType(
        "Query",
        {
            "book": GraphQLField(
                BookType,
                args={"id": GraphQLArgument(GraphQLNonNull(GraphQLID))},
                resolve=lambda root, info, id: BOOKS.get(id),
            ),
            "books": GraphQLField(
                GraphQLList(BookType),
                resolve=lambda root, info: list(BOOKS.values()),
            ),
        },
    )
)

# =============================================================================
# Persisted documents
# =============================================================================

persisted = CompiledProvider(schema, name="BookQueries").provide_many(
    {
        "book": "query Book($id: ID!) { book(id: $id) { title author } }",
        "books": "query Books { books { id title } }",
    }
)


def build_app():
    # DefaultProvider keeps ad-hoc queries working next to persisted ones
    return create_app(
        schema,
        PlugSettings(),
        document_providers=[persisted, DefaultProvider()],
    )
