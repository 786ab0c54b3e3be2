"""
Pytest configuration and fixtures for gqlplug tests.
"""

import sys
from pathlib import Path
from typing import Any

import pytest
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

# Add the repository root to path for imports
# This allows `from gqlplug.pipeline import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from gqlplug.config import PlugConfig, PlugSettings  # noqa: E402
from gqlplug.uploads import Upload, get_upload  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"

ITEMS = {
    "foo": {"id": "foo", "name": "Foo"},
    "bar": {"id": "bar", "name": "Bar"},
}


# =============================================================================
# Test schema
# =============================================================================


def _resolve_field_on_root_value(root: Any, info: Any) -> Any:
    if isinstance(root, dict):
        return root.get("field_on_root_value")
    return None


def _resolve_upload_test(root: Any, info: Any, fileA: str, fileB: str | None = None) -> str:
    received = info.context.get("received_uploads")
    names = []
    for field_name, upload_name in (("file_a", fileA), ("file_b", fileB)):
        if upload_name is None:
            continue
        upload = get_upload(info, upload_name)
        if received is not None:
            received.append(upload)
        names.append(field_name)
    return ", ".join(names)


def _resolve_items_named(root: Any, info: Any, name_prefix: str = "") -> list[dict]:
    return [item for item in ITEMS.values() if item["name"].startswith(name_prefix)]


def _resolve_failing(root: Any, info: Any) -> str:
    raise RuntimeError("Something went wrong")


ItemType = GraphQLObjectType(
    "Item",
    lambda: {
        "id": GraphQLField(GraphQLNonNull(GraphQLID)),
        "name": GraphQLField(GraphQLString),
    },
)

QueryType = GraphQLObjectType(
    "Query",
    lambda: {
        "item": GraphQLField(
            ItemType,
            args={"id": GraphQLArgument(GraphQLNonNull(GraphQLID))},
            resolve=lambda root, info, id: ITEMS.get(id),
        ),
        "field_on_root_value": GraphQLField(
            GraphQLString,
            resolve=_resolve_field_on_root_value,
        ),
        "contextValue": GraphQLField(
            GraphQLString,
            args={"key": GraphQLArgument(GraphQLNonNull(GraphQLString))},
            resolve=lambda root, info, key: info.context.get(key),
        ),
        "uploadTest": GraphQLField(
            GraphQLString,
            args={
                "fileA": GraphQLArgument(GraphQLNonNull(Upload)),
                "fileB": GraphQLArgument(Upload),
            },
            resolve=_resolve_upload_test,
        ),
        "items_named": GraphQLField(
            GraphQLList(ItemType),
            args={"name_prefix": GraphQLArgument(GraphQLString)},
            resolve=_resolve_items_named,
        ),
        "failing": GraphQLField(GraphQLString, resolve=_resolve_failing),
    },
)

MutationType = GraphQLObjectType(
    "Mutation",
    lambda: {
        "addItem": GraphQLField(
            ItemType,
            args={"name": GraphQLArgument(GraphQLNonNull(GraphQLString))},
            resolve=lambda root, info, name: {"id": name.lower(), "name": name},
        ),
    },
)

TEST_SCHEMA = GraphQLSchema(query=QueryType, mutation=MutationType)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def schema():
    """The shared test schema."""
    return TEST_SCHEMA


@pytest.fixture
def plug_config(schema):
    """PlugConfig with all defaults."""
    return PlugConfig.build(schema)


@pytest.fixture
def settings():
    """Settings that ignore the environment."""
    return PlugSettings()


@pytest.fixture
def extracted_queries_path():
    """Path to an extracted queries file (document text -> id)."""
    return FIXTURES_DIR / "extracted_queries.json"


@pytest.fixture
def app_factory(schema, settings):
    """Build a FastAPI app for the test schema with plug options."""
    from gqlplug.app.main import create_app

    def _create(**plug_options: Any):
        return create_app(schema, settings, **plug_options)

    return _create


@pytest.fixture
def variable_query():
    return """
    query FooQuery($id: ID!){
      item(id: $id) {
        name
      }
    }
    """


@pytest.fixture
def foo_query():
    return """
    {
      item(id: "foo") {
        name
      }
    }
    """
