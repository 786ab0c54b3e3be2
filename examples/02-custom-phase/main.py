"""
Custom Phase Example

This example demonstrates extending the pipeline:
1. Write a Phase
2. Insert it with a pipeline builder
3. Run documents through the plug without an HTTP server

Run: python -m examples.02-custom-phase.main
"""

import asyncio
import logging
from typing import Any

from graphql import GraphQLField, GraphQLObjectType, GraphQLSchema, GraphQLString

from gqlplug import GraphQLPlug
from gqlplug.pipeline import Execute, Phase, for_document, sequence
from gqlplug.transports import HTTPInput

logger = logging.getLogger(__name__)

schema = GraphQLSchema(
    query=GraphQLObjectType(
        "Query",
        {"greeting": GraphQLField(GraphQLString, resolve=lambda root, info: "hello")},
    )
)


# =============================================================================
# Custom Phase
# =============================================================================


class AuditPhase(Phase):
    """Logs the operation about to be executed."""

    @property
    def name(self) -> str:
        return "audit"

    async def run(self, blueprint, **options: Any):
        logger.info(f"[audit] executing {blueprint.operation_name or '<anonymous>'}")
        return blueprint


def audited_pipeline(config, options):
    return sequence.insert_before(
        for_document(config.schema, adapter=config.adapter, **options), Execute, AuditPhase
    )


# =============================================================================
# Main
# =============================================================================


async def main():
    logging.basicConfig(level=logging.INFO)

    plug = GraphQLPlug.build(schema, pipeline=audited_pipeline)
    await plug.initialize()

    response = await plug.call(
        HTTPInput(method="GET", query_params={"query": "query Greet { greeting }"})
    )
    print(f"Status: {response.status_code}")
    print(f"Body:   {response.body}")


if __name__ == "__main__":
    asyncio.run(main())
