"""
Standard pipeline construction.

    Parse -> Validate -> ValidationResult -> CoerceVariables
          -> CurrentOperation -> Execute

`for_document` spreads per-request options over the phases that need them.
`default_pipeline` is the builder hook used when a mount does not configure
its own; custom builders share its signature:

    def my_pipeline(config: PlugConfig, options: dict) -> list[PhaseDescriptor]:
        return sequence.insert_before(
            default_pipeline(config, options), Execute, (AuditPhase, {})
        )
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from graphql import GraphQLSchema

from .phase import PhaseDescriptor
from .phases import (
    CoerceVariables,
    CurrentOperation,
    Execute,
    Parse,
    Validate,
    ValidationResult,
)

if TYPE_CHECKING:
    from gqlplug.adapter import Adapter
    from gqlplug.config import PlugConfig


def for_document(
    schema: GraphQLSchema,
    *,
    adapter: "Adapter | None" = None,
    variables: dict[str, Any] | None = None,
    operation_name: str | None = None,
    context: dict[str, Any] | None = None,
    root_value: Any = None,
    **_request_fields: Any,
) -> list[PhaseDescriptor]:
    """
    Build the standard pipeline for one document.

    Args:
        schema: Schema to validate and execute against
        adapter: Naming adapter applied to the parsed document
        variables: Raw (uncoerced) variable values
        operation_name: Operation to select, if the document has several
        context: Execution context passed to resolvers
        root_value: Root value for top-level resolvers

    Returns:
        Ordered list of phase descriptors
    """
    variables = variables or {}
    return [
        PhaseDescriptor(Parse, {"adapter": adapter} if adapter is not None else {}),
        PhaseDescriptor(Validate, {"schema": schema}),
        PhaseDescriptor(ValidationResult),
        PhaseDescriptor(CoerceVariables, {"schema": schema, "variables": variables}),
        PhaseDescriptor(CurrentOperation, {"operation_name": operation_name}),
        PhaseDescriptor(
            Execute,
            {
                "schema": schema,
                "variables": variables,
                "context": context if context is not None else {},
                "root_value": root_value,
            },
        ),
    ]


def default_pipeline(config: "PlugConfig", options: dict[str, Any]) -> list[PhaseDescriptor]:
    """Pipeline builder used when the mount configures none."""
    return for_document(config.schema, adapter=config.adapter, **options)
