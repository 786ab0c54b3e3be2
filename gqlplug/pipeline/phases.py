"""
Built-in pipeline phases.

The standard document pipeline, in order:

    Parse -> Validate -> ValidationResult -> CoerceVariables
          -> CurrentOperation -> [HTTPMethodValidation] -> Execute

HTTPMethodValidation is not part of the standard pipeline; the assembler
inserts it right after CurrentOperation, once the operation type is known.

All GraphQL work is delegated to graphql-core; these phases only move its
inputs and outputs through the Blueprint.
"""
from __future__ import annotations

import logging
from inspect import isawaitable
from typing import Any

from graphql import (
    DocumentNode,
    GraphQLError,
    GraphQLSchema,
    GraphQLSyntaxError,
    OperationDefinitionNode,
    OperationType,
    execute,
    parse,
    validate,
)
from graphql.execution.values import get_variable_values

from ..adapter import Adapter
from ..errors import MethodError, PhaseError
from .blueprint import Blueprint
from .phase import Phase, PipelineHalt

logger = logging.getLogger(__name__)


class Parse(Phase):
    """
    Parse raw document text; syntax trees are taken as they are.

    When an adapter is configured, the tree is translated to the schema's
    naming before any later phase sees it.
    """

    @property
    def name(self) -> str:
        return "parse"

    async def run(
        self,
        blueprint: Blueprint,
        adapter: Adapter | None = None,
        **options: Any,
    ) -> Blueprint:
        if isinstance(blueprint.input, DocumentNode):
            document = blueprint.input
        else:
            try:
                document = parse(blueprint.input)
            except GraphQLSyntaxError as e:
                blueprint.fail_with_errors([e])
                raise PipelineHalt(blueprint) from e

        blueprint.document = adapter.to_internal(document) if adapter else document
        return blueprint


class Validate(Phase):
    """Validate the syntax tree against the schema; collect errors."""

    @property
    def name(self) -> str:
        return "validate"

    async def run(
        self,
        blueprint: Blueprint,
        schema: GraphQLSchema | None = None,
        **options: Any,
    ) -> Blueprint:
        if schema is None:
            raise PhaseError(self.name, "No schema configured for validation")
        if blueprint.document is None:
            raise PhaseError(self.name, "No document to validate")

        blueprint.errors.extend(validate(schema, blueprint.document))
        return blueprint


class ValidationResult(Phase):
    """Halt with an error result when earlier phases found problems."""

    @property
    def name(self) -> str:
        return "validation_result"

    async def run(self, blueprint: Blueprint, **options: Any) -> Blueprint:
        if blueprint.errors:
            blueprint.fail_with_errors([])
            raise PipelineHalt(blueprint)
        return blueprint


class CoerceVariables(Phase):
    """
    Coerce provided variable values for every operation in the document.

    Results are stored per operation name; CurrentOperation picks the ones
    belonging to the selected operation.
    """

    @property
    def name(self) -> str:
        return "coerce_variables"

    async def run(
        self,
        blueprint: Blueprint,
        schema: GraphQLSchema | None = None,
        variables: dict[str, Any] | None = None,
        **options: Any,
    ) -> Blueprint:
        if schema is None:
            raise PhaseError(self.name, "No schema configured for variable coercion")
        if blueprint.document is None:
            raise PhaseError(self.name, "No document to coerce variables for")

        provided = variables or {}
        for definition in blueprint.document.definitions:
            if not isinstance(definition, OperationDefinitionNode):
                continue
            name = definition.name.value if definition.name else None
            blueprint.coerced_variables[name] = get_variable_values(
                schema, definition.variable_definitions or (), provided
            )
        return blueprint


class CurrentOperation(Phase):
    """Select the operation to execute, by name when one is given."""

    @property
    def name(self) -> str:
        return "current_operation"

    async def run(
        self,
        blueprint: Blueprint,
        operation_name: str | None = None,
        **options: Any,
    ) -> Blueprint:
        if blueprint.document is None:
            raise PhaseError(self.name, "No document to select an operation from")

        operations = [
            definition
            for definition in blueprint.document.definitions
            if isinstance(definition, OperationDefinitionNode)
        ]

        operation = self._select(operations, operation_name)
        if isinstance(operation, GraphQLError):
            blueprint.fail_with_errors([operation])
            raise PipelineHalt(blueprint)

        blueprint.operation = operation
        coerced = blueprint.coerced_variables.get(blueprint.operation_name, {})
        if isinstance(coerced, list):
            blueprint.fail_with_errors(coerced)
            raise PipelineHalt(blueprint)
        blueprint.variables = coerced
        return blueprint

    def _select(
        self,
        operations: list[OperationDefinitionNode],
        operation_name: str | None,
    ) -> OperationDefinitionNode | GraphQLError:
        if operation_name is None:
            if len(operations) == 1:
                return operations[0]
            if not operations:
                return GraphQLError("Must provide an operation.")
            return GraphQLError(
                "Must provide operation name if query contains multiple operations."
            )

        for operation in operations:
            if operation.name and operation.name.value == operation_name:
                return operation
        return GraphQLError(f"Unknown operation named '{operation_name}'.")


class HTTPMethodValidation(Phase):
    """Reject mutations that did not arrive over POST."""

    MUTATION_MESSAGE = "Can only perform a mutation from a POST request"

    @property
    def name(self) -> str:
        return "http_method"

    async def run(
        self,
        blueprint: Blueprint,
        method: str = "POST",
        **options: Any,
    ) -> Blueprint:
        operation = blueprint.operation
        if operation is None:
            raise PhaseError(self.name, "HTTP method check ran before an operation was selected")

        if operation.operation == OperationType.MUTATION and method.upper() != "POST":
            logger.info(f"[http_method] Rejected mutation over {method.upper()}")
            raise MethodError(self.MUTATION_MESSAGE)
        return blueprint


class Execute(Phase):
    """Execute the selected operation and build the result mapping."""

    @property
    def name(self) -> str:
        return "execute"

    async def run(
        self,
        blueprint: Blueprint,
        schema: GraphQLSchema | None = None,
        variables: dict[str, Any] | None = None,
        context: Any = None,
        root_value: Any = None,
        **options: Any,
    ) -> Blueprint:
        if schema is None:
            raise PhaseError(self.name, "No schema configured for execution")
        if blueprint.document is None:
            raise PhaseError(self.name, "No document to execute")

        outcome = execute(
            schema,
            blueprint.document,
            root_value=root_value,
            context_value=context,
            variable_values=variables or {},
            operation_name=blueprint.operation_name,
        )
        if isawaitable(outcome):
            outcome = await outcome

        result: dict[str, Any] = {}
        if outcome.data is not None or not outcome.errors:
            result["data"] = outcome.data
        if outcome.errors:
            blueprint.errors.extend(outcome.errors)
            result["errors"] = [error.formatted for error in outcome.errors]

        blueprint.result = result
        return blueprint
