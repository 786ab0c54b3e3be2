"""
Pipeline state for gqlplug.

The Blueprint is the working state a document accumulates while it moves
through the phases. RunResult is what the runner hands back.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from graphql import DocumentNode, GraphQLError, OperationDefinitionNode

from ..errors import MethodError


@dataclass
class Blueprint:
    """
    Document state shared by the phases of one pipeline run.

    Attributes:
        input: What the runner was given (raw text or a syntax tree)
        document: Parsed syntax tree (set by Parse)
        errors: GraphQL errors found so far
        coerced_variables: Per operation name, coerced values or errors
        operation: The operation selected for execution
        variables: Coerced variables of the selected operation
        result: Final result mapping ({"data": ..., "errors": [...]})
    """

    input: str | DocumentNode
    document: DocumentNode | None = None
    errors: list[GraphQLError] = field(default_factory=list)
    coerced_variables: dict[str | None, dict[str, Any] | list[GraphQLError]] = field(
        default_factory=dict
    )
    operation: OperationDefinitionNode | None = None
    variables: dict[str, Any] = field(default_factory=dict)
    result: dict[str, Any] | None = None
    phase_timings: dict[str, float] = field(default_factory=dict)

    @property
    def operation_name(self) -> str | None:
        if self.operation is None or self.operation.name is None:
            return None
        return self.operation.name.value

    def record_timing(self, phase_name: str, duration_ms: float) -> None:
        self.phase_timings[phase_name] = duration_ms

    def fail_with_errors(self, errors: list[GraphQLError]) -> None:
        """Record errors and build the error-only result."""
        self.errors.extend(errors)
        self.result = {"errors": [error.formatted for error in self.errors]}


@dataclass
class RunResult:
    """
    Outcome of one pipeline run.

    status == "ok": the pipeline finished (or halted) normally; `result`
    holds the GraphQL result when one was produced.
    status == "error": a phase failed; `error` is a MethodError or a
    message string.
    """

    status: Literal["ok", "error"]
    blueprint: Blueprint
    result: dict[str, Any] | None = None
    error: MethodError | str | None = None
    last_phase: str | None = None

    @classmethod
    def succeeded(cls, blueprint: Blueprint, last_phase: str | None = None) -> "RunResult":
        return cls(status="ok", blueprint=blueprint, result=blueprint.result, last_phase=last_phase)

    @classmethod
    def failed(
        cls,
        blueprint: Blueprint,
        error: MethodError | str,
        last_phase: str | None = None,
    ) -> "RunResult":
        return cls(status="error", blueprint=blueprint, error=error, last_phase=last_phase)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def error_message(self) -> str | None:
        if self.error is None:
            return None
        if isinstance(self.error, MethodError):
            return self.error.message
        return str(self.error)
