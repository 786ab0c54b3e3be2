"""
Error taxonomy for gqlplug.

Every failure the plug can report is one of these classes. Each class maps
to exactly one HTTP outcome (see gqlplug.plug.map_result):

- InputError: malformed or unresolvable client input -> 400
- MethodError: HTTP verb does not allow the operation type -> 405
- PhaseError: a pipeline phase failed -> 500
- DocumentCompileError: a precompiled document is invalid -> startup abort

GraphQL-level errors (syntax, validation, field errors) are not exceptions
here. They travel inside a successful result under the "errors" key.
"""
from __future__ import annotations

from collections.abc import Iterable


class PlugError(Exception):
    """Base class for all gqlplug errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InputError(PlugError):
    """
    Raised when the client input cannot be turned into an executable request.

    Examples: undecodable variables, no document supplied, a request that
    no document provider was willing to claim.
    """

    pass


class MethodError(PlugError):
    """Raised when the HTTP method does not permit the selected operation."""

    pass


class CodecError(PlugError):
    """Raised by a JSON codec when a value cannot be decoded."""

    pass


class PhaseError(PlugError):
    """
    Raised by a pipeline phase that cannot continue.

    Carries the phase name so the runner can report where the pipeline
    stopped.
    """

    def __init__(self, phase_name: str, message: str):
        self.phase_name = phase_name
        super().__init__(message)


class DocumentCompileError(PlugError):
    """
    Raised when a document registered for precompilation fails to compile.

    This is fatal at startup: the owning provider must not serve traffic
    with a broken document in its table.
    """

    def __init__(
        self,
        document_id: str,
        provider_name: str,
        messages: str | Iterable[str],
    ):
        if isinstance(messages, str):
            messages = [messages]
        self.document_id = document_id
        self.provider_name = provider_name
        self.messages = list(messages)
        super().__init__(
            format_compile_error(document_id, provider_name, self.messages)
        )


def format_compile_error(
    document_id: str,
    provider_name: str,
    messages: list[str],
) -> str:
    """Render a compile failure naming the document, provider and problems."""
    problems = "\n".join(f"  - {message}" for message in messages)
    return (
        f"\n\nCould not compile document provider {provider_name}.\n\n"
        f'The following problems were found processing document "{document_id}":\n'
        f"{problems}\n"
    )
