"""
Naming adapters.

An adapter translates the names a client writes in a document into the
names the schema defines. It runs on the syntax tree in the Parse phase,
so persisted documents are translated once, at compile time.

The default passes documents through untouched. LanguageConventionsAdapter
lets clients write camelCase against a snake_case schema:

    { fieldOnRootValue }   ->   { fieldOnRootValue: field_on_root_value }

Translated fields keep the client's spelling as their response key, so
results come back under the names the client asked for. Aliases the
client picked are never touched.
"""
from __future__ import annotations

import re
from copy import copy
from typing import Any, Protocol, runtime_checkable

from graphql import (
    ArgumentNode,
    DocumentNode,
    FieldNode,
    NameNode,
    ObjectFieldNode,
    Visitor,
    visit,
)

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


@runtime_checkable
class Adapter(Protocol):
    def to_internal(self, document: DocumentNode) -> DocumentNode:
        ...


class PassthroughAdapter:
    """Leaves documents exactly as the client wrote them."""

    def to_internal(self, document: DocumentNode) -> DocumentNode:
        return document


class LanguageConventionsAdapter:
    """
    Maps camelCase field, argument and input field names to snake_case.

    Introspection names (leading "__") and variable names are left alone.
    Variable values are passed through as sent.
    """

    def to_internal(self, document: DocumentNode) -> DocumentNode:
        return visit(document, _InternalNames())


class _InternalNames(Visitor):
    def enter_field(self, node: FieldNode, *_args: Any) -> FieldNode | None:
        external = node.name.value
        internal = to_snake_case(external)
        if internal == external:
            return None

        translated = copy(node)
        translated.name = NameNode(value=internal)
        # Response key stays the client's spelling
        translated.alias = node.alias or NameNode(value=external)
        return translated

    def enter_argument(self, node: ArgumentNode, *_args: Any) -> ArgumentNode | None:
        return _renamed(node)

    def enter_object_field(self, node: ObjectFieldNode, *_args: Any) -> ObjectFieldNode | None:
        return _renamed(node)


def _renamed(node: Any) -> Any:
    internal = to_snake_case(node.name.value)
    if internal == node.name.value:
        return None
    renamed = copy(node)
    renamed.name = NameNode(value=internal)
    return renamed


def to_snake_case(name: str) -> str:
    """fieldOnRootValue -> field_on_root_value; leading underscores kept."""
    if name.startswith("__"):
        return name
    stripped = name.lstrip("_")
    prefix = name[: len(name) - len(stripped)]
    stripped = _ACRONYM_BOUNDARY.sub(r"\1_\2", stripped)
    return prefix + _WORD_BOUNDARY.sub(r"\1_\2", stripped).lower()
