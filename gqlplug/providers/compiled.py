"""
Compiled document provider.

Serves a fixed set of documents that the server knows ahead of time
(persisted queries). Clients send a short id instead of the query text:

    POST /graphql
    {"id": "item_by_id", "variables": {"id": "foo"}}

Each document is compiled once at startup: parsed and validated against
the schema by running the front of the pipeline (everything before
variable coercion). The resulting syntax tree is stored by id, and at
request time only the remaining phases run.

A document that fails to compile aborts startup with DocumentCompileError.

Usage:
    item_queries = CompiledProvider(schema, name="ItemQueries")
    item_queries.provide("item_by_id", '''
        query ItemById($id: ID!) { item(id: $id) { name } }
    ''')

    # Extracted by a client build step: {"<document text>": "<id>", ...}
    bundled = CompiledProvider.from_extracted_queries(
        "priv/extracted_queries.json", schema
    )

    # At startup (GraphQLPlug.initialize does this for configured providers)
    await item_queries.compile()
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from graphql import DocumentNode, GraphQLSchema

from ..adapter import Adapter
from ..errors import DocumentCompileError
from ..pipeline import sequence
from ..pipeline.builder import for_document
from ..pipeline.phase import Phase, PhaseDescriptor
from ..pipeline.phases import CoerceVariables
from ..pipeline.runner import PipelineRunner
from .base import Cont, DocumentProvider, Halt, ProviderResult

if TYPE_CHECKING:
    from ..request import ParsedRequest

logger = logging.getLogger(__name__)

DEFAULT_KEY_PARAM = "id"


@dataclass(frozen=True)
class CompiledEntry:
    """
    One precompiled document.

    Attributes:
        id: Key clients send to select the document
        source_text: Document text as registered
        compiled_tree: Syntax tree produced by the compilation pipeline
        last_compiled_phase: Last phase of the compilation pipeline; the
            runtime pipeline resumes right after it
    """

    id: str
    source_text: str
    compiled_tree: DocumentNode
    last_compiled_phase: type[Phase]


def compilation_pipeline_for(
    schema: GraphQLSchema,
    adapter: Adapter | None = None,
) -> list[PhaseDescriptor]:
    """The standard pipeline up to, but excluding, variable coercion."""
    return sequence.before(for_document(schema, adapter=adapter), CoerceVariables)


class CompiledProvider(DocumentProvider):
    """
    Document provider backed by a table of precompiled documents.

    Lookups are exact-match on the id taken from `params[key_param]`.
    Missing or unknown ids pass the request on to the next provider.

    Lifecycle:
    1. provide() / provide_many(): register id -> document text
    2. compile(): validate everything, freeze the table (once, at startup)
    3. resolve() / lookup(): read-only at request time
    """

    def __init__(
        self,
        schema: GraphQLSchema,
        *,
        name: str | None = None,
        key_param: str = DEFAULT_KEY_PARAM,
        adapter: Adapter | None = None,
        compilation_pipeline: Sequence[Any] | None = None,
        runner: PipelineRunner | None = None,
    ):
        """
        Args:
            schema: Schema documents are validated against
            name: Name used in logs and compile errors (class name if omitted)
            key_param: Request field holding the document id
            adapter: Naming adapter; give it the same one as the mount
            compilation_pipeline: Phases run at compile time; must be a
                prefix of the runtime pipeline
            runner: Pipeline runner (a fresh PipelineRunner if omitted)
        """
        self._schema = schema
        self._name = name
        self._key_param = key_param
        self._adapter = adapter
        self._compilation_pipeline = (
            sequence.normalize(compilation_pipeline)
            if compilation_pipeline is not None
            else None
        )
        self._runner = runner or PipelineRunner()
        self._documents: dict[str, str] = {}
        self._entries: Mapping[str, CompiledEntry] | None = None

    @property
    def name(self) -> str:
        return self._name or self.__class__.__name__

    @property
    def compilation_pipeline(self) -> list[PhaseDescriptor]:
        if self._compilation_pipeline is not None:
            return list(self._compilation_pipeline)
        return compilation_pipeline_for(self._schema, self._adapter)

    @property
    def compiled(self) -> bool:
        return self._entries is not None

    # ==================== Registration ====================

    def provide(self, document_id: str, document_text: str) -> "CompiledProvider":
        """Register a document under `document_id`."""
        if self.compiled:
            raise RuntimeError(
                f"Cannot provide document {document_id!r}: {self.name} is already compiled"
            )
        self._documents[str(document_id)] = document_text
        return self

    def provide_many(self, documents: Mapping[str, str]) -> "CompiledProvider":
        """Register several documents from an id -> text mapping."""
        for document_id, document_text in documents.items():
            self.provide(document_id, document_text)
        return self

    @classmethod
    def from_extracted_queries(
        cls,
        path: str | Path,
        schema: GraphQLSchema,
        **kwargs: Any,
    ) -> "CompiledProvider":
        """
        Build a provider from an extracted queries file.

        The file maps document text to id, as written by client-side
        persisted query extraction tools:

            {"query Q { item(id: \\"foo\\") { name } }": "1"}
        """
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            extracted = json.load(f)

        if not isinstance(extracted, dict):
            raise ValueError(f"{path} must contain a JSON object of text -> id")

        provider = cls(schema, **kwargs)
        provider.provide_many({str(doc_id): text for text, doc_id in extracted.items()})
        logger.info(f"[compiled] Loaded {len(extracted)} extracted queries from {path}")
        return provider

    # ==================== Compilation ====================

    async def compile(self) -> None:
        """
        Compile every registered document and freeze the table.

        Raises:
            DocumentCompileError: On the first document that fails to
                parse or validate
        """
        if self.compiled:
            return

        pipeline = self.compilation_pipeline
        if not pipeline:
            raise ValueError(f"{self.name}: compilation pipeline is empty")
        last_phase = pipeline[-1].phase

        entries: dict[str, CompiledEntry] = {}
        for document_id, document_text in self._documents.items():
            run = await self._runner.run(document_text, pipeline)

            if not run.ok:
                raise DocumentCompileError(document_id, self.name, run.error_message or "")
            if run.blueprint.errors:
                raise DocumentCompileError(
                    document_id,
                    self.name,
                    [error.message for error in run.blueprint.errors],
                )
            if run.blueprint.document is None:
                raise DocumentCompileError(
                    document_id, self.name, "Compilation produced no syntax tree"
                )

            entries[document_id] = CompiledEntry(
                id=document_id,
                source_text=document_text,
                compiled_tree=run.blueprint.document,
                last_compiled_phase=last_phase,
            )

        self._entries = MappingProxyType(entries)
        logger.info(
            f"[compiled] {self.name}: compiled {len(entries)} document(s) "
            f"through {last_phase.__name__}"
        )

    # ==================== Lookup ====================

    def _table(self) -> Mapping[str, CompiledEntry]:
        if self._entries is None:
            raise RuntimeError(f"{self.name} has not been compiled; call compile() at startup")
        return self._entries

    def lookup(self, document_id: Any) -> CompiledEntry | None:
        """The compiled entry for `document_id`, or None when unknown."""
        if document_id is None:
            return None
        return self._table().get(str(document_id))

    def source(self, document_id: Any) -> str | None:
        """The registered text of `document_id`, or None when unknown."""
        entry = self.lookup(document_id)
        return entry.source_text if entry else None

    @property
    def ids(self) -> list[str]:
        return list(self._table().keys())

    # ==================== DocumentProvider ====================

    async def resolve(
        self,
        request: "ParsedRequest",
        options: Mapping[str, Any],
    ) -> ProviderResult:
        key_param = options.get("key_param", self._key_param)
        document_id = request.params.get(key_param)
        if document_id is None:
            return Cont(request)

        entry = self.lookup(document_id)
        if entry is None:
            logger.debug(f"[compiled] {self.name}: unknown document id {document_id!r}")
            return Cont(request)

        return Halt(
            replace(
                request,
                document=entry.compiled_tree,
                document_provider_key=entry.id,
            )
        )

    def pipeline(self, request: "ParsedRequest") -> list[PhaseDescriptor]:
        entry = self.lookup(request.document_provider_key)
        if entry is None:
            return list(request.pipeline)
        return sequence.after(request.pipeline, entry.last_compiled_phase)
