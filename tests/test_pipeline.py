"""
Tests for the gqlplug pipeline.

Tests sequence helpers, PipelineRunner failure handling, the built-in
phases and per-request pipeline assembly.
"""
from dataclasses import replace

import pytest
from graphql import parse

from gqlplug.config import PlugConfig
from gqlplug.errors import MethodError, PhaseError
from gqlplug.pipeline import (
    Blueprint,
    CoerceVariables,
    CurrentOperation,
    Execute,
    HTTPMethodValidation,
    Parse,
    Phase,
    PhaseDescriptor,
    PipelineHalt,
    PipelineRunner,
    Validate,
    ValidationResult,
    assemble,
    for_document,
    run_pipeline,
    sequence,
)
from gqlplug.providers import CompiledProvider, ProviderConfig
from gqlplug.request import ParsedRequest

MULTIPLE_OPERATIONS = """
query Foo { item(id: "foo") { ...Named } }
query Bar { item(id: "bar") { ...Named } }
fragment Named on Item { name }
"""


class MarkerPhase(Phase):
    """Test phase that passes the blueprint through."""

    @property
    def name(self) -> str:
        return "marker"

    async def run(self, blueprint, **options):
        return blueprint


class HaltingPhase(Phase):
    @property
    def name(self) -> str:
        return "halting"

    async def run(self, blueprint, **options):
        blueprint.result = {"data": {"halted": True}}
        raise PipelineHalt(blueprint)


class ExplodingPhase(Phase):
    @property
    def name(self) -> str:
        return "exploding"

    async def run(self, blueprint, **options):
        raise RuntimeError("kaboom")


class RefusingPhase(Phase):
    @property
    def name(self) -> str:
        return "refusing"

    async def run(self, blueprint, **options):
        raise PhaseError(self.name, "cannot continue")


def make_request(document, operation_name=None, variables=None) -> ParsedRequest:
    return ParsedRequest(
        document=document,
        params={},
        variables=variables or {},
        operation_name=operation_name,
        context={},
        root_value={},
    )


# =============================================================================
# Sequence helpers
# =============================================================================


class TestSequence:
    def test_normalize(self):
        pipeline = sequence.normalize([Parse, (Validate, {"schema": None})])

        assert pipeline == [
            PhaseDescriptor(Parse),
            PhaseDescriptor(Validate, {"schema": None}),
        ]

    def test_insert_after(self, schema):
        pipeline = sequence.insert_after(for_document(schema), CurrentOperation, MarkerPhase)

        names = sequence.phase_names(pipeline)
        assert names.index("MarkerPhase") == names.index("CurrentOperation") + 1
        assert len(pipeline) == 7

    def test_insert_before(self, schema):
        pipeline = sequence.insert_before(for_document(schema), Execute, MarkerPhase)

        assert sequence.phase_names(pipeline)[-2:] == ["MarkerPhase", "Execute"]

    def test_before_and_after_split_around_phase(self, schema):
        pipeline = for_document(schema)

        head = sequence.before(pipeline, CoerceVariables)
        tail = sequence.after(pipeline, ValidationResult)

        assert head + tail == pipeline
        assert sequence.phase_names(head) == ["Parse", "Validate", "ValidationResult"]

    def test_from_phase(self, schema):
        tail = sequence.from_phase(for_document(schema), CurrentOperation)

        assert sequence.phase_names(tail) == ["CurrentOperation", "Execute"]

    def test_replace_and_without(self, schema):
        pipeline = for_document(schema)

        replaced = sequence.replace(pipeline, Execute, MarkerPhase)
        removed = sequence.without(pipeline, Execute)

        assert sequence.phase_names(replaced)[-1] == "MarkerPhase"
        assert not sequence.contains(removed, Execute)
        assert len(pipeline) == 6

    def test_missing_anchor(self, schema):
        with pytest.raises(ValueError):
            sequence.after(for_document(schema), HTTPMethodValidation)

    def test_with_options(self):
        descriptor = PhaseDescriptor(Execute, {"schema": None}).with_options(context={})

        assert dict(descriptor.options) == {"schema": None, "context": {}}


# =============================================================================
# Runner
# =============================================================================


class TestPipelineRunner:
    @pytest.mark.asyncio
    async def test_standard_pipeline(self, schema):
        run = await PipelineRunner().run('{ item(id: "foo") { name } }', for_document(schema))

        assert run.ok
        assert run.result == {"data": {"item": {"name": "Foo"}}}
        assert run.last_phase == "execute"
        assert set(run.blueprint.phase_timings) == {
            "parse",
            "validate",
            "validation_result",
            "coerce_variables",
            "current_operation",
            "execute",
        }

    @pytest.mark.asyncio
    async def test_halt_finishes_successfully(self):
        run = await run_pipeline("{ a }", [HaltingPhase, MarkerPhase])

        assert run.ok
        assert run.result == {"data": {"halted": True}}
        assert run.last_phase == "halting"
        assert "marker" not in run.blueprint.phase_timings

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_message(self):
        run = await run_pipeline("{ a }", [ExplodingPhase])

        assert not run.ok
        assert run.error == "kaboom"

    @pytest.mark.asyncio
    async def test_phase_error_becomes_message(self):
        run = await run_pipeline("{ a }", [RefusingPhase])

        assert run.error == "cannot continue"
        assert run.error_message == "cannot continue"

    @pytest.mark.asyncio
    async def test_syntax_tree_input_skips_parse(self, schema):
        tree = parse('{ item(id: "bar") { name } }')
        phases = sequence.after(for_document(schema), ValidationResult)

        run = await run_pipeline(tree, phases)

        assert run.result == {"data": {"item": {"name": "Bar"}}}


# =============================================================================
# Phases
# =============================================================================


class TestParsePhase:
    @pytest.mark.asyncio
    async def test_syntax_error_halts_with_errors(self):
        blueprint = Blueprint(input="{ item(bad) }")

        with pytest.raises(PipelineHalt) as exc_info:
            await Parse().run(blueprint)

        result = exc_info.value.blueprint.result
        assert list(result) == ["errors"]
        assert result["errors"][0]["message"].startswith("Syntax Error")


class TestValidationPhases:
    @pytest.mark.asyncio
    async def test_validation_errors_halt(self, schema):
        run = await run_pipeline("{ item(id: \"foo\") { nope } }", for_document(schema))

        assert run.ok
        assert run.last_phase == "validation_result"
        assert "nope" in run.result["errors"][0]["message"]

    @pytest.mark.asyncio
    async def test_validate_without_schema(self):
        blueprint = Blueprint(input="{ a }", document=parse("{ a }"))

        with pytest.raises(PhaseError):
            await Validate().run(blueprint)


class TestCurrentOperation:
    @pytest.mark.asyncio
    async def test_select_by_name(self, schema):
        for name, expected in (("Foo", "Foo"), ("Bar", "Bar")):
            run = await run_pipeline(
                MULTIPLE_OPERATIONS, for_document(schema, operation_name=name)
            )

            assert run.result == {"data": {"item": {"name": expected}}}

    @pytest.mark.asyncio
    async def test_multiple_operations_need_a_name(self, schema):
        run = await run_pipeline(MULTIPLE_OPERATIONS, for_document(schema))

        assert run.result["errors"][0]["message"] == (
            "Must provide operation name if query contains multiple operations."
        )

    @pytest.mark.asyncio
    async def test_unknown_operation(self, schema):
        run = await run_pipeline(
            MULTIPLE_OPERATIONS, for_document(schema, operation_name="Baz")
        )

        assert run.result == {"errors": [{"message": "Unknown operation named 'Baz'."}]}

    @pytest.mark.asyncio
    async def test_variable_coercion_errors_halt(self, schema):
        run = await run_pipeline(
            "query Q($id: ID!) { item(id: $id) { name } }", for_document(schema)
        )

        assert "data" not in run.result
        assert "$id" in run.result["errors"][0]["message"]
        assert run.last_phase == "current_operation"

    @pytest.mark.asyncio
    async def test_variables_are_coerced_per_operation(self, schema):
        document = """
        query NeedsId($id: ID!) { item(id: $id) { name } }
        query NoVariables { item(id: "bar") { name } }
        """

        run = await run_pipeline(
            document, for_document(schema, operation_name="NoVariables")
        )

        assert run.result == {"data": {"item": {"name": "Bar"}}}


class TestHTTPMethodValidation:
    @pytest.mark.asyncio
    async def test_mutation_over_get(self):
        blueprint = Blueprint(input="", document=parse("mutation { addItem(name: \"Baz\") { name } }"))
        blueprint.operation = blueprint.document.definitions[0]

        with pytest.raises(MethodError) as exc_info:
            await HTTPMethodValidation().run(blueprint, method="GET")

        assert exc_info.value.message == "Can only perform a mutation from a POST request"

    @pytest.mark.asyncio
    async def test_mutation_over_post(self):
        blueprint = Blueprint(input="", document=parse("mutation { addItem(name: \"Baz\") { name } }"))
        blueprint.operation = blueprint.document.definitions[0]

        assert await HTTPMethodValidation().run(blueprint, method="post") is blueprint

    @pytest.mark.asyncio
    async def test_query_over_get(self):
        blueprint = Blueprint(input="", document=parse("{ item(id: \"foo\") { name } }"))
        blueprint.operation = blueprint.document.definitions[0]

        assert await HTTPMethodValidation().run(blueprint, method="GET") is blueprint

    @pytest.mark.asyncio
    async def test_runner_reports_method_error(self, schema):
        pipeline = sequence.insert_after(
            for_document(schema),
            CurrentOperation,
            (HTTPMethodValidation, {"method": "GET"}),
        )

        run = await run_pipeline('mutation { addItem(name: "Baz") { name } }', pipeline)

        assert not run.ok
        assert isinstance(run.error, MethodError)
        assert run.last_phase == "http_method"


class TestExecutePhase:
    @pytest.mark.asyncio
    async def test_field_errors_keep_data(self, schema):
        run = await run_pipeline("{ failing }", for_document(schema))

        assert list(run.result) == ["data", "errors"]
        assert run.result["data"] == {"failing": None}
        assert run.result["errors"][0]["message"] == "Something went wrong"

    @pytest.mark.asyncio
    async def test_context_and_root_value(self, schema):
        run = await run_pipeline(
            '{ contextValue(key: "user") field_on_root_value }',
            for_document(
                schema,
                context={"user": "alice"},
                root_value={"field_on_root_value": "root"},
            ),
        )

        assert run.result == {"data": {"contextValue": "alice", "field_on_root_value": "root"}}


# =============================================================================
# Assembly
# =============================================================================


class TestAssemble:
    def test_method_check_follows_current_operation(self, plug_config):
        request = make_request("{ a }")

        pipeline = assemble(request, plug_config, "get")

        assert sequence.phase_names(pipeline) == [
            "Parse",
            "Validate",
            "ValidationResult",
            "CoerceVariables",
            "CurrentOperation",
            "HTTPMethodValidation",
            "Execute",
        ]
        method_check = pipeline[5]
        assert method_check.options == {"method": "GET"}

    def test_request_fields_reach_the_phases(self, plug_config):
        request = make_request("{ a }", operation_name="Foo", variables={"id": "foo"})

        pipeline = assemble(request, plug_config, "POST")

        by_phase = {descriptor.phase: descriptor.options for descriptor in pipeline}
        assert by_phase[CurrentOperation] == {"operation_name": "Foo"}
        assert by_phase[CoerceVariables]["variables"] == {"id": "foo"}
        assert by_phase[Execute]["root_value"] == {}

    def test_custom_pipeline_builder(self, schema):
        def with_marker(config, options):
            return sequence.insert_before(for_document(config.schema, **options), Execute, MarkerPhase)

        config = PlugConfig.build(schema, pipeline=with_marker)

        pipeline = assemble(make_request("{ a }"), config, "POST")

        assert sequence.phase_names(pipeline)[-3:] == [
            "HTTPMethodValidation",
            "MarkerPhase",
            "Execute",
        ]

    @pytest.mark.asyncio
    async def test_claiming_provider_trims_pipeline(self, schema, plug_config):
        provider = CompiledProvider(schema).provide("1", '{ item(id: "foo") { name } }')
        await provider.compile()
        request = replace(
            make_request(provider.lookup("1").compiled_tree),
            document_provider=ProviderConfig(provider),
            document_provider_key="1",
        )

        pipeline = assemble(request, plug_config, "POST")

        assert sequence.phase_names(pipeline) == [
            "CoerceVariables",
            "CurrentOperation",
            "HTTPMethodValidation",
            "Execute",
        ]
