"""
Pipeline Runner for gqlplug.

Runs a document through an ordered list of phases.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from graphql import DocumentNode

from ..errors import MethodError, PhaseError
from .blueprint import Blueprint, RunResult
from .phase import PhaseDescriptor, PipelineHalt
from .sequence import normalize

logger = logging.getLogger(__name__)


class PipelineRunner:
    """
    Sequential phase executor.

    Execution Model:
    - Phases run strictly in list order on a single Blueprint
    - PipelineHalt finishes the run successfully with the current result
    - MethodError fails the run with the error itself (mapped to 405)
    - PhaseError and unexpected exceptions fail the run with a message

    Example:
        runner = PipelineRunner()
        run = await runner.run("{ item(id: \\"foo\\") { name } }", for_document(schema))
        if run.ok:
            print(run.result)
    """

    async def run(
        self,
        document: str | DocumentNode,
        phases: Sequence[PhaseDescriptor],
    ) -> RunResult:
        """
        Run `document` through `phases`.

        Args:
            document: Raw document text or an already parsed syntax tree
            phases: Ordered phase descriptors

        Returns:
            RunResult with the final blueprint
        """
        pipeline = normalize(phases)
        blueprint = Blueprint(input=document)
        if isinstance(document, DocumentNode):
            # Precompiled trees may skip Parse entirely
            blueprint.document = document
        last_phase: str | None = None

        logger.debug(f"Pipeline starting: phases={[d.name for d in pipeline]}")

        for descriptor in pipeline:
            phase = descriptor.phase()
            last_phase = phase.name
            start_time = time.perf_counter()

            try:
                blueprint = await phase.run(blueprint, **descriptor.options)
            except PipelineHalt as halt:
                logger.debug(f"Pipeline halted by '{phase.name}'")
                return RunResult.succeeded(halt.blueprint, last_phase=last_phase)
            except MethodError as e:
                return RunResult.failed(blueprint, e, last_phase=last_phase)
            except PhaseError as e:
                logger.warning(f"Phase '{e.phase_name}' failed: {e.message}")
                return RunResult.failed(blueprint, e.message, last_phase=last_phase)
            except Exception as e:
                logger.error(f"Phase '{phase.name}' error: {e}", exc_info=True)
                return RunResult.failed(blueprint, str(e), last_phase=last_phase)
            finally:
                duration_ms = (time.perf_counter() - start_time) * 1000
                blueprint.record_timing(phase.name, duration_ms)

            logger.debug(f"Phase '{phase.name}' finished in {duration_ms:.1f}ms")

        return RunResult.succeeded(blueprint, last_phase=last_phase)


async def run_pipeline(
    document: str | DocumentNode,
    phases: Sequence[PhaseDescriptor],
) -> RunResult:
    """Run a pipeline with a fresh PipelineRunner."""
    return await PipelineRunner().run(document, phases)
