"""
Phase abstraction for the gqlplug pipeline.

A pipeline is an ordered list of PhaseDescriptors. Each descriptor names a
Phase class plus the options it runs with. The runner instantiates the
phase and awaits `run(blueprint, **options)`.

Phases are single-responsibility steps:
- Return the (possibly updated) blueprint to continue
- Raise PipelineHalt to finish early with the blueprint's result
- Raise MethodError / PhaseError to fail the pipeline
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .blueprint import Blueprint


class PipelineHalt(Exception):
    """
    Raised to finish the pipeline early with the current blueprint.

    Used when a phase has already produced the final result, for example
    a document that failed validation.

    Example:
        if blueprint.errors:
            blueprint.result = {"errors": [...]}
            raise PipelineHalt(blueprint)
    """

    def __init__(self, blueprint: "Blueprint"):
        self.blueprint = blueprint
        super().__init__("Pipeline halted")


class Phase(ABC):
    """
    Base class for all pipeline phases.

    Subclasses must implement:
    - name: Identifier used in logs and timings
    - run(): The step itself
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def run(self, blueprint: "Blueprint", **options: Any) -> "Blueprint":
        """
        Apply this phase to the blueprint.

        Args:
            blueprint: Document state accumulated by earlier phases
            **options: Options from the phase descriptor

        Returns:
            The blueprint to hand to the next phase

        Raises:
            PipelineHalt: Finish early with blueprint.result
            MethodError: HTTP method does not allow the operation
            PhaseError: The phase cannot continue
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


@dataclass(frozen=True)
class PhaseDescriptor:
    """
    One entry in a pipeline: a Phase class and its options.

    The pipeline machinery only inserts, slices and compares descriptors by
    phase class; it never looks inside the options.
    """

    phase: type[Phase]
    options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def of(cls, entry: "PhaseDescriptor | type[Phase] | tuple") -> "PhaseDescriptor":
        """Normalize a bare phase class or (phase, options) pair."""
        if isinstance(entry, PhaseDescriptor):
            return entry
        if isinstance(entry, tuple):
            phase, options = entry
            return cls(phase=phase, options=dict(options))
        if isinstance(entry, type) and issubclass(entry, Phase):
            return cls(phase=entry)
        raise TypeError(f"Not a pipeline phase: {entry!r}")

    def with_options(self, **options: Any) -> "PhaseDescriptor":
        return PhaseDescriptor(phase=self.phase, options={**self.options, **options})

    @property
    def name(self) -> str:
        return self.phase.__name__

    def __repr__(self) -> str:
        return f"PhaseDescriptor({self.name}, options={sorted(self.options)})"
