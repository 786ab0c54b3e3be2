"""
Helpers for editing pipelines.

A pipeline is a plain list of PhaseDescriptors. These helpers never mutate
their input and never reorder or duplicate phases: they insert, cut a
prefix, or slice a suffix, matching entries by phase class.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from .phase import Phase, PhaseDescriptor

PipelineEntry = Any  # PhaseDescriptor | type[Phase] | (type[Phase], options)


def normalize(entries: Iterable[PipelineEntry]) -> list[PhaseDescriptor]:
    """Normalize bare phase classes and (phase, options) pairs."""
    return [PhaseDescriptor.of(entry) for entry in entries]


def index_of(pipeline: Sequence[PhaseDescriptor], phase: type[Phase]) -> int:
    """
    Position of the first descriptor for `phase`.

    Raises:
        ValueError: If the phase is not in the pipeline
    """
    for index, descriptor in enumerate(pipeline):
        if descriptor.phase is phase:
            return index
    raise ValueError(
        f"Phase {phase.__name__} not found in pipeline {phase_names(pipeline)}"
    )


def contains(pipeline: Sequence[PhaseDescriptor], phase: type[Phase]) -> bool:
    return any(descriptor.phase is phase for descriptor in pipeline)


def insert_after(
    pipeline: Sequence[PhaseDescriptor],
    anchor: type[Phase],
    entry: PipelineEntry,
) -> list[PhaseDescriptor]:
    index = index_of(pipeline, anchor)
    return [*pipeline[: index + 1], PhaseDescriptor.of(entry), *pipeline[index + 1 :]]


def insert_before(
    pipeline: Sequence[PhaseDescriptor],
    anchor: type[Phase],
    entry: PipelineEntry,
) -> list[PhaseDescriptor]:
    index = index_of(pipeline, anchor)
    return [*pipeline[:index], PhaseDescriptor.of(entry), *pipeline[index:]]


def before(pipeline: Sequence[PhaseDescriptor], phase: type[Phase]) -> list[PhaseDescriptor]:
    """Every phase up to, but excluding, `phase`."""
    return list(pipeline[: index_of(pipeline, phase)])


def after(pipeline: Sequence[PhaseDescriptor], phase: type[Phase]) -> list[PhaseDescriptor]:
    """Every phase after `phase`, excluding it."""
    return list(pipeline[index_of(pipeline, phase) + 1 :])


def from_phase(pipeline: Sequence[PhaseDescriptor], phase: type[Phase]) -> list[PhaseDescriptor]:
    """Every phase from `phase` (inclusive) to the end."""
    return list(pipeline[index_of(pipeline, phase) :])


def replace(
    pipeline: Sequence[PhaseDescriptor],
    phase: type[Phase],
    entry: PipelineEntry,
) -> list[PhaseDescriptor]:
    index = index_of(pipeline, phase)
    return [*pipeline[:index], PhaseDescriptor.of(entry), *pipeline[index + 1 :]]


def without(pipeline: Sequence[PhaseDescriptor], phase: type[Phase]) -> list[PhaseDescriptor]:
    return [descriptor for descriptor in pipeline if descriptor.phase is not phase]


def phase_names(pipeline: Sequence[PhaseDescriptor]) -> list[str]:
    return [descriptor.name for descriptor in pipeline]
