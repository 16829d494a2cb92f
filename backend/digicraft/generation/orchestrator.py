from __future__ import annotations
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from ..catalog import OutputType
from ..prompts import DEFAULT_SECTION_LABEL, assemble_prompt
from ..schemas import Driver, FieldSpec, GeneratedSection, InstructionDirective, Usage
from .section import GenerationError, SectionGenerator, SectionOutcome, SectionResult, SectionSchema

logger = logging.getLogger(__name__)

# Given a driver and the batch-wide default fields, return the fields that
# driver's elements must carry.
FieldStrategy = Callable[[Driver, Sequence[FieldSpec]], List[FieldSpec]]


class BatchExhaustedError(Exception):
    """Every driver in a batch failed or came back empty."""

    def __init__(self, message: str, attempted: int = 0) -> None:
        super().__init__(message)
        self.attempted = attempted


def uniform_fields(driver: Driver, default_fields: Sequence[FieldSpec]) -> List[FieldSpec]:
    return list(default_fields)


def per_driver_fields(driver: Driver, default_fields: Sequence[FieldSpec]) -> List[FieldSpec]:
    return list(driver.fields) if driver.fields else list(default_fields)


def select_field_strategy(drivers: Sequence[Driver]) -> FieldStrategy:
    if any(d.fields for d in drivers):
        return per_driver_fields
    return uniform_fields


@dataclass
class BatchResult:
    sections: List[GeneratedSection]
    usage: Usage
    attempted: int
    failures: List[GenerationError] = field(default_factory=list)
    empties: List[str] = field(default_factory=list)
    per_driver_fields: bool = False
    model: str = ""

    @property
    def relevant(self) -> int:
        return len(self.sections)

    def to_wire(self) -> Dict[str, object]:
        body: Dict[str, object] = {"sections": [s.to_wire() for s in self.sections]}
        if self.per_driver_fields:
            body["_perDriverFields"] = True
        return body


async def _settle(generator: SectionGenerator, driver: Driver, prompt: str, schema: SectionSchema) -> SectionOutcome:
    try:
        return await generator.generate(driver, prompt, schema)
    except Exception as err:
        logger.exception("Section generation for %r raised instead of returning an error", driver.name)
        return GenerationError(driver.name, "unexpected", str(err) or type(err).__name__)


async def run_batch(
    generator: SectionGenerator,
    drivers: Sequence[Driver],
    context: Dict[str, str],
    section_label: Optional[str] = None,
    directives: Optional[Sequence[InstructionDirective]] = None,
    default_fields: Optional[Sequence[FieldSpec]] = None,
    *,
    field_strategy: Optional[FieldStrategy] = None,
    output_type: Optional[OutputType] = None,
    route: str = "generate",
) -> BatchResult:
    """Generate one section per driver concurrently and merge the results.

    A driver whose call fails contributes an empty placeholder; empty sections
    are dropped after every call has settled. The returned sections follow the
    order of ``drivers`` regardless of completion order.
    """
    label = section_label or (output_type.section_label if output_type else DEFAULT_SECTION_LABEL)
    if default_fields is None:
        default_fields = output_type.fields if output_type else []
    strategy = field_strategy or select_field_strategy(drivers)
    per_driver = strategy is per_driver_fields

    schemas: Dict[tuple, SectionSchema] = {}
    calls = []
    for driver in drivers:
        fields = strategy(driver, default_fields)
        cache_key = tuple(f.model_dump_json() for f in fields)
        if cache_key not in schemas:
            schemas[cache_key] = SectionSchema(fields, label, record_fields=per_driver)
        prompt = assemble_prompt(
            context,
            driver,
            label,
            directives,
            field_overrides=fields if per_driver and driver.fields else None,
            output_type=output_type,
        )
        calls.append(_settle(generator, driver, prompt, schemas[cache_key]))

    started = time.monotonic()
    outcomes = await asyncio.gather(*calls)
    elapsed_ms = int((time.monotonic() - started) * 1000)

    usage = Usage()
    sections: List[GeneratedSection] = []
    failures: List[GenerationError] = []
    empties: List[str] = []
    model = ""
    for driver, outcome in zip(drivers, outcomes):
        usage = usage + outcome.usage
        if isinstance(outcome, GenerationError):
            logger.warning("[%s] Error for %s (%s): %s", route, driver.name, outcome.kind, outcome.message)
            failures.append(outcome)
            continue
        model = model or outcome.model
        if not outcome.section.elements:
            logger.debug("[%s] %s not relevant to this context", route, driver.name)
            empties.append(driver.name)
            continue
        sections.append(outcome.section)

    logger.info(
        "[%s] %d/%d sections in %dms%s",
        route, len(sections), len(drivers), elapsed_ms, " (per-driver fields)" if per_driver else "",
    )
    return BatchResult(
        sections=sections,
        usage=usage,
        attempted=len(drivers),
        failures=failures,
        empties=empties,
        per_driver_fields=per_driver,
        model=model,
    )


def require_sections(batch: BatchResult, what: str = "content") -> BatchResult:
    if not batch.sections:
        raise BatchExhaustedError(
            f"No {what} generated: 0 of {batch.attempted} sections were relevant. Please try again.",
            attempted=batch.attempted,
        )
    return batch
