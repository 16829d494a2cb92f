from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, List, Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..catalog import OutputType, get_output_type
from ..content import build_product, record_cost
from ..db import get_db
from ..debug import new_prompt_log, record_ai_log, with_debug_meta, with_usage_meta
from ..dependencies import get_llm_client
from ..gemini_client import GeminiClient
from ..generation.orchestrator import BatchExhaustedError, BatchResult, require_sections, run_batch
from ..generation.section import PromptLog, SectionGenerator
from ..pricing import cost_entry
from ..schemas import Driver, GenerationRequest, InstructionDirective, ProductRequest
from ..settings import settings
from ..store import ProductStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generate", tags=["generate"])


def resolve_output_type(output_type_id: str) -> OutputType:
    output_type = get_output_type(output_type_id)
    if output_type is None:
        raise HTTPException(status_code=404, detail=f"Unknown output type: {output_type_id}")
    return output_type


def resolve_drivers(output_type: OutputType, requested: Optional[List[Driver]]) -> List[Driver]:
    # Omitted and empty both fall back to the output type's drivers
    if not requested:
        return list(output_type.drivers)
    return requested


def resolve_directives(
    output_type: OutputType, requested: Optional[List[InstructionDirective]]
) -> List[InstructionDirective]:
    # Omitted means the output type's own directives; an explicit [] selects the default template
    if requested is None:
        return list(output_type.directives)
    return requested


async def execute_batch(
    client: GeminiClient,
    output_type: OutputType,
    drivers: Sequence[Driver],
    context: Dict[str, str],
    *,
    section_label: Optional[str],
    directives: Sequence[InstructionDirective],
    prompt_log: Optional[PromptLog],
    route: str,
) -> BatchResult:
    """Run one batch under the wall-clock ceiling; a timeout is a 504, not a partial result."""
    generator = SectionGenerator(client, prompt_log=prompt_log)
    try:
        # Hitting the ceiling cancels every in-flight section call
        return await asyncio.wait_for(
            run_batch(
                generator,
                drivers,
                context,
                section_label,
                directives,
                output_type=output_type,
                route=route,
            ),
            timeout=settings.generation_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.error("[%s] Batch exceeded %ss", route, settings.generation_timeout_seconds)
        raise HTTPException(status_code=504, detail="Generation timed out. Please try again.")


def _default_product_name(output_type: OutputType, context: Dict[str, str]) -> str:
    subject = [context[k].strip() for k in ("role", "industry", "service") if (context.get(k) or "").strip()]
    if not subject:
        return output_type.name
    return f"{output_type.name}: {' / '.join(subject)}"


async def _generate(
    output_type: OutputType,
    req: GenerationRequest,
    client: GeminiClient,
    db: Session,
    *,
    route: str,
    action: str,
):
    prompt_log = new_prompt_log()
    started = time.monotonic()
    try:
        batch = await execute_batch(
            client,
            output_type,
            resolve_drivers(output_type, req.section_drivers),
            req.context,
            section_label=req.section_label,
            directives=resolve_directives(output_type, req.instruction_directives),
            prompt_log=prompt_log,
            route=route,
        )
        require_sections(batch, output_type.name.lower())
    except (BatchExhaustedError, HTTPException) as err:
        message = str(err) if isinstance(err, BatchExhaustedError) else str(err.detail)
        record_ai_log(
            db,
            action=action,
            route=route,
            request_body=req.to_wire(),
            prompt_log=prompt_log,
            model=client.model,
            started=started,
            success=False,
            error=message,
        )
        raise
    return batch, prompt_log, started


@router.post("/{output_type}")
async def generate_sections(
    output_type: str,
    req: GenerationRequest,
    db: Session = Depends(get_db),
    client: GeminiClient = Depends(get_llm_client),
):
    ot = resolve_output_type(output_type)
    route = f"generate-{ot.id}"
    batch, prompt_log, started = await _generate(ot, req, client, db, route=route, action=f"Generate {ot.name}")
    model = batch.model or client.model
    body = batch.to_wire()
    record_ai_log(
        db,
        action=f"Generate {ot.name}",
        route=route,
        request_body=req.to_wire(),
        prompt_log=prompt_log,
        model=model,
        started=started,
        response=body,
    )
    with_debug_meta(body, prompt_log, model)
    with_usage_meta(body, batch.usage, model)
    return body


@router.post("/{output_type}/product")
async def generate_product(
    output_type: str,
    req: ProductRequest,
    db: Session = Depends(get_db),
    client: GeminiClient = Depends(get_llm_client),
):
    """Generate and persist a product in one step."""
    ot = resolve_output_type(output_type)
    route = f"generate-{ot.id}"
    action = f"Generate {ot.name}"
    batch, prompt_log, started = await _generate(ot, req, client, db, route=route, action=action)
    model = batch.model or client.model

    product = build_product(
        ot.id,
        batch.sections,
        req.context,
        name=req.name or _default_product_name(ot, req.context),
        description=req.description,
        branding=req.branding,
        configuration_id=req.configuration_id,
        resolved_fields=ot.fields,
        section_drivers=resolve_drivers(ot, req.section_drivers),
        instruction_directives=resolve_directives(ot, req.instruction_directives),
        section_label=req.section_label,
    )
    record_cost(product, cost_entry(route, action, model, batch.usage))
    ProductStore(db).insert(product)
    logger.info("[%s] Created product %s with %d/%d sections", route, product.id, batch.relevant, batch.attempted)

    body = product.to_wire()
    body["relevantSections"] = batch.relevant
    body["attemptedSections"] = batch.attempted
    body["message"] = f"{batch.relevant}/{batch.attempted} relevant sections generated"
    if batch.per_driver_fields:
        body["_perDriverFields"] = True
    record_ai_log(
        db,
        action=action,
        route=route,
        request_body=req.to_wire(),
        prompt_log=prompt_log,
        model=model,
        started=started,
        response=body["message"],
        product_id=product.id,
        product_name=product.name,
    )
    with_debug_meta(body, prompt_log, model)
    with_usage_meta(body, batch.usage, model)
    return body
