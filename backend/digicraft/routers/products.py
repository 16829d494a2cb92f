from __future__ import annotations

import logging
import time
from typing import Callable, Tuple, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from .. import content
from ..catalog import OutputType
from ..db import get_db
from ..debug import new_prompt_log, record_ai_log
from ..dependencies import get_enrich_client, get_llm_client
from ..enrichment import EnrichmentError, generate_deeper, generate_dissection
from ..gemini_client import GeminiClient
from ..generation.orchestrator import BatchExhaustedError, require_sections
from ..pricing import cost_entry
from ..schemas import (
    AnnotationInput,
    DeeperData,
    DeeperRequest,
    DissectionData,
    DissectRequest,
    Driver,
    FieldUpdate,
    Product,
    ProductPatch,
)
from ..store import ProductStore
from .generate import execute_batch, resolve_output_type


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])

T = TypeVar("T")


def _load(store: ProductStore, product_id: str) -> Product:
    product = store.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _apply(op: Callable[..., T], *args) -> T:
    try:
        return op(*args)
    except (IndexError, KeyError) as err:
        raise HTTPException(status_code=404, detail=str(err.args[0]) if err.args else "Not found")


@router.get("")
def list_products(db: Session = Depends(get_db)):
    return [p.to_wire() for p in ProductStore(db).all()]


@router.delete("")
def clear_products(db: Session = Depends(get_db)):
    return {"deleted": ProductStore(db).clear()}


@router.get("/{product_id}")
def get_product(product_id: str, db: Session = Depends(get_db)):
    return _load(ProductStore(db), product_id).to_wire()


@router.patch("/{product_id}")
def patch_product(product_id: str, patch: ProductPatch, db: Session = Depends(get_db)):
    store = ProductStore(db)
    product = _load(store, product_id)
    for name, value in patch:
        if value is not None:
            setattr(product, name, value)
    store.update(content.touch(product))
    return product.to_wire()


@router.delete("/{product_id}")
def delete_product(product_id: str, db: Session = Depends(get_db)):
    if not ProductStore(db).remove(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return {"deleted": True}


# ---- Curation ----

@router.post("/{product_id}/sections/{s_index}/toggle")
def toggle_section(product_id: str, s_index: int, db: Session = Depends(get_db)):
    store = ProductStore(db)
    product = _load(store, product_id)
    section = _apply(content.toggle_section_visibility, product, s_index)
    store.update(product)
    return {"hidden": section.hidden}


@router.post("/{product_id}/sections/{s_index}/elements/{e_index}/toggle")
def toggle_element(product_id: str, s_index: int, e_index: int, db: Session = Depends(get_db)):
    store = ProductStore(db)
    product = _load(store, product_id)
    element = _apply(content.toggle_element_visibility, product, s_index, e_index)
    store.update(product)
    return {"hidden": element.hidden}


@router.put("/{product_id}/sections/{s_index}/elements/{e_index}/fields/{field_key}")
def update_field(
    product_id: str, s_index: int, e_index: int, field_key: str, body: FieldUpdate, db: Session = Depends(get_db)
):
    store = ProductStore(db)
    product = _load(store, product_id)
    element = _apply(content.update_element_field, product, s_index, e_index, field_key, body.value)
    store.update(product)
    return element.to_wire()


@router.get("/{product_id}/annotations/{key}")
def list_annotations(product_id: str, key: str, db: Session = Depends(get_db)):
    product = _load(ProductStore(db), product_id)
    return [a.to_wire() for a in product.annotations.get(key, [])]


@router.post("/{product_id}/annotations/{key}", status_code=201)
def add_annotation(product_id: str, key: str, body: AnnotationInput, db: Session = Depends(get_db)):
    store = ProductStore(db)
    product = _load(store, product_id)
    annotation = _apply(content.add_annotation, product, key, body)
    store.update(product)
    return annotation.to_wire()


@router.put("/{product_id}/annotations/{key}/{annotation_id}")
def update_annotation(
    product_id: str, key: str, annotation_id: str, body: AnnotationInput, db: Session = Depends(get_db)
):
    store = ProductStore(db)
    product = _load(store, product_id)
    annotation = content.update_annotation(product, key, annotation_id, body)
    if annotation is None:
        raise HTTPException(status_code=404, detail="Annotation not found")
    store.update(product)
    return annotation.to_wire()


@router.delete("/{product_id}/annotations/{key}/{annotation_id}")
def delete_annotation(product_id: str, key: str, annotation_id: str, db: Session = Depends(get_db)):
    store = ProductStore(db)
    product = _load(store, product_id)
    deleted = content.delete_annotation(product, key, annotation_id)
    if deleted:
        store.update(product)
    return {"deleted": deleted}


# ---- Enrichment attached to a product ----

def _dissection_target(product: Product, key: str) -> Tuple[str, str]:
    """The item text and section name a dissection key points at."""
    s_index, e_index, order, index = content.split_key(key)
    section = product.sections[s_index] if 0 <= s_index < len(product.sections) else None
    if section is None:
        raise IndexError(f"section index {s_index} out of range")
    if e_index is None:
        item = f"{section.name}: {section.description}" if section.description else section.name
        return item, section.name
    if order is not None:
        return content.follow_up_question(product, s_index, e_index, order, index), section.name
    return content.element_primary(product, s_index, e_index), section.name


@router.put("/{product_id}/dissections/{key}")
def put_dissection(product_id: str, key: str, body: DissectionData, db: Session = Depends(get_db)):
    store = ProductStore(db)
    product = _load(store, product_id)
    data = _apply(content.attach_dissection, product, key, body)
    store.update(product)
    return data.to_wire()


@router.post("/{product_id}/dissections/{key}")
async def generate_product_dissection(
    product_id: str,
    key: str,
    refresh: bool = Query(default=False),
    db: Session = Depends(get_db),
    client: GeminiClient = Depends(get_enrich_client),
):
    """Generate (or return the cached) dissection for one section, element or follow-up question."""
    store = ProductStore(db)
    product = _load(store, product_id)
    item, section_name = _apply(_dissection_target, product, key)
    if key in product.dissections and not refresh:
        return product.dissections[key].to_wire()
    if not item:
        raise HTTPException(status_code=400, detail="Nothing to dissect at this key")

    req = DissectRequest(item=item, section=section_name, output_type=product.output_type, context=content.context_record(product))
    prompt_log = new_prompt_log()
    started = time.monotonic()
    try:
        data, usage, model = await generate_dissection(client, req, prompt_log=prompt_log)
    except EnrichmentError as err:
        record_ai_log(
            db, action="Dissect item", route="dissect-item", request_body=req.to_wire(), prompt_log=prompt_log,
            model=client.model, started=started, success=False, error=str(err),
            product_id=product.id, product_name=product.name,
        )
        raise
    content.attach_dissection(product, key, data)
    content.record_cost(product, cost_entry("dissect-item", "Dissect item", model, usage))
    store.update(product)
    record_ai_log(
        db, action="Dissect item", route="dissect-item", request_body=req.to_wire(), prompt_log=prompt_log,
        model=model, started=started, response=data.key_insight, product_id=product.id, product_name=product.name,
    )
    return data.to_wire()


def _require_deeper_support(product: Product) -> OutputType:
    output_type = resolve_output_type(product.output_type)
    if not output_type.supports_deeper_questions:
        raise HTTPException(status_code=400, detail=f"Deeper questions are not available for {output_type.name}")
    return output_type


@router.put("/{product_id}/deeper/{s_index}/{e_index}")
def put_deeper(product_id: str, s_index: int, e_index: int, body: DeeperData, db: Session = Depends(get_db)):
    store = ProductStore(db)
    product = _load(store, product_id)
    _require_deeper_support(product)
    data = _apply(content.attach_deeper, product, s_index, e_index, body)
    store.update(product)
    return data.to_wire()


@router.post("/{product_id}/deeper/{s_index}/{e_index}")
async def generate_product_deeper(
    product_id: str,
    s_index: int,
    e_index: int,
    refresh: bool = Query(default=False),
    db: Session = Depends(get_db),
    client: GeminiClient = Depends(get_enrich_client),
):
    store = ProductStore(db)
    product = _load(store, product_id)
    _require_deeper_support(product)
    question = _apply(content.element_primary, product, s_index, e_index)
    if not question:
        raise HTTPException(status_code=400, detail="Element has no question text")
    key = content.element_key(s_index, e_index)
    if key in product.deeper_questions and not refresh:
        return product.deeper_questions[key].to_wire()

    req = DeeperRequest(
        original_question=question,
        perspective=product.sections[s_index].name,
        context=content.context_record(product),
    )
    prompt_log = new_prompt_log()
    started = time.monotonic()
    try:
        data, usage, model = await generate_deeper(client, req, prompt_log=prompt_log)
    except EnrichmentError as err:
        record_ai_log(
            db, action="Deeper questions", route="generate-deeper", request_body=req.to_wire(), prompt_log=prompt_log,
            model=client.model, started=started, success=False, error=str(err),
            product_id=product.id, product_name=product.name,
        )
        raise
    content.attach_deeper(product, s_index, e_index, data)
    content.record_cost(product, cost_entry("generate-deeper", "Deeper questions", model, usage))
    store.update(product)
    record_ai_log(
        db, action="Deeper questions", route="generate-deeper", request_body=req.to_wire(), prompt_log=prompt_log,
        model=model, started=started, response=data.to_wire(), product_id=product.id, product_name=product.name,
    )
    return data.to_wire()


# ---- Regeneration ----

def _driver_for_section(output_type: OutputType, product: Product, s_index: int) -> Driver:
    """Rebuild the driver a section was generated from, keeping its per-section fields."""
    section = product.sections[s_index]
    known = list(product.section_drivers or []) + list(output_type.drivers)
    driver = next((d for d in known if d.name == section.name), None)
    if driver is None:
        driver = Driver(name=section.name, description=section.description)
    if section.resolved_fields:
        driver = driver.model_copy(update={"fields": section.resolved_fields})
    return driver


@router.post("/{product_id}/sections/{s_index}/regenerate")
async def regenerate_section(
    product_id: str,
    s_index: int,
    db: Session = Depends(get_db),
    client: GeminiClient = Depends(get_llm_client),
):
    """Rerun one section through the orchestrator and swap it in place."""
    store = ProductStore(db)
    product = _load(store, product_id)
    output_type = resolve_output_type(product.output_type)
    if not 0 <= s_index < len(product.sections):
        raise HTTPException(status_code=404, detail=f"section index {s_index} out of range")
    driver = _driver_for_section(output_type, product, s_index)
    route = f"regenerate-{output_type.id}"
    prompt_log = new_prompt_log()
    started = time.monotonic()
    try:
        batch = await execute_batch(
            client,
            output_type,
            [driver],
            content.context_record(product),
            section_label=product.section_label or output_type.section_label,
            directives=(
                product.instruction_directives
                if product.instruction_directives is not None
                else output_type.directives
            ),
            prompt_log=prompt_log,
            route=route,
        )
        require_sections(batch, "section")
    except (BatchExhaustedError, HTTPException) as err:
        record_ai_log(
            db, action=f"Regenerate {driver.name}", route=route, request_body={"sectionIndex": s_index},
            prompt_log=prompt_log, model=client.model, started=started, success=False,
            error=str(err) if isinstance(err, BatchExhaustedError) else str(err.detail),
            product_id=product.id, product_name=product.name,
        )
        raise
    model = batch.model or client.model
    section = content.replace_section(product, s_index, batch.sections[0])
    content.record_cost(product, cost_entry(route, f"Regenerate {driver.name}", model, batch.usage))
    store.update(product)
    record_ai_log(
        db, action=f"Regenerate {driver.name}", route=route, request_body={"sectionIndex": s_index},
        prompt_log=prompt_log, model=model, started=started, response=section.to_wire(),
        product_id=product.id, product_name=product.name,
    )
    logger.info("[%s] Replaced section %d of %s", route, s_index, product.id)
    return section.to_wire()
