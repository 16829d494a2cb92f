"""Product content model and curation operations.

All operations mutate the given ``Product`` in place and return the touched
object. Indices and keys are preconditions: a bad one is a programmer error
and raises ``IndexError``/``KeyError``; nothing here performs I/O.
"""
from __future__ import annotations
import re
import time
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from .pricing import add_cost_entry as _add_cost
from .prompts import humanize_key
from .schemas import (
    Annotation,
    AnnotationInput,
    Branding,
    ContextEntry,
    CostEntry,
    DeeperData,
    DissectionData,
    Driver,
    FieldSpec,
    GeneratedSection,
    InstructionDirective,
    Product,
    ProductElement,
    ProductSection,
)

LEGACY_CONTEXT_KEYS = ("targetAudience", "industry", "service", "role", "activity", "situation")
_KEY_RE = re.compile(r"^(?:section-(\d+)|(\d+)-(\d+)(?:-([23])-(\d+))?)$")


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


# ---- Keys ----

def section_key(s_index: int) -> str:
    return f"section-{s_index}"


def element_key(s_index: int, e_index: int) -> str:
    return f"{s_index}-{e_index}"


def second_order_key(s_index: int, e_index: int, index: int) -> str:
    return f"{s_index}-{e_index}-2-{index}"


def third_order_key(s_index: int, e_index: int, index: int) -> str:
    return f"{s_index}-{e_index}-3-{index}"


def _section(product: Product, s_index: int) -> ProductSection:
    if not 0 <= s_index < len(product.sections):
        raise IndexError(f"section index {s_index} out of range")
    return product.sections[s_index]


def _element(product: Product, s_index: int, e_index: int) -> ProductElement:
    section = _section(product, s_index)
    if not 0 <= e_index < len(section.elements):
        raise IndexError(f"element index {e_index} out of range for section {s_index}")
    return section.elements[e_index]


KeyParts = Tuple[int, Optional[int], Optional[int], Optional[int]]


def split_key(key: str) -> KeyParts:
    """``(section, element, order, index)``; trailing parts are None when absent."""
    match = _KEY_RE.match(key)
    if not match:
        raise KeyError(f"malformed key: {key}")
    if match.group(1) is not None:
        return int(match.group(1)), None, None, None
    order = match.group(4)
    return (
        int(match.group(2)),
        int(match.group(3)),
        int(order) if order else None,
        int(match.group(5)) if order else None,
    )


def follow_up_question(product: Product, s_index: int, e_index: int, order: int, index: int) -> str:
    deeper = product.deeper_questions.get(element_key(s_index, e_index))
    if deeper is None:
        raise KeyError(f"no deeper questions for {element_key(s_index, e_index)}")
    questions = deeper.second_order if order == 2 else deeper.third_order
    if not 0 <= index < len(questions):
        raise KeyError(f"follow-up question index out of range: {s_index}-{e_index}-{order}-{index}")
    return questions[index].question


def check_key(product: Product, key: str) -> str:
    """Validate a composite side-table key against the product's shape."""
    s_index, e_index, order, index = split_key(key)
    if e_index is None:
        _section(product, s_index)
        return key
    _element(product, s_index, e_index)
    if order is not None:
        follow_up_question(product, s_index, e_index, order, index)
    return key


def touch(product: Product) -> Product:
    product.updated_at = utcnow_iso()
    return product


# ---- Construction ----

def section_from_generated(section: GeneratedSection) -> ProductSection:
    return ProductSection(
        name=section.section_name,
        description=section.section_description,
        elements=[ProductElement(fields=dict(el)) for el in section.elements],
        resolved_fields=section.resolved_fields,
    )


def build_product(
    output_type: str,
    sections: Sequence[GeneratedSection],
    context: Dict[str, str],
    *,
    name: str,
    description: str = "",
    branding: Optional[Branding] = None,
    configuration_id: Optional[str] = None,
    resolved_fields: Optional[Sequence[FieldSpec]] = None,
    section_drivers: Optional[Sequence[Driver]] = None,
    instruction_directives: Optional[Sequence[InstructionDirective]] = None,
    section_label: Optional[str] = None,
) -> Product:
    if not sections:
        raise ValueError("a product needs at least one generated section")
    now = utcnow_iso()
    filled = {k: v for k, v in context.items() if v and v.strip()}
    legacy = {k: filled.get(k, "") for k in LEGACY_CONTEXT_KEYS}
    extra = [
        ContextEntry(label=humanize_key(k), value=v)
        for k, v in sorted(filled.items())
        if k not in LEGACY_CONTEXT_KEYS
    ]
    return Product(
        id=new_id("prod"),
        created_at=now,
        updated_at=now,
        name=name,
        description=description,
        configuration_id=configuration_id,
        output_type=output_type,
        target_audience=legacy["targetAudience"],
        industry=legacy["industry"],
        service=legacy["service"],
        role=legacy["role"],
        activity=legacy["activity"],
        situation=legacy["situation"],
        additional_context=extra,
        context_fields=filled,
        sections=[section_from_generated(s) for s in sections],
        resolved_fields=list(resolved_fields) if resolved_fields else None,
        section_drivers=list(section_drivers) if section_drivers else None,
        instruction_directives=list(instruction_directives) if instruction_directives is not None else None,
        section_label=section_label,
        branding=branding or Branding(),
    )


def context_record(product: Product) -> Dict[str, str]:
    if product.context_fields:
        return {k: v for k, v in product.context_fields.items() if v and v.strip()}
    ctx = {k: getattr(product, attr) for k, attr in (
        ("industry", "industry"),
        ("service", "service"),
        ("role", "role"),
        ("activity", "activity"),
        ("situation", "situation"),
    )}
    return {k: v for k, v in ctx.items() if v}


# ---- Curation ----

def toggle_element_visibility(product: Product, s_index: int, e_index: int) -> ProductElement:
    element = _element(product, s_index, e_index)
    element.hidden = not element.hidden
    touch(product)
    return element


def toggle_section_visibility(product: Product, s_index: int) -> ProductSection:
    section = _section(product, s_index)
    section.hidden = not section.hidden
    touch(product)
    return section


def update_element_field(product: Product, s_index: int, e_index: int, field_key: str, value: str) -> ProductElement:
    element = _element(product, s_index, e_index)
    element.fields[field_key] = value
    touch(product)
    return element


def add_annotation(product: Product, key: str, data: AnnotationInput) -> Annotation:
    check_key(product, key)
    existing = product.annotations.setdefault(key, [])
    taken = {a.id for a in existing}
    annotation_id = new_id("ann")
    while annotation_id in taken:
        annotation_id = new_id("ann")
    now = utcnow_iso()
    annotation = Annotation(id=annotation_id, created_at=now, updated_at=now, **data.model_dump())
    existing.append(annotation)
    touch(product)
    return annotation


def update_annotation(product: Product, key: str, annotation_id: str, data: AnnotationInput) -> Optional[Annotation]:
    for i, annotation in enumerate(product.annotations.get(key, [])):
        if annotation.id == annotation_id:
            updated = Annotation(
                id=annotation.id,
                created_at=annotation.created_at,
                updated_at=utcnow_iso(),
                **data.model_dump(),
            )
            product.annotations[key][i] = updated
            touch(product)
            return updated
    return None


def delete_annotation(product: Product, key: str, annotation_id: str) -> bool:
    annotations = product.annotations.get(key)
    if not annotations:
        return False
    remaining = [a for a in annotations if a.id != annotation_id]
    if len(remaining) == len(annotations):
        return False
    if remaining:
        product.annotations[key] = remaining
    else:
        del product.annotations[key]
    touch(product)
    return True


def attach_dissection(product: Product, key: str, data: DissectionData) -> DissectionData:
    check_key(product, key)
    product.dissections[key] = data
    touch(product)
    return data


def attach_deeper(product: Product, p_index: int, q_index: int, data: DeeperData) -> DeeperData:
    _element(product, p_index, q_index)
    key = element_key(p_index, q_index)
    # Follow-up dissections point into the previous question lists
    stale = [k for k in product.dissections if k.startswith(f"{key}-2-") or k.startswith(f"{key}-3-")]
    for k in stale:
        del product.dissections[k]
    product.deeper_questions[key] = data
    touch(product)
    return data


def _belongs_to_section(key: str, s_index: int) -> bool:
    return key == section_key(s_index) or key.startswith(f"{s_index}-")


def replace_section(product: Product, s_index: int, section: GeneratedSection) -> ProductSection:
    """Swap in a regenerated section, dropping side-table entries keyed to the old one."""
    old = _section(product, s_index)
    fresh = section_from_generated(section)
    fresh.hidden = old.hidden
    product.sections[s_index] = fresh
    for table in (product.annotations, product.dissections, product.deeper_questions):
        for k in [k for k in table if _belongs_to_section(k, s_index)]:
            del table[k]
    touch(product)
    return fresh


def record_cost(product: Product, entry: CostEntry) -> Product:
    product.cost_data = _add_cost(product.cost_data, entry)
    return touch(product)


# ---- Display helpers ----

def primary_field_key(product: Product, s_index: int, default_fields: Sequence[FieldSpec] = ()) -> str:
    section = _section(product, s_index)
    for fields in (section.resolved_fields, product.resolved_fields, default_fields):
        if fields:
            primary = next((f for f in fields if f.primary), None)
            return (primary or fields[0]).key
    first = section.elements[0].fields if section.elements else {}
    return next(iter(first), "")


def element_primary(product: Product, s_index: int, e_index: int, default_fields: Sequence[FieldSpec] = ()) -> str:
    element = _element(product, s_index, e_index)
    value = element.fields.get(primary_field_key(product, s_index, default_fields))
    if isinstance(value, str) and value:
        return value
    return next((v for v in element.fields.values() if isinstance(v, str) and v), "")


def visible_sections(product: Product) -> List[Tuple[int, ProductSection, List[Tuple[int, ProductElement]]]]:
    """Non-hidden sections with their non-hidden elements, keeping original indices."""
    out = []
    for s_index, section in enumerate(product.sections):
        if section.hidden:
            continue
        elements = [(e_index, el) for e_index, el in enumerate(section.elements) if not el.hidden]
        out.append((s_index, section, elements))
    return out
