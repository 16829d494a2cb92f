"""Prompt assembly for section generation.

Everything here is a pure string transform: the same inputs always produce
the same prompt, byte for byte. Context keys are sorted so the caller's dict
ordering never leaks into the prompt.
"""
from __future__ import annotations
import re
from typing import Dict, List, Optional, Sequence

from .catalog import OutputType
from .schemas import Driver, FieldSpec, InstructionDirective

# Directives with these labels also open the prompt as plain framing text
FRAMING_LABELS = ("Role", "Task", "Process")

DEFAULT_SECTION_LABEL = "Section"
_GENERIC_ROLE = "You are an expert consultant and domain advisor."
_GENERIC_TASK = 'Generate specific, practical items for the "{driver}" {label}.'
_GENERIC_GUIDELINES = [
    "Only generate items if this {label} is genuinely relevant to the given context. If not relevant, return an empty elements array.",
    "Every item must be specific to the described context, not generic.",
]


def collapse_whitespace(text: str) -> str:
    return " ".join((text or "").split())


def humanize_key(key: str) -> str:
    spaced = re.sub(r"([A-Z])", r" \1", key.replace("_", " "))
    spaced = collapse_whitespace(spaced)
    return spaced[:1].upper() + spaced[1:]


def format_context(context: Dict[str, str]) -> str:
    lines = []
    for key in sorted(context):
        value = collapse_whitespace(context[key] or "")
        if not value:
            continue
        lines.append(f"- {humanize_key(key)}: {value}")
    return "\n".join(lines)


def _context_block(context: Dict[str, str]) -> str:
    return "CONTEXT:\n" + (format_context(context) or "- (no context provided)")


def _definition_block(driver: Driver, label: str) -> str:
    return f"{label.upper()} DEFINITION:\n{collapse_whitespace(driver.name)}: {collapse_whitespace(driver.description)}"


def _directives_prompt(
    context: Dict[str, str],
    driver: Driver,
    label: str,
    directives: Sequence[InstructionDirective],
) -> str:
    framing = [collapse_whitespace(d.content) for d in directives if d.label in FRAMING_LABELS]
    instructions = "\n".join(
        f"{i}. [{collapse_whitespace(d.label)}] {collapse_whitespace(d.content)}"
        for i, d in enumerate(directives, start=1)
    )
    parts: List[str] = []
    if framing:
        parts.append("\n\n".join(framing))
    parts.append(_context_block(context))
    parts.append(_definition_block(driver, label))
    parts.append("INSTRUCTIONS (follow all of these):\n" + instructions)
    return "\n\n".join(parts)


def _default_prompt(
    context: Dict[str, str],
    driver: Driver,
    label: str,
    output_type: Optional[OutputType],
) -> str:
    role = output_type.role if output_type else _GENERIC_ROLE
    task = output_type.task if output_type else _GENERIC_TASK
    guidelines = output_type.guidelines if output_type else _GENERIC_GUIDELINES
    name = collapse_whitespace(driver.name)
    lower = label.lower()
    lines = [f"- {g.format(driver=name, label=lower)}" for g in guidelines]
    lines.append("- Tailor everything to the specific context provided.")
    return "\n\n".join([
        role,
        _context_block(context),
        "TASK:\n" + task.format(driver=name, label=lower),
        _definition_block(driver, label),
        "GUIDELINES:\n" + "\n".join(lines),
    ])


def build_field_override_block(fields: Sequence[FieldSpec]) -> str:
    lines = []
    for f in fields:
        line = f'- "{f.key}" ({collapse_whitespace(f.label)})'
        if f.type == "table" and f.columns:
            cols = ", ".join(f'"{c.key}" ({collapse_whitespace(c.label)})' for c in f.columns)
            line += f": a table, one object per row with columns {cols}"
        lines.append(line)
    return "\n\nOUTPUT FIELDS:\nEach element must contain exactly these fields:\n" + "\n".join(lines)


def assemble_prompt(
    context: Dict[str, str],
    driver: Driver,
    section_label: Optional[str] = None,
    directives: Optional[Sequence[InstructionDirective]] = None,
    field_overrides: Optional[Sequence[FieldSpec]] = None,
    output_type: Optional[OutputType] = None,
) -> str:
    label = section_label or (output_type.section_label if output_type else DEFAULT_SECTION_LABEL)
    if directives:
        prompt = _directives_prompt(context, driver, label, directives)
    else:
        prompt = _default_prompt(context, driver, label, output_type)
    if field_overrides:
        prompt += build_field_override_block(field_overrides)
    return prompt
