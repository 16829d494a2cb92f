from __future__ import annotations
import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Tuple

import httpx
from pydantic import BaseModel, ValidationError

from .gemini_client import LLMError, extract_json_object
from .generation.section import PromptLog
from .prompts import collapse_whitespace, format_context
from .schemas import DeeperData, DeeperRequest, DissectionData, DissectRequest, Usage

logger = logging.getLogger(__name__)


class EnrichmentError(Exception):
    pass


def _string(description: str) -> Dict[str, Any]:
    return {"type": "STRING", "description": description}


def _array_of(properties: Dict[str, Any]) -> Dict[str, Any]:
    keys = list(properties)
    return {
        "type": "ARRAY",
        "items": {"type": "OBJECT", "properties": properties, "required": keys, "propertyOrdering": keys},
    }


DISSECTION_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "thinkingFramework": _array_of({
            "step": {"type": "INTEGER", "description": "Step number"},
            "title": _string("Short title for this step"),
            "description": _string("Detailed explanation of what to consider"),
        }),
        "checklist": _array_of({
            "item": _string("Action item"),
            "description": _string("Why this matters and how to do it"),
            "isRequired": {"type": "BOOLEAN", "description": "Must-do vs nice-to-have"},
        }),
        "resources": _array_of({
            "title": _string("Resource name"),
            "type": _string("Blog, Book, Tool, Framework, Report, Course, or Community"),
            "url": _string("Realistic URL or search query"),
            "description": _string("How this resource helps"),
        }),
        "keyInsight": _string("Summary of what getting this right unlocks"),
    },
    "required": ["thinkingFramework", "checklist", "resources", "keyInsight"],
}

DEEPER_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "secondOrder": _array_of({
            "question": _string("A 2nd-order question exploring consequences, dependencies, or implications"),
            "reasoning": _string("The chain of reasoning connecting it to the original question"),
        }),
        "thirdOrder": _array_of({
            "question": _string("A 3rd-order question exploring systemic, long-term, or emergent effects"),
            "reasoning": _string("The reasoning chain from the original question through the 2nd order"),
        }),
    },
    "required": ["secondOrder", "thirdOrder"],
}


_ITEM_PROMPTS: Dict[str, Callable[[str, str], str]] = {
    "questions": lambda item, section: (
        f'The QUESTION to deeply understand:\n"{item}"\n\nFrom the "{section}" perspective.\n\n'
        "Provide:\n"
        "1. THINKING FRAMEWORK: 5-7 structured steps for how to methodically think through this question.\n"
        "2. CHECKLIST: 6-10 actionable items to thoroughly answer this question.\n"
        "3. RESOURCES: 5-8 specific resources.\n"
        "4. KEY INSIGHT: What getting the answer right unlocks strategically."
    ),
    "checklist": lambda item, section: (
        f'The CHECKLIST ITEM to deeply understand:\n"{item}"\n\nFrom the "{section}" checklist dimension.\n\n'
        "Provide:\n"
        "1. THINKING FRAMEWORK: 5-7 steps explaining WHY this item matters, what to watch for, and how to think about it in context.\n"
        "2. CHECKLIST: 6-10 sub-tasks or verification points to ensure this item is completed thoroughly and correctly.\n"
        "3. RESOURCES: 5-8 specific tools, templates, guides, or frameworks that help execute this item well.\n"
        "4. KEY INSIGHT: What doing this item well prevents or enables."
    ),
    "dossier": lambda item, section: (
        f'The BRIEFING to deeply understand:\n"{item}"\n\nFrom the "{section}" intelligence area.\n\n'
        "Provide:\n"
        "1. THINKING FRAMEWORK: 5-7 steps for validating and acting on this intelligence.\n"
        "2. CHECKLIST: 6-10 signals to monitor, sources to verify, and follow-up analyses.\n"
        "3. RESOURCES: 5-8 specific sources for tracking this area.\n"
        "4. KEY INSIGHT: The decision this intelligence should change."
    ),
    "playbook": lambda item, section: (
        f'The PLAY to deeply understand:\n"{item}"\n\nFrom the "{section}" phase.\n\n'
        "Provide:\n"
        "1. THINKING FRAMEWORK: 5-7 steps for adapting this play to the team and constraints at hand.\n"
        "2. CHECKLIST: 6-10 preconditions, execution checks, and completion criteria.\n"
        "3. RESOURCES: 5-8 templates, tools, or guides that make this play faster to run.\n"
        "4. KEY INSIGHT: What running this play well sets up for the next phase."
    ),
    "decision-books": lambda item, section: (
        f'The DECISION to deeply understand:\n"{item}"\n\nFrom the "{section}" decision domain.\n\n'
        "Provide:\n"
        "1. THINKING FRAMEWORK: 5-7 steps for framing, evaluating, and committing to this decision.\n"
        "2. CHECKLIST: 6-10 inputs to gather, people to consult, and reversibility checks.\n"
        "3. RESOURCES: 5-8 decision frameworks, reports, or tools relevant to this choice.\n"
        "4. KEY INSIGHT: What getting this decision right unlocks."
    ),
}


def dissection_prompt(req: DissectRequest) -> str:
    build = _ITEM_PROMPTS.get(req.output_type, _ITEM_PROMPTS["questions"])
    item = collapse_whitespace(req.item)
    section = collapse_whitespace(req.section)
    return (
        "You are a senior consultant and domain expert. A professional needs a deep dive "
        "to fully understand and act on a specific item.\n\n"
        f"CONTEXT:\n{format_context(req.context) or '- (no context provided)'}\n\n"
        f"{build(item, section)}\n\n"
        "For RESOURCES, use real domains and realistic paths (e.g., hbr.org/..., mckinsey.com/..., specific tool websites).\n"
        "Be specific to the context throughout."
    )


def deeper_prompt(req: DeeperRequest) -> str:
    context = format_context(req.context)
    perspective = collapse_whitespace(req.perspective)
    return f"""You are an expert in multi-order thinking and systems analysis.

CONTEXT:
{context or '- (no context provided)'}
- Perspective: {perspective}

ORIGINAL QUESTION:
"{collapse_whitespace(req.original_question)}"

TASK:
Generate 2nd-order and 3rd-order thinking questions derived from the original question above.

2ND-ORDER THINKING:
These questions explore the immediate consequences, dependencies, knock-on effects, and hidden assumptions behind the original question. They ask "And then what?" or "What does this depend on?"
Generate 3 questions.

3RD-ORDER THINKING:
These questions go deeper into systemic ripple effects, long-term emergent outcomes, feedback loops, and unintended consequences. They ask "What happens when those second-order effects compound over time?"
Generate 2-3 questions.

GUIDELINES:
- Every question must be highly specific to the given context.
- Each question must include a reasoning note that traces the chain of thinking from the original question.
- Avoid generic questions. Make them reveal non-obvious insights."""


async def _generate(
    client,
    prompt: str,
    schema: Dict[str, Any],
    model_cls: type,
    *,
    route: str,
    prompt_log: Optional[PromptLog],
) -> Tuple[BaseModel, Usage, str]:
    if prompt_log is not None:
        prompt_log.record(prompt)
    try:
        reply = await client.generate_json(prompt, response_schema=schema)
    except (httpx.HTTPError, LLMError, asyncio.TimeoutError) as err:
        logger.error("[%s] Error: %s", route, err)
        raise EnrichmentError(f"{route} failed: {err}") from err
    try:
        data = model_cls.model_validate(extract_json_object(reply.text))
    except (ValueError, ValidationError) as err:
        logger.error("[%s] Invalid output: %s", route, err)
        raise EnrichmentError(f"{route} returned invalid output") from err
    return data, reply.usage, reply.model


async def generate_dissection(client, req: DissectRequest, *, prompt_log: Optional[PromptLog] = None) -> Tuple[DissectionData, Usage, str]:
    data, usage, model = await _generate(
        client, dissection_prompt(req), DISSECTION_SCHEMA, DissectionData, route="dissect-item", prompt_log=prompt_log,
    )
    logger.info("[dissect-item] Success: %d steps, %d resources", len(data.thinking_framework), len(data.resources))
    return data, usage, model


async def generate_deeper(client, req: DeeperRequest, *, prompt_log: Optional[PromptLog] = None) -> Tuple[DeeperData, Usage, str]:
    data, usage, model = await _generate(
        client, deeper_prompt(req), DEEPER_SCHEMA, DeeperData, route="generate-deeper", prompt_log=prompt_log,
    )
    logger.info("[generate-deeper] Success: %d 2nd-order, %d 3rd-order", len(data.second_order), len(data.third_order))
    return data, usage, model
