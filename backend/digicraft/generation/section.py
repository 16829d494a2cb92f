from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Type, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, create_model

from ..gemini_client import LLMError, extract_json_object
from ..schemas import Driver, FieldSpec, GeneratedSection, Usage

logger = logging.getLogger(__name__)


class PromptLog:
    """Append-only record of the prompts sent during one request."""

    def __init__(self) -> None:
        self.prompts: List[str] = []

    def record(self, prompt: str) -> None:
        self.prompts.append(prompt)


@dataclass
class SectionResult:
    driver: str
    section: GeneratedSection
    usage: Usage = field(default_factory=Usage)
    model: str = ""


@dataclass
class GenerationError:
    driver: str
    # "transport" (provider unreachable / HTTP error / timeout),
    # "invalid_output" (unparseable or schema-violating reply),
    # "unexpected" (bug caught at the orchestrator boundary)
    kind: str
    message: str
    usage: Usage = field(default_factory=Usage)


SectionOutcome = Union[SectionResult, GenerationError]

_ELEMENT_CONFIG = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


def build_element_model(fields: Sequence[FieldSpec]) -> Type[BaseModel]:
    """Pydantic model for one element: every field a required string,
    table fields a list of row objects. Python attribute names are
    positional so arbitrary field keys never clash with model attributes."""
    definitions: Dict[str, Any] = {}
    for i, f in enumerate(fields):
        if f.type == "table":
            row_defs = {
                f"c_{j}": (str, Field(alias=col.key))
                for j, col in enumerate(f.columns or [])
            }
            row_model = create_model(f"Row_{i}", __config__=_ELEMENT_CONFIG, **row_defs)
            definitions[f"f_{i}"] = (List[row_model], Field(alias=f.key))
        else:
            definitions[f"f_{i}"] = (str, Field(alias=f.key))
    return create_model("Element", __config__=_ELEMENT_CONFIG, **definitions)


def build_section_model(fields: Sequence[FieldSpec]) -> Type[BaseModel]:
    element = build_element_model(fields)
    return create_model(
        "SectionOutput",
        __config__=ConfigDict(populate_by_name=True),
        section_name=(Optional[str], Field(default=None, alias="sectionName")),
        section_description=(Optional[str], Field(default=None, alias="sectionDescription")),
        elements=(List[element], Field(default_factory=list)),
    )


def build_response_schema(fields: Sequence[FieldSpec], section_label: str = "section") -> Dict[str, Any]:
    """Gemini ``responseSchema`` (OpenAPI subset) for one section."""
    properties: Dict[str, Any] = {}
    for f in fields:
        if f.type == "table":
            columns = f.columns or []
            properties[f.key] = {
                "type": "ARRAY",
                "description": f.label,
                "items": {
                    "type": "OBJECT",
                    "properties": {c.key: {"type": "STRING", "description": c.label} for c in columns},
                    "required": [c.key for c in columns],
                },
            }
        else:
            properties[f.key] = {"type": "STRING", "description": f.label}
    keys = [f.key for f in fields]
    label = section_label.lower()
    return {
        "type": "OBJECT",
        "properties": {
            "sectionName": {"type": "STRING", "description": f"The {label} name"},
            "sectionDescription": {"type": "STRING", "description": f"A brief description of this {label}"},
            "elements": {
                "type": "ARRAY",
                "items": {"type": "OBJECT", "properties": properties, "required": keys, "propertyOrdering": keys},
            },
        },
        "required": ["sectionName", "sectionDescription", "elements"],
        "propertyOrdering": ["sectionName", "sectionDescription", "elements"],
    }


class SectionSchema:
    """The resolved field list for one driver plus everything derived from it."""

    def __init__(self, fields: Sequence[FieldSpec], section_label: str = "section", *, record_fields: bool = False) -> None:
        self.fields = list(fields)
        self.record_fields = record_fields
        self.model = build_section_model(self.fields)
        self.response_schema = build_response_schema(self.fields, section_label)

    def parse(self, payload: Any, driver: Driver) -> GeneratedSection:
        if not isinstance(payload, dict):
            raise ValueError("expected a JSON object for the section")
        parsed = self.model.model_validate(payload)
        return GeneratedSection(
            section_name=parsed.section_name or driver.name,
            section_description=parsed.section_description or driver.description,
            elements=[el.model_dump(by_alias=True) for el in parsed.elements],
            resolved_fields=self.fields if self.record_fields else None,
        )


class SectionGenerator:
    def __init__(self, client, *, prompt_log: Optional[PromptLog] = None) -> None:
        self.client = client
        self.prompt_log = prompt_log

    async def generate(self, driver: Driver, prompt: str, schema: SectionSchema) -> SectionOutcome:
        if self.prompt_log is not None:
            self.prompt_log.record(prompt)
        try:
            reply = await self.client.generate_json(prompt, response_schema=schema.response_schema)
        except (httpx.HTTPError, LLMError, asyncio.TimeoutError) as err:
            return GenerationError(driver.name, "transport", str(err) or type(err).__name__)
        try:
            section = schema.parse(extract_json_object(reply.text), driver)
        except ValueError as err:
            # pydantic's ValidationError is a ValueError
            return GenerationError(driver.name, "invalid_output", str(err), usage=reply.usage)
        return SectionResult(driver=driver.name, section=section, usage=reply.usage, model=reply.model)
