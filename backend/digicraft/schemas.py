from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---- Generation inputs ----

FieldType = Literal["short-text", "long-text", "table"]


class TableColumn(WireModel):
    key: str = Field(min_length=1)
    label: str


class FieldSpec(WireModel):
    key: str = Field(min_length=1)
    label: str
    type: FieldType = "long-text"
    columns: Optional[List[TableColumn]] = None
    primary: bool = False

    @model_validator(mode="after")
    def _table_needs_columns(self) -> "FieldSpec":
        if self.type == "table" and not self.columns:
            raise ValueError(f"table field '{self.key}' must define columns")
        return self


class Driver(WireModel):
    name: str = Field(min_length=1)
    description: str = ""
    fields: Optional[List[FieldSpec]] = None


class InstructionDirective(WireModel):
    label: str
    content: str


class GenerationRequest(WireModel):
    context: Dict[str, str]
    section_drivers: Optional[List[Driver]] = None
    instruction_directives: Optional[List[InstructionDirective]] = None
    section_label: Optional[str] = None

    @field_validator("section_drivers")
    @classmethod
    def _unique_driver_names(cls, drivers: Optional[List[Driver]]) -> Optional[List[Driver]]:
        if drivers:
            seen = set()
            for d in drivers:
                if d.name in seen:
                    raise ValueError(f"duplicate section driver name: {d.name}")
                seen.add(d.name)
        return drivers


# ---- Generation outputs ----

class Usage(WireModel):
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


class GeneratedSection(WireModel):
    section_name: str
    section_description: str = ""
    elements: List[Dict[str, Any]] = Field(default_factory=list)
    resolved_fields: Optional[List[FieldSpec]] = None


# ---- Enrichment payloads ----

class ThinkingStep(WireModel):
    step: int
    title: str
    description: str


class ChecklistEntry(WireModel):
    item: str
    description: str
    is_required: bool


class Resource(WireModel):
    title: str
    type: str
    url: str
    description: str


class DissectionData(WireModel):
    thinking_framework: List[ThinkingStep] = Field(default_factory=list)
    checklist: List[ChecklistEntry] = Field(default_factory=list)
    resources: List[Resource] = Field(default_factory=list)
    key_insight: str = ""


class FollowUpQuestion(WireModel):
    question: str
    reasoning: str


class DeeperData(WireModel):
    second_order: List[FollowUpQuestion] = Field(default_factory=list)
    third_order: List[FollowUpQuestion] = Field(default_factory=list)


class DissectRequest(WireModel):
    item: str = Field(min_length=1)
    section: str = ""
    output_type: str = "questions"
    context: Dict[str, str] = Field(default_factory=dict)


class DeeperRequest(WireModel):
    original_question: str = Field(min_length=1)
    perspective: str = ""
    context: Dict[str, str] = Field(default_factory=dict)


# ---- Persisted content ----

AnnotationType = Literal["expert-note", "opinion", "guidance", "tip", "warning", "example"]


class AnnotationInput(WireModel):
    type: AnnotationType = "expert-note"
    title: str = ""
    content: str
    author: str = ""


class Annotation(AnnotationInput):
    id: str
    created_at: str
    updated_at: str


class ProductElement(WireModel):
    fields: Dict[str, Any] = Field(default_factory=dict)
    hidden: bool = False


class ProductSection(WireModel):
    name: str
    description: str = ""
    elements: List[ProductElement] = Field(default_factory=list)
    hidden: bool = False
    resolved_fields: Optional[List[FieldSpec]] = None


class Branding(WireModel):
    accent_color: str = "#6366f1"
    author_name: str = ""
    author_bio: str = ""


class ContextEntry(WireModel):
    label: str
    value: str


class CostEntry(WireModel):
    route: str
    action: str
    model: str
    usage: Usage
    cost: float
    timestamp: str


class ProductCostData(WireModel):
    entries: List[CostEntry] = Field(default_factory=list)
    total_cost: float = 0.0
    total_input_tokens: int = 0
    total_output_tokens: int = 0


class Product(WireModel):
    id: str
    created_at: str
    updated_at: str
    name: str
    description: str = ""
    status: Literal["draft", "published"] = "draft"
    configuration_id: Optional[str] = None
    output_type: str

    # Denormalized context, copied at generation time
    target_audience: str = ""
    industry: str = ""
    service: str = ""
    role: str = ""
    activity: str = ""
    situation: str = ""
    additional_context: List[ContextEntry] = Field(default_factory=list)
    context_fields: Dict[str, str] = Field(default_factory=dict)

    sections: List[ProductSection] = Field(default_factory=list)
    resolved_fields: Optional[List[FieldSpec]] = None

    # Generation inputs, replayed when a section is regenerated
    section_drivers: Optional[List[Driver]] = None
    instruction_directives: Optional[List[InstructionDirective]] = None
    section_label: Optional[str] = None

    dissections: Dict[str, DissectionData] = Field(default_factory=dict)
    deeper_questions: Dict[str, DeeperData] = Field(default_factory=dict)
    annotations: Dict[str, List[Annotation]] = Field(default_factory=dict)

    branding: Branding = Field(default_factory=Branding)
    cost_data: ProductCostData = Field(default_factory=ProductCostData)


class ProductRequest(GenerationRequest):
    name: Optional[str] = None
    description: str = ""
    configuration_id: Optional[str] = None
    branding: Optional[Branding] = None


class ProductPatch(WireModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[Literal["draft", "published"]] = None
    branding: Optional[Branding] = None


class FieldUpdate(WireModel):
    value: str


class SetupConfiguration(WireModel):
    id: Optional[str] = None
    name: str = Field(min_length=1)
    description: str = ""
    output_type: str = "questions"
    context: Dict[str, str] = Field(default_factory=dict)
    section_drivers: Optional[List[Driver]] = None
    instruction_directives: Optional[List[InstructionDirective]] = None
    section_label: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class AILogEntry(WireModel):
    id: str
    timestamp: str
    action: str
    route: str
    request_body: Dict[str, Any] = Field(default_factory=dict)
    prompts: List[str] = Field(default_factory=list)
    model: str = "unknown"
    duration_ms: int = 0
    success: bool = True
    error: Optional[str] = None
    response_preview: Optional[str] = None
    product_id: Optional[str] = None
    product_name: Optional[str] = None
