"""Tests for the product content model and curation operations."""
import pytest

from digicraft import content
from digicraft.schemas import (
    AnnotationInput,
    DeeperData,
    DissectionData,
    FieldSpec,
    FollowUpQuestion,
    GeneratedSection,
)
from digicraft.pricing import cost_entry
from digicraft.schemas import Usage


def _sections():
    return [
        GeneratedSection(
            section_name="Finance",
            section_description="Money",
            elements=[{"question": "Q1?", "relevance": "R1"}, {"question": "Q2?", "relevance": "R2"}],
        ),
        GeneratedSection(
            section_name="People",
            section_description="Teams",
            elements=[{"question": "Q3?", "relevance": "R3"}],
        ),
    ]


@pytest.fixture
def product():
    return content.build_product(
        "questions",
        _sections(),
        {"role": "CISO", "industry": "Manufacturing", "companySize": "500", "situation": "  "},
        name="Security review",
        resolved_fields=[FieldSpec(key="question", label="Question", primary=True)],
    )


class TestBuildProduct:

    def test_context_denormalized(self, product):
        assert product.role == "CISO"
        assert product.industry == "Manufacturing"
        assert product.situation == ""
        assert [(e.label, e.value) for e in product.additional_context] == [("Company Size", "500")]
        assert product.context_fields == {"role": "CISO", "industry": "Manufacturing", "companySize": "500"}
        assert product.status == "draft"

    def test_sections_copied(self, product):
        assert [s.name for s in product.sections] == ["Finance", "People"]
        assert product.sections[0].elements[1].fields == {"question": "Q2?", "relevance": "R2"}
        assert not any(el.hidden for s in product.sections for el in s.elements)

    def test_refuses_empty_batch(self):
        with pytest.raises(ValueError):
            content.build_product("questions", [], {}, name="Nothing")

    def test_ids_prefixed(self, product):
        assert product.id.startswith("prod-")

    def test_context_record_round_trip(self, product):
        assert content.context_record(product) == product.context_fields


class TestKeys:

    def test_key_formats(self):
        assert content.section_key(2) == "section-2"
        assert content.element_key(1, 3) == "1-3"
        assert content.second_order_key(1, 3, 0) == "1-3-2-0"
        assert content.third_order_key(1, 3, 2) == "1-3-3-2"

    def test_split_key(self):
        assert content.split_key("section-4") == (4, None, None, None)
        assert content.split_key("0-1") == (0, 1, None, None)
        assert content.split_key("0-1-3-2") == (0, 1, 3, 2)

    def test_malformed_key(self, product):
        with pytest.raises(KeyError):
            content.check_key(product, "finance-0")

    def test_out_of_range(self, product):
        with pytest.raises(IndexError):
            content.check_key(product, "1-5")
        with pytest.raises(IndexError):
            content.check_key(product, "section-9")

    def test_follow_up_key_needs_deeper_data(self, product):
        with pytest.raises(KeyError):
            content.check_key(product, "0-0-2-0")


class TestCuration:

    def test_toggle_element_round_trip(self, product):
        assert content.toggle_element_visibility(product, 0, 1).hidden is True
        assert content.toggle_element_visibility(product, 0, 1).hidden is False

    def test_toggle_section(self, product):
        content.toggle_section_visibility(product, 1)
        visible = content.visible_sections(product)
        assert [s.name for _, s, _ in visible] == ["Finance"]

    def test_visible_sections_keep_indices(self, product):
        content.toggle_element_visibility(product, 0, 0)
        visible = content.visible_sections(product)
        assert [e_index for e_index, _ in visible[0][2]] == [1]

    def test_update_field_accepts_empty(self, product):
        content.update_element_field(product, 0, 0, "relevance", "")
        assert product.sections[0].elements[0].fields["relevance"] == ""

    def test_update_field_out_of_range(self, product):
        with pytest.raises(IndexError):
            content.update_element_field(product, 5, 0, "question", "x")

    def test_annotation_ids_unique(self, product):
        ids = {
            content.add_annotation(product, "0-0", AnnotationInput(content=f"note {i}")).id
            for i in range(25)
        }
        assert len(ids) == 25
        assert len(product.annotations["0-0"]) == 25

    def test_update_annotation(self, product):
        ann = content.add_annotation(product, "section-0", AnnotationInput(type="tip", content="old"))
        ann = ann.model_copy(update={"updated_at": "2000-01-01T00:00:00+00:00"})
        product.annotations["section-0"] = [ann]
        product.updated_at = ann.updated_at
        updated = content.update_annotation(product, "section-0", ann.id, AnnotationInput(type="warning", content="new"))
        assert updated.id == ann.id
        assert updated.created_at == ann.created_at
        assert updated.updated_at > ann.updated_at
        assert product.annotations["section-0"][0].content == "new"
        assert product.updated_at > ann.updated_at
        assert content.update_annotation(product, "section-0", "ann-missing", AnnotationInput(content="x")) is None

    def test_delete_annotation(self, product):
        ann = content.add_annotation(product, "0-1", AnnotationInput(content="bye"))
        assert content.delete_annotation(product, "0-1", ann.id) is True
        assert "0-1" not in product.annotations

    def test_delete_unknown_annotation_is_noop(self, product):
        ann = content.add_annotation(product, "0-1", AnnotationInput(content="stay"))
        before = product.model_dump()
        assert content.delete_annotation(product, "0-1", "ann-unknown") is False
        assert content.delete_annotation(product, "1-0", ann.id) is False
        assert product.model_dump() == before

    def test_annotation_on_bad_key(self, product):
        with pytest.raises(IndexError):
            content.add_annotation(product, "3-0", AnnotationInput(content="x"))

    def test_attach_deeper_clears_stale_follow_up_dissections(self, product):
        deeper = DeeperData(
            second_order=[FollowUpQuestion(question="Then?", reasoning="r")],
            third_order=[FollowUpQuestion(question="Long term?", reasoning="r")],
        )
        content.attach_deeper(product, 0, 0, deeper)
        content.attach_dissection(product, "0-0-2-0", DissectionData(key_insight="old"))
        content.attach_dissection(product, "0-0", DissectionData(key_insight="keep"))
        content.attach_deeper(product, 0, 0, deeper)
        assert "0-0-2-0" not in product.dissections
        assert product.dissections["0-0"].key_insight == "keep"

    def test_replace_section(self, product):
        content.toggle_section_visibility(product, 0)
        content.add_annotation(product, "0-0", AnnotationInput(content="gone"))
        content.add_annotation(product, "section-0", AnnotationInput(content="gone"))
        content.add_annotation(product, "1-0", AnnotationInput(content="kept"))
        content.attach_dissection(product, "0-1", DissectionData(key_insight="gone"))
        fresh = GeneratedSection(section_name="Finance", section_description="New", elements=[{"question": "N?"}])
        section = content.replace_section(product, 0, fresh)
        assert section.hidden is True
        assert product.sections[0].elements[0].fields == {"question": "N?"}
        assert list(product.annotations) == ["1-0"]
        assert product.dissections == {}

    def test_record_cost(self, product):
        content.record_cost(product, cost_entry("generate-questions", "Generate", "gemini-2.5-flash", Usage(input_tokens=1000, output_tokens=500, total_tokens=1500)))
        content.record_cost(product, cost_entry("dissect-item", "Dissect", "unknown-model", Usage(input_tokens=10, output_tokens=5, total_tokens=15)))
        assert len(product.cost_data.entries) == 2
        assert product.cost_data.total_input_tokens == 1010
        assert product.cost_data.total_output_tokens == 505
        assert product.cost_data.total_cost == pytest.approx(0.00155)


class TestDisplayHelpers:

    def test_primary_field(self, product):
        assert content.primary_field_key(product, 0) == "question"
        assert content.element_primary(product, 1, 0) == "Q3?"

    def test_primary_falls_back_to_first_string(self, product):
        product.resolved_fields = None
        product.sections[0].elements[0].fields = {"relevance": "R", "question": ""}
        assert content.element_primary(product, 0, 0) == "R"
