"""Tests for prompt assembly."""
from digicraft.catalog import QUESTIONS
from digicraft.prompts import (
    assemble_prompt,
    build_field_override_block,
    format_context,
    humanize_key,
)
from digicraft.schemas import Driver, FieldSpec, InstructionDirective, TableColumn


DRIVER = Driver(name="Risk & Resilience", description="Decisions about risk appetite and continuity")
DIRECTIVES = [
    InstructionDirective(label="Role", content="You are a seasoned advisor."),
    InstructionDirective(label="Task", content="Generate   3 questions."),
    InstructionDirective(label="Specificity", content="Be specific."),
    InstructionDirective(label="Process", content="Think first."),
]


class TestFormatContext:

    def test_keys_sorted_and_humanized(self):
        rendered = format_context({"targetAudience": "CFOs", "industry": "Retail"})
        assert rendered == "- Industry: Retail\n- Target Audience: CFOs"

    def test_empty_and_whitespace_values_omitted(self):
        rendered = format_context({"role": "CISO", "industry": "   ", "service": ""})
        assert rendered == "- Role: CISO"

    def test_internal_whitespace_collapsed(self):
        assert format_context({"situation": "post\n  merger\tintegration"}) == "- Situation: post merger integration"

    def test_humanize_snake_and_camel(self):
        assert humanize_key("company_size") == "Company size"
        assert humanize_key("targetAudience") == "Target Audience"


class TestAssemblePrompt:

    def test_deterministic(self):
        ctx = {"role": "CISO", "industry": "Manufacturing"}
        first = assemble_prompt(ctx, DRIVER, "Perspective", DIRECTIVES)
        second = assemble_prompt(dict(reversed(list(ctx.items()))), DRIVER, "Perspective", DIRECTIVES)
        assert first == second

    def test_directive_layout(self):
        prompt = assemble_prompt({"role": "CISO"}, DRIVER, "Perspective", DIRECTIVES)
        # Framing first, in directive order
        assert prompt.startswith("You are a seasoned advisor.\n\nGenerate 3 questions.\n\nThink first.")
        assert "CONTEXT:\n- Role: CISO" in prompt
        assert "PERSPECTIVE DEFINITION:\nRisk & Resilience: Decisions about risk appetite and continuity" in prompt
        assert prompt.index("CONTEXT:") < prompt.index("PERSPECTIVE DEFINITION:") < prompt.index("INSTRUCTIONS")
        assert "1. [Role] You are a seasoned advisor." in prompt
        assert "3. [Specificity] Be specific." in prompt
        assert "4. [Process] Think first." in prompt

    def test_default_template_without_directives(self):
        prompt = assemble_prompt({"role": "CISO"}, DRIVER, output_type=QUESTIONS)
        assert prompt.startswith(QUESTIONS.role)
        assert 'from the "Risk & Resilience" perspective' in prompt
        assert "GUIDELINES:" in prompt
        assert "INSTRUCTIONS" not in prompt

    def test_empty_directive_list_uses_default_template(self):
        prompt = assemble_prompt({}, DRIVER, "Area", [])
        assert 'for the "Risk & Resilience" area' in prompt
        assert "- (no context provided)" in prompt

    def test_label_defaults_to_output_type(self):
        prompt = assemble_prompt({}, DRIVER, None, DIRECTIVES, output_type=QUESTIONS)
        assert "PERSPECTIVE DEFINITION:" in prompt

    def test_field_overrides_appended(self):
        fields = [
            FieldSpec(key="risk", label="Risk", type="short-text"),
            FieldSpec(
                key="controls",
                label="Controls",
                type="table",
                columns=[TableColumn(key="name", label="Name"), TableColumn(key="owner", label="Owner")],
            ),
        ]
        prompt = assemble_prompt({}, DRIVER, "Area", DIRECTIVES, field_overrides=fields)
        assert prompt.endswith(build_field_override_block(fields))
        assert '- "risk" (Risk)' in prompt
        assert '"name" (Name), "owner" (Owner)' in prompt

    def test_delimiters_not_escaped(self):
        driver = Driver(name='Say "hi"', description="a: b")
        prompt = assemble_prompt({"note": "x: {y}"}, driver, "Area", DIRECTIVES)
        assert 'Say "hi": a: b' in prompt
        assert "- Note: x: {y}" in prompt
