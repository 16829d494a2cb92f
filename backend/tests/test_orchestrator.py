"""Tests for fan-out/fan-in batch generation."""
import asyncio

import httpx
import pytest

from conftest import QUESTION_KEYS, FakeLLMClient, by_driver, driver_in, section_payload
from digicraft.catalog import BUSINESS_PERSPECTIVES, QUESTIONS
from digicraft.gemini_client import LLMReply
from digicraft.generation.orchestrator import (
    BatchExhaustedError,
    per_driver_fields,
    require_sections,
    run_batch,
    select_field_strategy,
    uniform_fields,
)
from digicraft.generation.section import PromptLog, SectionGenerator
from digicraft.schemas import Driver, FieldSpec, Usage


TEXT = [FieldSpec(key="text", label="Text", type="long-text")]
DRIVERS = [Driver(name=n, description=f"{n} things") for n in ("Alpha", "Beta", "Gamma", "Delta")]


def _text_section(name, count=1):
    return section_payload(name, count, ("text",))


class TestRunBatch:

    @pytest.mark.asyncio
    async def test_driver_order_preserved(self):
        delays = {"Alpha": 0.04, "Beta": 0.0, "Gamma": 0.02, "Delta": 0.01}

        async def respond(prompt, schema):
            name = driver_in(prompt)
            await asyncio.sleep(delays[name])
            return _text_section(name)

        batch = await run_batch(SectionGenerator(FakeLLMClient(respond)), DRIVERS, {}, "Area", default_fields=TEXT)
        assert [s.section_name for s in batch.sections] == ["Alpha", "Beta", "Gamma", "Delta"]

    @pytest.mark.asyncio
    async def test_failure_isolated(self):
        responder = by_driver({
            "Alpha": _text_section("Alpha"),
            "Beta": httpx.ReadTimeout("slow"),
            "Gamma": _text_section("Gamma", 2),
            "Delta": "garbage",
        })
        batch = await run_batch(SectionGenerator(FakeLLMClient(responder)), DRIVERS, {}, "Area", default_fields=TEXT)
        assert [s.section_name for s in batch.sections] == ["Alpha", "Gamma"]
        assert batch.attempted == 4
        assert {f.driver: f.kind for f in batch.failures} == {"Beta": "transport", "Delta": "invalid_output"}
        assert batch.empties == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing", range(5))
    async def test_any_single_failure_keeps_the_rest(self, failing):
        drivers = DRIVERS + [Driver(name="Epsilon", description="Epsilon things")]
        names = [d.name for d in drivers]
        responder = by_driver(
            {n: _text_section(n) for n in names if n != names[failing]},
            default=httpx.ConnectError("down"),
        )
        batch = await run_batch(SectionGenerator(FakeLLMClient(responder)), drivers, {}, "Area", default_fields=TEXT)
        assert [s.section_name for s in batch.sections] == names[:failing] + names[failing + 1:]
        assert [f.driver for f in batch.failures] == [names[failing]]
        assert batch.attempted == 5

    @pytest.mark.asyncio
    async def test_unexpected_exception_contained(self):
        responder = by_driver({"Alpha": RuntimeError("bug"), "Beta": _text_section("Beta")})
        batch = await run_batch(SectionGenerator(FakeLLMClient(responder)), DRIVERS[:2], {}, "Area", default_fields=TEXT)
        assert [s.section_name for s in batch.sections] == ["Beta"]
        assert batch.failures[0].kind == "unexpected"

    @pytest.mark.asyncio
    async def test_all_empty_or_failed(self):
        responder = by_driver({"Alpha": LLMReply(text="{}", model="m")}, default=httpx.ConnectError("down"))
        batch = await run_batch(SectionGenerator(FakeLLMClient(responder)), DRIVERS, {}, "Area", default_fields=TEXT)
        assert batch.sections == []
        assert batch.empties == ["Alpha"]
        assert len(batch.failures) == 3
        with pytest.raises(BatchExhaustedError) as exc:
            require_sections(batch)
        assert "0 of 4" in str(exc.value)
        assert exc.value.attempted == 4

    @pytest.mark.asyncio
    async def test_usage_summed_including_failures(self):
        responder = by_driver({
            "Alpha": LLMReply(text='{"elements": [{"text": "a"}]}', model="m", usage=Usage(input_tokens=10, output_tokens=20, total_tokens=30)),
            "Beta": LLMReply(text='{"elements": []}', model="m", usage=Usage(input_tokens=5, output_tokens=5, total_tokens=10)),
            "Gamma": httpx.ConnectError("down"),
        })
        batch = await run_batch(SectionGenerator(FakeLLMClient(responder)), DRIVERS[:3], {}, "Area", default_fields=TEXT)
        assert batch.usage == Usage(input_tokens=15, output_tokens=25, total_tokens=40)
        assert batch.relevant == 1

    @pytest.mark.asyncio
    async def test_prompt_log_collects_every_prompt(self):
        log = PromptLog()
        client = FakeLLMClient()
        await run_batch(SectionGenerator(client, prompt_log=log), DRIVERS, {"role": "CTO"}, "Area", default_fields=TEXT)
        assert sorted(driver_in(p) for p in log.prompts) == sorted(d.name for d in DRIVERS)

    @pytest.mark.asyncio
    async def test_uniform_fields_output(self):
        client = FakeLLMClient(by_driver({"Alpha": _text_section("Alpha")}))
        batch = await run_batch(SectionGenerator(client), DRIVERS[:2], {}, "Area", default_fields=TEXT)
        assert batch.to_wire() == {
            "sections": [{"sectionName": "Alpha", "sectionDescription": "desc", "elements": [{"text": "Alpha text 0"}]}],
        }
        assert all("OUTPUT FIELDS" not in p for p in client.prompts)

    @pytest.mark.asyncio
    async def test_per_driver_fields(self):
        custom = Driver(
            name="Custom",
            description="Own fields",
            fields=[FieldSpec(key="risk", label="Risk", type="short-text")],
        )
        client = FakeLLMClient(by_driver({
            "Alpha": _text_section("Alpha"),
            "Custom": section_payload("Custom", 2, ("risk",)),
        }))
        batch = await run_batch(SectionGenerator(client), [DRIVERS[0], custom], {}, "Area", default_fields=TEXT)
        assert batch.per_driver_fields is True
        wire = batch.to_wire()
        assert wire["_perDriverFields"] is True
        assert wire["sections"][0]["resolvedFields"][0]["key"] == "text"
        assert wire["sections"][1]["resolvedFields"][0]["key"] == "risk"
        custom_prompt = next(p for p in client.prompts if driver_in(p) == "Custom")
        alpha_prompt = next(p for p in client.prompts if driver_in(p) == "Alpha")
        assert '- "risk" (Risk)' in custom_prompt
        assert "OUTPUT FIELDS" not in alpha_prompt

    def test_strategy_selection(self):
        assert select_field_strategy(DRIVERS) is uniform_fields
        custom = Driver(name="X", fields=TEXT)
        assert select_field_strategy([*DRIVERS, custom]) is per_driver_fields
        assert per_driver_fields(DRIVERS[0], TEXT) == TEXT


class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_two_of_five_perspectives(self):
        drivers = BUSINESS_PERSPECTIVES[:5]
        relevant = {drivers[1].name, drivers[3].name}
        client = FakeLLMClient(by_driver({
            name: section_payload(name, 3, QUESTION_KEYS) for name in relevant
        }))
        batch = await run_batch(
            SectionGenerator(client),
            drivers,
            {"role": "CISO", "industry": "Manufacturing"},
            directives=QUESTIONS.directives,
            output_type=QUESTIONS,
        )
        assert batch.relevant == 2
        assert batch.attempted == 5
        assert [s.section_name for s in batch.sections] == [drivers[1].name, drivers[3].name]
        assert sum(len(s.elements) for s in batch.sections) == 6
        assert len(batch.empties) == 3
        assert all("- Industry: Manufacturing\n- Role: CISO" in p for p in client.prompts)
