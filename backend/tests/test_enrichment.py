"""Tests for dissection and deeper-question enrichment."""
import httpx
import pytest

from conftest import FakeLLMClient
from digicraft.enrichment import (
    DEEPER_SCHEMA,
    DISSECTION_SCHEMA,
    EnrichmentError,
    deeper_prompt,
    dissection_prompt,
    generate_deeper,
    generate_dissection,
)
from digicraft.generation.section import PromptLog
from digicraft.schemas import DeeperRequest, DissectRequest


DISSECTION = {
    "thinkingFramework": [{"step": 1, "title": "Frame", "description": "Define the scope"}],
    "checklist": [{"item": "Map assets", "description": "Know what you protect", "isRequired": True}],
    "resources": [{"title": "NIST CSF", "type": "Framework", "url": "nist.gov/cyberframework", "description": "Baseline"}],
    "keyInsight": "Scope drives everything",
}
DEEPER = {
    "secondOrder": [{"question": "What breaks first?", "reasoning": "Dependencies"}],
    "thirdOrder": [{"question": "How does culture shift?", "reasoning": "Compounding"}],
}


class TestPrompts:

    def test_dissection_prompt_per_output_type(self):
        req = DissectRequest(item="Is OT segmented?", section="Security", output_type="checklist", context={"role": "CISO"})
        prompt = dissection_prompt(req)
        assert 'The CHECKLIST ITEM to deeply understand:\n"Is OT segmented?"' in prompt
        assert "- Role: CISO" in prompt

    def test_unknown_output_type_uses_question_wording(self):
        prompt = dissection_prompt(DissectRequest(item="X?", output_type="custom"))
        assert "The QUESTION to deeply understand" in prompt

    def test_deeper_prompt(self):
        req = DeeperRequest(original_question="Should we outsource the SOC?", perspective="Operations", context={"industry": "Retail"})
        prompt = deeper_prompt(req)
        assert '"Should we outsource the SOC?"' in prompt
        assert "- Industry: Retail\n- Perspective: Operations" in prompt


class TestGenerate:

    @pytest.mark.asyncio
    async def test_dissection(self):
        client = FakeLLMClient(lambda p, s: DISSECTION)
        log = PromptLog()
        data, usage, model = await generate_dissection(client, DissectRequest(item="Q?"), prompt_log=log)
        assert data.checklist[0].is_required is True
        assert data.key_insight == "Scope drives everything"
        assert usage.total_tokens == 150
        assert model == "gemini-2.5-flash"
        assert client.schemas == [DISSECTION_SCHEMA]
        assert len(log.prompts) == 1

    @pytest.mark.asyncio
    async def test_deeper(self):
        client = FakeLLMClient(lambda p, s: DEEPER)
        data, _, _ = await generate_deeper(client, DeeperRequest(original_question="Q?"))
        assert [q.question for q in data.second_order] == ["What breaks first?"]
        assert client.schemas == [DEEPER_SCHEMA]

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self):
        client = FakeLLMClient(lambda p, s: httpx.ConnectError("down"))
        with pytest.raises(EnrichmentError):
            await generate_dissection(client, DissectRequest(item="Q?"))

    @pytest.mark.asyncio
    async def test_invalid_output_raises(self):
        client = FakeLLMClient(lambda p, s: {"secondOrder": "not a list"})
        with pytest.raises(EnrichmentError, match="invalid output"):
            await generate_deeper(client, DeeperRequest(original_question="Q?"))
