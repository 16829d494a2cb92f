from __future__ import annotations
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from .schemas import Usage
from .settings import settings


class LLMError(RuntimeError):
	"""The provider answered, but not with anything usable."""


@dataclass
class LLMReply:
	text: str
	model: str
	usage: Usage = field(default_factory=Usage)


def extract_json_object(text: str) -> Dict[str, Any]:
	try:
		return json.loads(text)
	except Exception:
		pass
	code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
	if code_block:
		try:
			return json.loads(code_block.group(1))
		except Exception:
			pass
	first = text.find("{")
	last = text.rfind("}")
	if first != -1 and last != -1 and last > first:
		try:
			return json.loads(text[first : last + 1])
		except Exception:
			pass
	raise ValueError("LLM did not return valid JSON")


def _gemini_usage(data: Dict[str, Any]) -> Usage:
	meta = data.get("usageMetadata") or {}
	return Usage(
		input_tokens=int(meta.get("promptTokenCount") or 0),
		output_tokens=int(meta.get("candidatesTokenCount") or 0),
		total_tokens=int(meta.get("totalTokenCount") or 0),
	)


def _openrouter_usage(data: Dict[str, Any]) -> Usage:
	meta = data.get("usage") or {}
	return Usage(
		input_tokens=int(meta.get("prompt_tokens") or 0),
		output_tokens=int(meta.get("completion_tokens") or 0),
		total_tokens=int(meta.get("total_tokens") or 0),
	)


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		timeout: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		timeout = timeout or settings.llm_request_timeout_seconds
		self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
		self._fallback_client: Optional[httpx.AsyncClient] = None
		self._fallback_enabled = bool(settings.openrouter_api_key)
		self._openrouter_api_key = settings.openrouter_api_key
		self._openrouter_model = settings.openrouter_model
		self._openrouter_base_url = settings.openrouter_base_url
		self._openrouter_headers = {
			"Authorization": f"Bearer {self._openrouter_api_key}" if self._openrouter_api_key else "",
			"Content-Type": "application/json",
			"HTTP-Referer": settings.openrouter_referer,
			"X-Title": settings.openrouter_title,
		}
		if self._fallback_enabled:
			self._fallback_client = httpx.AsyncClient(timeout=timeout, transport=transport)

	async def generate_json(self, prompt: str, *, response_schema: Optional[Dict[str, Any]] = None) -> LLMReply:
		"""Ask for a JSON answer, constrained to ``response_schema`` when given."""
		generation_config: Dict[str, Any] = {"responseMimeType": "application/json"}
		if response_schema is not None:
			generation_config["responseSchema"] = response_schema
		payload: Dict[str, Any] = {
			"contents": [{"role": "user", "parts": [{"text": prompt}]}],
			"generationConfig": generation_config,
		}
		return await self._post_payload(payload, fallback_prompt=prompt)

	async def _post_payload(self, payload: Dict[str, Any], *, fallback_prompt: Optional[str]) -> LLMReply:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		last_error: Optional[Exception] = None
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPError as http_err:
			last_error = http_err
		if last_error is None:
			try:
				data = r.json()
				text = data["candidates"][0]["content"]["parts"][0]["text"]
				return LLMReply(text=text, model=self.model, usage=_gemini_usage(data))
			except Exception:
				last_error = LLMError(f"Unexpected Gemini response: {r.text[:500]}")
		if not self._fallback_enabled or fallback_prompt is None:
			raise last_error
		return await self._fallback_generate(fallback_prompt, last_error)

	async def aclose(self) -> None:
		await self._client.aclose()
		if self._fallback_client is not None:
			await self._fallback_client.aclose()

	async def _fallback_generate(self, prompt: str, primary_error: Exception) -> LLMReply:
		if not self._fallback_client or not self._openrouter_api_key:
			raise primary_error
		headers = {k: v for k, v in self._openrouter_headers.items() if v}
		payload: Dict[str, Any] = {
			"model": self._openrouter_model,
			"messages": [{"role": "user", "content": prompt}],
			"response_format": {"type": "json_object"},
		}
		try:
			r = await self._fallback_client.post(self._openrouter_base_url, headers=headers, json=payload)
			r.raise_for_status()
			data = r.json()
			text = data["choices"][0]["message"]["content"]
		except Exception as fallback_err:
			raise LLMError(
				f"Gemini primary call failed ({primary_error}); fallback via OpenRouter also failed"
			) from fallback_err
		return LLMReply(text=text, model=self._openrouter_model, usage=_openrouter_usage(data))
