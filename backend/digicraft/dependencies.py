from __future__ import annotations
from typing import AsyncIterator

from fastapi import HTTPException

from .gemini_client import GeminiClient
from .settings import settings


def _open_client(model: str | None = None) -> GeminiClient:
	if not settings.gemini_api_key:
		raise HTTPException(status_code=503, detail="GEMINI_API_KEY is not configured")
	return GeminiClient(model=model)


async def get_llm_client() -> AsyncIterator[GeminiClient]:
	client = _open_client()
	try:
		yield client
	finally:
		await client.aclose()


async def get_enrich_client() -> AsyncIterator[GeminiClient]:
	# Enrichment may run on a cheaper model
	client = _open_client(settings.gemini_model_enrich)
	try:
		yield client
	finally:
		await client.aclose()
