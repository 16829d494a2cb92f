from __future__ import annotations

import time

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..debug import new_prompt_log, record_ai_log, with_debug_meta, with_usage_meta
from ..dependencies import get_enrich_client
from ..enrichment import EnrichmentError, generate_deeper, generate_dissection
from ..gemini_client import GeminiClient
from ..schemas import DeeperRequest, DissectRequest


router = APIRouter(prefix="/enrich", tags=["enrich"])


@router.post("/dissect")
async def dissect_item(
    req: DissectRequest,
    db: Session = Depends(get_db),
    client: GeminiClient = Depends(get_enrich_client),
):
    prompt_log = new_prompt_log()
    started = time.monotonic()
    try:
        data, usage, model = await generate_dissection(client, req, prompt_log=prompt_log)
    except EnrichmentError as err:
        record_ai_log(
            db, action="Dissect item", route="dissect-item", request_body=req.to_wire(),
            prompt_log=prompt_log, model=client.model, started=started, success=False, error=str(err),
        )
        raise
    body = data.to_wire()
    record_ai_log(
        db, action="Dissect item", route="dissect-item", request_body=req.to_wire(),
        prompt_log=prompt_log, model=model, started=started, response=body,
    )
    with_debug_meta(body, prompt_log, model)
    with_usage_meta(body, usage, model)
    return body


@router.post("/deeper")
async def deeper_questions(
    req: DeeperRequest,
    db: Session = Depends(get_db),
    client: GeminiClient = Depends(get_enrich_client),
):
    prompt_log = new_prompt_log()
    started = time.monotonic()
    try:
        data, usage, model = await generate_deeper(client, req, prompt_log=prompt_log)
    except EnrichmentError as err:
        record_ai_log(
            db, action="Deeper questions", route="generate-deeper", request_body=req.to_wire(),
            prompt_log=prompt_log, model=client.model, started=started, success=False, error=str(err),
        )
        raise
    body = data.to_wire()
    record_ai_log(
        db, action="Deeper questions", route="generate-deeper", request_body=req.to_wire(),
        prompt_log=prompt_log, model=model, started=started, response=body,
    )
    with_debug_meta(body, prompt_log, model)
    with_usage_meta(body, usage, model)
    return body
