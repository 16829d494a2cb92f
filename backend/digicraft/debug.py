"""Response metadata and the AI debug log."""
from __future__ import annotations
import json
import logging
import time
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from .content import new_id, utcnow_iso
from .generation.section import PromptLog
from .pricing import usage_meta
from .schemas import AILogEntry, Usage
from .settings import settings
from .store import AILogStore

logger = logging.getLogger(__name__)

_PREVIEW_CHARS = 500


def new_prompt_log() -> Optional[PromptLog]:
    """A prompt log when debug mode is on, otherwise None so nothing is recorded."""
    return PromptLog() if settings.debug_mode else None


def with_debug_meta(body: Dict[str, Any], prompt_log: Optional[PromptLog], model: str) -> Dict[str, Any]:
    if settings.debug_mode and prompt_log is not None:
        body["_meta"] = {"prompts": list(prompt_log.prompts), "model": model}
    return body


def with_usage_meta(body: Dict[str, Any], usage: Usage, model: str) -> Dict[str, Any]:
    if settings.track_usage:
        body["_usage"] = usage_meta(usage, model)
    return body


def record_ai_log(
    db: Session,
    *,
    action: str,
    route: str,
    request_body: Dict[str, Any],
    prompt_log: Optional[PromptLog],
    model: str,
    started: float,
    success: bool = True,
    error: Optional[str] = None,
    response: Any = None,
    product_id: Optional[str] = None,
    product_name: Optional[str] = None,
) -> Optional[AILogEntry]:
    """Append one entry to the AI log. No-op unless debug mode is on.

    ``started`` is a ``time.monotonic()`` reading taken before the first call.
    """
    if not settings.debug_mode:
        return None
    preview = None
    if response is not None:
        preview = response if isinstance(response, str) else json.dumps(response, default=str)
        preview = preview[:_PREVIEW_CHARS]
    entry = AILogEntry(
        id=new_id("log"),
        timestamp=utcnow_iso(),
        action=action,
        route=route,
        request_body=request_body,
        prompts=list(prompt_log.prompts) if prompt_log is not None else [],
        model=model or "unknown",
        duration_ms=int((time.monotonic() - started) * 1000),
        success=success,
        error=error,
        response_preview=preview,
        product_id=product_id,
        product_name=product_name,
    )
    AILogStore(db).insert(entry)
    logger.debug("[%s] logged %s (%dms)", route, action, entry.duration_ms)
    return entry
