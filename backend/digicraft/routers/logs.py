from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..settings import settings
from ..store import AILogStore


router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("")
def list_logs(
    route: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    entries = AILogStore(db).all()
    if route:
        entries = [e for e in entries if e.route == route]
    return {"debugMode": settings.debug_mode, "entries": [e.to_wire() for e in entries[:limit]]}


@router.delete("")
def clear_logs(db: Session = Depends(get_db)):
    return {"deleted": AILogStore(db).clear()}


@router.delete("/{log_id}")
def delete_log(log_id: str, db: Session = Depends(get_db)):
    if not AILogStore(db).remove(log_id):
        raise HTTPException(status_code=404, detail="Log entry not found")
    return {"deleted": True}
