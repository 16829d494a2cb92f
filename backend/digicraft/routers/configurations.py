from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..catalog import get_output_type
from ..db import get_db
from ..schemas import SetupConfiguration
from ..store import ConfigurationStore


router = APIRouter(prefix="/configurations", tags=["configurations"])


@router.get("")
def list_configurations(db: Session = Depends(get_db)):
    return [c.to_wire() for c in ConfigurationStore(db).all()]


@router.get("/{config_id}")
def get_configuration(config_id: str, db: Session = Depends(get_db)):
    config = ConfigurationStore(db).get(config_id)
    if config is None:
        raise HTTPException(status_code=404, detail="Configuration not found")
    return config.to_wire()


@router.post("")
def save_configuration(config: SetupConfiguration, db: Session = Depends(get_db)):
    """Create a configuration, or overwrite the one with the same id."""
    if get_output_type(config.output_type) is None:
        raise HTTPException(status_code=422, detail=f"Unknown output type: {config.output_type}")
    return ConfigurationStore(db).save(config).to_wire()


@router.delete("/{config_id}")
def delete_configuration(config_id: str, db: Session = Depends(get_db)):
    if not ConfigurationStore(db).remove(config_id):
        raise HTTPException(status_code=404, detail="Configuration not found")
    return {"deleted": True}
