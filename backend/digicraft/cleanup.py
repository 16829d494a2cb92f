from __future__ import annotations
from sqlalchemy import delete, select
from sqlalchemy.orm import Session


def evict_oldest(db: Session, model, keep: int) -> int:
	"""Delete all but the ``keep`` most recently inserted rows of ``model``."""
	if keep < 0:
		keep = 0
	cutoff = db.execute(
		select(model.pk).order_by(model.pk.desc()).offset(keep).limit(1)
	).scalar_one_or_none()
	if cutoff is None:
		return 0
	res = db.execute(delete(model).where(model.pk <= cutoff))
	return res.rowcount or 0
