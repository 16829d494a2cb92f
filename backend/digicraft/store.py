from __future__ import annotations
import logging
from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from .cleanup import evict_oldest
from .content import new_id, utcnow_iso
from .models import AILogRecord, ConfigurationRecord, ProductRecord
from .schemas import AILogEntry, Product, SetupConfiguration
from .settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T", Product, SetupConfiguration, AILogEntry)


class _JsonStore(Generic[T]):
    """Items serialized as JSON rows, newest first, capped with FIFO eviction."""

    record_cls: type
    schema_cls: Type[T]

    def __init__(self, db: Session, capacity: int) -> None:
        self.db = db
        self.capacity = capacity

    def _columns(self, item: T) -> dict:
        return {}

    def _row(self, item_id: str):
        return self.db.execute(select(self.record_cls).where(self.record_cls.id == item_id)).scalar_one_or_none()

    def all(self) -> List[T]:
        rows = self.db.execute(select(self.record_cls).order_by(self.record_cls.pk.desc())).scalars()
        return [self.schema_cls.model_validate_json(row.payload) for row in rows]

    def get(self, item_id: str) -> Optional[T]:
        row = self._row(item_id)
        return self.schema_cls.model_validate_json(row.payload) if row else None

    def insert(self, item: T) -> T:
        row = self.record_cls(id=item.id, payload=item.model_dump_json(by_alias=True), **self._columns(item))
        self.db.add(row)
        self.db.flush()
        evicted = evict_oldest(self.db, self.record_cls, self.capacity)
        if evicted:
            logger.info("Evicted %d oldest %s rows", evicted, self.record_cls.__tablename__)
        self.db.commit()
        return item

    def update(self, item: T) -> Optional[T]:
        row = self._row(item.id)
        if row is None:
            return None
        row.payload = item.model_dump_json(by_alias=True)
        for name, value in self._columns(item).items():
            setattr(row, name, value)
        self.db.commit()
        return item

    def remove(self, item_id: str) -> bool:
        row = self._row(item_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def clear(self) -> int:
        count = 0
        for row in self.db.execute(select(self.record_cls)).scalars():
            self.db.delete(row)
            count += 1
        self.db.commit()
        return count


class ProductStore(_JsonStore[Product]):
    record_cls = ProductRecord
    schema_cls = Product

    def __init__(self, db: Session, capacity: Optional[int] = None) -> None:
        super().__init__(db, capacity if capacity is not None else settings.max_products)

    def _columns(self, item: Product) -> dict:
        return {"name": item.name, "output_type": item.output_type}


class ConfigurationStore(_JsonStore[SetupConfiguration]):
    record_cls = ConfigurationRecord
    schema_cls = SetupConfiguration

    def __init__(self, db: Session, capacity: Optional[int] = None) -> None:
        super().__init__(db, capacity if capacity is not None else settings.max_configurations)

    def _columns(self, item: SetupConfiguration) -> dict:
        return {"name": item.name}

    def save(self, config: SetupConfiguration) -> SetupConfiguration:
        now = utcnow_iso()
        if config.id and self.get(config.id) is not None:
            config.updated_at = now
            return self.update(config)
        config.id = config.id or new_id("cfg")
        config.created_at = config.created_at or now
        config.updated_at = now
        return self.insert(config)


class AILogStore(_JsonStore[AILogEntry]):
    record_cls = AILogRecord
    schema_cls = AILogEntry

    def __init__(self, db: Session, capacity: Optional[int] = None) -> None:
        super().__init__(db, capacity if capacity is not None else settings.max_log_entries)

    def _columns(self, item: AILogEntry) -> dict:
        return {"route": item.route, "success": item.success}
