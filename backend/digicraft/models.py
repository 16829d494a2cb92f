from __future__ import annotations
from datetime import datetime
from sqlalchemy import Boolean, Column, String, DateTime, Integer, Text
from .db import Base


class ProductRecord(Base):
	__tablename__ = "products"
	# Integer surrogate key gives a stable insertion order for eviction
	pk = Column(Integer, primary_key=True, autoincrement=True)
	id = Column(String(64), unique=True, index=True, nullable=False)
	name = Column(String(256), nullable=False)
	output_type = Column(String(64), index=True, nullable=False)
	payload = Column(Text, nullable=False)  # Product JSON
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class ConfigurationRecord(Base):
	__tablename__ = "configurations"
	pk = Column(Integer, primary_key=True, autoincrement=True)
	id = Column(String(64), unique=True, index=True, nullable=False)
	name = Column(String(256), nullable=False)
	payload = Column(Text, nullable=False)  # SetupConfiguration JSON
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class AILogRecord(Base):
	__tablename__ = "ai_logs"
	pk = Column(Integer, primary_key=True, autoincrement=True)
	id = Column(String(64), unique=True, index=True, nullable=False)
	route = Column(String(128), nullable=False)
	success = Column(Boolean, default=True, nullable=False)
	payload = Column(Text, nullable=False)  # AILogEntry JSON
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
