# prr_engine/infrastructure/database/models.py

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from prr_engine.infrastructure.database.session import Base


class CaseRow(Base):
    """One row per case. document holds the full storage-format record; other columns are for querying."""

    __tablename__ = "prr_cases"

    case_id = Column(String(32), primary_key=True)
    environment = Column(String, nullable=False)
    module = Column(String, nullable=False)
    status = Column(String, nullable=False, index=True)
    channel = Column(String, nullable=False, index=True)
    received_at = Column(DateTime(timezone=True), nullable=False, index=True)
    t10 = Column(DateTime(timezone=True), nullable=False, index=True)
    version = Column(Integer, nullable=False)
    document = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class AuditRow(Base):
    """Append-only audit mirror. Rows are inserted, never updated."""

    __tablename__ = "prr_case_audit"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(String(32), nullable=False, index=True)
    at = Column(DateTime(timezone=True), nullable=False)
    actor = Column(String, nullable=False)
    action = Column(String, nullable=False)
    detail = Column(Text, nullable=True)
