"""DB-backed case store. Persists cases to the prr_cases table with a version column for compare-and-set."""

import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from prr_engine.application.case_repository import CaseFilter, sort_newest_first
from prr_engine.application.exceptions import ConcurrencyConflictError
from prr_engine.domain.exceptions import DomainValidationError
from prr_engine.domain.models.case import AuditEntry, CaseRecord
from prr_engine.domain.schemas.case import case_to_dict
from prr_engine.domain.validators.case_validator import validate_case
from prr_engine.infrastructure.database.models import AuditRow, CaseRow

logger = logging.getLogger(__name__)


def _columns(record: CaseRecord) -> dict:
    return {
        "environment": record.environment,
        "module": record.module,
        "status": record.status.value,
        "channel": record.intake.channel.value,
        "received_at": record.intake.received_at,
        "t10": record.deadlines.t10,
        "version": record.version,
        "document": case_to_dict(record),
    }


class DbCaseRepository:
    """Implements CaseRepository on SQLAlchemy async. Loads are re-validated from the stored document."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, case_id: str) -> Optional[CaseRecord]:
        row = await self._session.get(CaseRow, case_id)
        if row is None:
            return None
        return validate_case(row.document)

    async def put(self, record: CaseRecord, expected_version: Optional[int]) -> None:
        if expected_version is None:
            self._session.add(CaseRow(case_id=record.case_id, **_columns(record)))
            try:
                await self._session.commit()
            except IntegrityError as e:
                await self._session.rollback()
                raise ConcurrencyConflictError(f"Case {record.case_id} already exists") from e
            return

        stmt = (
            update(CaseRow)
            .where(CaseRow.case_id == record.case_id, CaseRow.version == expected_version)
            .values(**_columns(record))
        )
        result = await self._session.execute(stmt)
        if result.rowcount != 1:
            await self._session.rollback()
            raise ConcurrencyConflictError(
                f"Case {record.case_id} changed since version {expected_version}"
            )
        await self._session.commit()

    async def list(self, case_filter: CaseFilter) -> List[CaseRecord]:
        stmt = select(CaseRow).order_by(CaseRow.received_at.desc())
        if case_filter.status is not None:
            stmt = stmt.where(CaseRow.status == case_filter.status.value)
        if case_filter.channel is not None:
            stmt = stmt.where(CaseRow.channel == case_filter.channel.value)
        result = await self._session.execute(stmt)
        records: List[CaseRecord] = []
        for row in result.scalars().all():
            try:
                records.append(validate_case(row.document))
            except DomainValidationError as e:
                logger.error(
                    "case_document_invalid", extra={"case_id": row.case_id, "error": e.message}
                )
        return sort_newest_first([r for r in records if case_filter.matches(r)])


class DbAuditSink:
    """Implements AuditSink as insert-only rows."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, case_id: str, entry: AuditEntry) -> None:
        self._session.add(
            AuditRow(
                case_id=case_id,
                at=entry.at,
                actor=entry.actor,
                action=entry.action,
                detail=entry.detail,
            )
        )
        await self._session.commit()
