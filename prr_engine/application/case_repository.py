"""Case store and audit sink protocols. Application layer depends on these; infrastructure implements them."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol

from prr_engine.domain.calendar import normalize_receipt
from prr_engine.domain.models.case import AuditEntry, CaseRecord, CaseStatus, IntakeChannel


@dataclass(frozen=True)
class CaseFilter:
    """Criteria for listing cases. Unset fields match everything."""

    status: Optional[CaseStatus] = None
    channel: Optional[IntakeChannel] = None
    due_on_or_before: Optional[datetime] = None
    overdue_as_of: Optional[datetime] = None

    def matches(self, record: CaseRecord) -> bool:
        if self.status is not None and record.status != self.status:
            return False
        if self.channel is not None and record.intake.channel != self.channel:
            return False
        if self.due_on_or_before is not None and record.deadlines.t10 > normalize_receipt(self.due_on_or_before):
            return False
        if self.overdue_as_of is not None:
            if record.is_terminal or record.deadlines.t10 >= normalize_receipt(self.overdue_as_of):
                return False
        return True


def sort_newest_first(records: List[CaseRecord]) -> List[CaseRecord]:
    return sorted(records, key=lambda r: (r.intake.received_at, r.case_id), reverse=True)


class CaseRepository(Protocol):
    """Protocol for persisting and retrieving cases. Writes are full-record replacements."""

    async def get(self, case_id: str) -> Optional[CaseRecord]:
        """Return the case or None if not found."""
        ...

    async def put(self, record: CaseRecord, expected_version: Optional[int]) -> None:
        """
        Store record. expected_version None means insert-only (fails if the id exists);
        otherwise the stored version must equal expected_version.
        Raises ConcurrencyConflictError on mismatch.
        """
        ...

    async def list(self, case_filter: CaseFilter) -> List[CaseRecord]:
        """Return matching cases, newest receipt first."""
        ...


class AuditSink(Protocol):
    """External append-only mirror of case audit entries."""

    async def append(self, case_id: str, entry: AuditEntry) -> None:
        ...
