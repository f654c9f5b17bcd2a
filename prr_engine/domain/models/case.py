"""Domain model for PRR cases. Pure business semantics. No ORM or infrastructure."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from prr_engine.domain.exceptions import IllegalTransitionError


class CaseStatus(str, Enum):
    """Lifecycle stage of a case. Values are the stage-coded literals stored in the vault."""

    CREATED = "S000_CREATED"
    INTAKE = "S100_INTAKE"
    TIMER_COMPUTE = "S200_TIMER_COMPUTE"
    ASSESSMENT = "S300_ASSESSMENT"
    GATHER = "S400_GATHER"
    PACKAGE = "S600_PACKAGE"
    DELIVERY = "S800_DELIVERY"
    CLOSED = "S900_CLOSED"
    ERROR = "S990_ERROR"


class IntakeChannel(str, Enum):
    RESIDENT_FORM = "RESIDENT_FORM"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    IN_PERSON = "IN_PERSON"
    STAFF = "STAFF"


_PROGRESSION: Tuple[CaseStatus, ...] = (
    CaseStatus.CREATED,
    CaseStatus.INTAKE,
    CaseStatus.TIMER_COMPUTE,
    CaseStatus.ASSESSMENT,
    CaseStatus.GATHER,
    CaseStatus.PACKAGE,
    CaseStatus.DELIVERY,
    CaseStatus.CLOSED,
)

TERMINAL_STATUSES: FrozenSet[CaseStatus] = frozenset({CaseStatus.CLOSED, CaseStatus.ERROR})


def _build_transitions() -> Dict[CaseStatus, FrozenSet[CaseStatus]]:
    # Forward-only: any later stage (skips allowed), plus ERROR from any non-terminal stage.
    table: Dict[CaseStatus, FrozenSet[CaseStatus]] = {}
    for index, status in enumerate(_PROGRESSION):
        if status in TERMINAL_STATUSES:
            table[status] = frozenset()
            continue
        table[status] = frozenset(_PROGRESSION[index + 1:]) | {CaseStatus.ERROR}
    table[CaseStatus.ERROR] = frozenset()
    return table


# Allowed status transitions: from_status -> set of valid next statuses
_STATUS_TRANSITIONS: Dict[CaseStatus, FrozenSet[CaseStatus]] = _build_transitions()


def allowed_transitions(current: CaseStatus) -> FrozenSet[CaseStatus]:
    return _STATUS_TRANSITIONS.get(current, frozenset())


def validate_transition(current: CaseStatus, new: CaseStatus) -> None:
    """Validate that transition from current to new is allowed. Raises if invalid."""
    if new not in allowed_transitions(current):
        raise IllegalTransitionError(
            f"Invalid status transition from {current.value} to {new.value}"
        )


@dataclass(frozen=True)
class Requester:
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class Intake:
    received_at: datetime
    channel: IntakeChannel
    request_text: str
    legal_notice_accepted: bool = True


@dataclass(frozen=True)
class Deadlines:
    """t10 is fixed at intake and never recomputed."""

    t10: datetime
    reminder_t3: Optional[datetime] = None
    reminder_t1: Optional[datetime] = None


@dataclass(frozen=True)
class Attachment:
    """Attachment metadata only; file bytes live in the document library."""

    name: str
    type: Optional[str] = None
    size: Optional[int] = None


@dataclass(frozen=True)
class AuditEntry:
    at: datetime
    actor: str
    action: str
    detail: Optional[str] = None


@dataclass(frozen=True)
class CaseRecord:
    """
    One PRR case. Immutable value: every change produces a new record via
    the with_* helpers, so a stored record is always a full replacement.
    The audit log only ever grows at the tail.
    """

    case_id: str
    environment: str
    module: str
    status: CaseStatus
    requester: Requester
    intake: Intake
    deadlines: Deadlines
    audit_log: Tuple[AuditEntry, ...]
    attachments: Tuple[Attachment, ...] = field(default_factory=tuple)
    version: int = 1

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def last_entry(self) -> Optional[AuditEntry]:
        return self.audit_log[-1] if self.audit_log else None

    def with_entry(self, entry: AuditEntry, status: Optional[CaseStatus] = None) -> "CaseRecord":
        """
        Append entry and optionally move to status. Raises IllegalTransitionError
        if the status change is not allowed; the receiver is left untouched.
        """
        new_status = self.status
        if status is not None:
            validate_transition(self.status, status)
            new_status = status
        return replace(
            self,
            status=new_status,
            audit_log=self.audit_log + (entry,),
            version=self.version + 1,
        )

    def with_requester(self, requester: Requester, entry: AuditEntry) -> "CaseRecord":
        return replace(
            self,
            requester=requester,
            audit_log=self.audit_log + (entry,),
            version=self.version + 1,
        )

    def with_attachments(self, attachments: Tuple[Attachment, ...], entry: AuditEntry) -> "CaseRecord":
        return replace(
            self,
            attachments=self.attachments + tuple(attachments),
            audit_log=self.audit_log + (entry,),
            version=self.version + 1,
        )
