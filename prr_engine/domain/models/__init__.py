"""Domain models. Pure business entities."""

from prr_engine.domain.models.case import (
    Attachment,
    AuditEntry,
    CaseRecord,
    CaseStatus,
    Deadlines,
    Intake,
    IntakeChannel,
    Requester,
    TERMINAL_STATUSES,
    allowed_transitions,
    validate_transition,
)

__all__ = [
    "Attachment",
    "AuditEntry",
    "CaseRecord",
    "CaseStatus",
    "Deadlines",
    "Intake",
    "IntakeChannel",
    "Requester",
    "TERMINAL_STATUSES",
    "allowed_transitions",
    "validate_transition",
]
