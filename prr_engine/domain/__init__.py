"""Domain layer: calendar, models, schemas, validators, exceptions. Pure business logic only."""

from prr_engine.domain.calendar import (
    add_business_days,
    business_days_remaining,
    compute_reminders,
    compute_t10,
    is_business_day,
    normalize_receipt,
)
from prr_engine.domain.exceptions import (
    DomainError,
    DomainValidationError,
    IllegalTransitionError,
    InvalidArgumentError,
)
from prr_engine.domain.models import AuditEntry, CaseRecord, CaseStatus, IntakeChannel
from prr_engine.domain.validators import validate_case, validate_case_create_request

__all__ = [
    "AuditEntry",
    "CaseRecord",
    "CaseStatus",
    "DomainError",
    "DomainValidationError",
    "IllegalTransitionError",
    "IntakeChannel",
    "InvalidArgumentError",
    "add_business_days",
    "business_days_remaining",
    "compute_reminders",
    "compute_t10",
    "is_business_day",
    "normalize_receipt",
    "validate_case",
    "validate_case_create_request",
]
