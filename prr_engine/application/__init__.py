# Application layer: services that orchestrate domain and infrastructure.

from prr_engine.application.case_repository import (
    AuditSink,
    CaseFilter,
    CaseRepository,
)
from prr_engine.application.case_service import CaseService
from prr_engine.application.clock import Clock, SystemClock
from prr_engine.application.exceptions import (
    ApplicationError,
    CaseIdExhaustedError,
    CaseNotFoundError,
    ConcurrencyConflictError,
)

__all__ = [
    "ApplicationError",
    "AuditSink",
    "CaseFilter",
    "CaseIdExhaustedError",
    "CaseNotFoundError",
    "CaseRepository",
    "CaseService",
    "Clock",
    "ConcurrencyConflictError",
    "SystemClock",
]
