"""Validators for case domain rules. Pure functions, no infrastructure or store access."""

from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from prr_engine.domain.exceptions import DomainValidationError
from prr_engine.domain.identifiers import is_valid_case_id
from prr_engine.domain.models.case import CaseRecord, IntakeChannel
from prr_engine.domain.schemas.case import (
    CaseCreateRequest,
    CaseRecordSchema,
    case_from_schema,
    case_to_schema,
)

# Intake form minimums (after trimming)
REQUESTER_NAME_MIN_LENGTH = 2
REQUEST_TEXT_MIN_LENGTH = 3


def _describe_pydantic_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "case"
    return f"{location}: {first.get('msg', 'invalid value')}"


def validate_non_blank(value: Optional[str], field_name: str) -> None:
    """Raises DomainValidationError if value is None, empty or whitespace only."""
    if value is None or not value.strip():
        raise DomainValidationError(f"{field_name} must not be empty")


def validate_case_invariants(
    record: CaseRecord,
    expected_environment: Optional[str] = None,
    expected_module: Optional[str] = None,
) -> None:
    """Record-level invariants the schema alone cannot express."""
    if not is_valid_case_id(record.case_id):
        raise DomainValidationError(f"caseId has invalid format: {record.case_id!r}")
    validate_non_blank(record.requester.name, "requester.name")
    validate_non_blank(record.intake.request_text, "intake.requestText")
    if not record.audit_log:
        raise DomainValidationError("auditLog must contain at least one entry")
    if record.deadlines.t10 <= record.intake.received_at:
        raise DomainValidationError("deadlines.t10 must be after intake.receivedAt")
    for label, reminder in (
        ("reminderT3", record.deadlines.reminder_t3),
        ("reminderT1", record.deadlines.reminder_t1),
    ):
        if reminder is not None and reminder > record.deadlines.t10:
            raise DomainValidationError(f"deadlines.{label} must not be after deadlines.t10")
    if record.version < 1:
        raise DomainValidationError("version must be >= 1")
    if expected_environment is not None and record.environment != expected_environment:
        raise DomainValidationError(
            f"environment must be {expected_environment!r}, got {record.environment!r}"
        )
    if expected_module is not None and record.module != expected_module:
        raise DomainValidationError(f"module must be {expected_module!r}, got {record.module!r}")


def validate_case(
    candidate: Union[CaseRecord, CaseRecordSchema, Mapping[str, Any]],
    expected_environment: Optional[str] = None,
    expected_module: Optional[str] = None,
) -> CaseRecord:
    """
    Validate a candidate case (storage mapping, schema, or domain record) and
    return the domain CaseRecord. Raises DomainValidationError on any violation.
    """
    try:
        if isinstance(candidate, CaseRecord):
            # Building the schema runs field validation on the dataclass values.
            case_to_schema(candidate)
            record = candidate
        else:
            schema = (
                candidate
                if isinstance(candidate, CaseRecordSchema)
                else CaseRecordSchema.model_validate(candidate)
            )
            record = case_from_schema(schema)
    except ValidationError as e:
        raise DomainValidationError(_describe_pydantic_error(e)) from e
    validate_case_invariants(record, expected_environment, expected_module)
    return record


def validate_case_create_request(request: CaseCreateRequest) -> None:
    """
    Validate intake: name, request text, resident legal notice.
    Raises DomainValidationError on violation.
    """
    if len((request.name or "").strip()) < REQUESTER_NAME_MIN_LENGTH:
        raise DomainValidationError(
            f"name must be at least {REQUESTER_NAME_MIN_LENGTH} characters"
        )
    if len((request.request_text or "").strip()) < REQUEST_TEXT_MIN_LENGTH:
        raise DomainValidationError(
            f"requestText must be at least {REQUEST_TEXT_MIN_LENGTH} characters"
        )
    if request.channel == IntakeChannel.RESIDENT_FORM and request.legal_notice_accepted is not True:
        raise DomainValidationError("legal notice must be accepted for resident submissions")
