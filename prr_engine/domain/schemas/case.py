"""Pydantic schemas for case storage and API payloads. camelCase on the wire, snake_case in Python."""

from datetime import date
from typing import List, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from prr_engine.domain.models.case import (
    Attachment,
    AuditEntry,
    CaseRecord,
    CaseStatus,
    Deadlines,
    Intake,
    IntakeChannel,
    Requester,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _require_text(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be blank")
    return v


# ---------------------------------------------------------------------------
# Storage schemas
# ---------------------------------------------------------------------------

class RequesterSchema(_CamelModel):
    name: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _require_text(v)


class IntakeSchema(_CamelModel):
    received_at: AwareDatetime
    channel: IntakeChannel = IntakeChannel.RESIDENT_FORM
    request_text: str = Field(..., min_length=1)
    legal_notice_accepted: bool = True

    @field_validator("request_text")
    @classmethod
    def request_text_not_blank(cls, v: str) -> str:
        return _require_text(v)


class DeadlinesSchema(_CamelModel):
    t10: AwareDatetime
    reminder_t3: Optional[AwareDatetime] = None
    reminder_t1: Optional[AwareDatetime] = None


class AttachmentSchema(_CamelModel):
    name: str = Field(..., min_length=1)
    type: Optional[str] = None
    size: Optional[int] = Field(None, ge=0)


class AuditEntrySchema(_CamelModel):
    at: AwareDatetime
    actor: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1)
    detail: Optional[str] = None


class CaseRecordSchema(_CamelModel):
    """Storage format of a case. Field-for-field mirror of CaseRecord."""

    case_id: str = Field(..., min_length=1)
    environment: str = Field(..., min_length=1)
    module: str = Field(..., min_length=1)
    status: CaseStatus
    requester: RequesterSchema
    intake: IntakeSchema
    deadlines: DeadlinesSchema
    attachments: List[AttachmentSchema] = Field(default_factory=list)
    audit_log: List[AuditEntrySchema] = Field(..., min_length=1)
    version: int = Field(1, ge=1)


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class CaseCreateRequest(_CamelModel):
    """
    Intake payload from the resident form or staff intake. Either received_at
    (exact timestamp) or received_on (calendar date, pinned to midday UTC) may
    be given; if neither, the clock's now is used.
    """

    name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    request_text: str
    channel: IntakeChannel = IntakeChannel.RESIDENT_FORM
    received_at: Optional[AwareDatetime] = None
    received_on: Optional[date] = None
    legal_notice_accepted: Optional[bool] = None
    attachments: List[AttachmentSchema] = Field(default_factory=list)

    @field_validator("email", "phone", mode="before")
    @classmethod
    def blank_optional_to_none(cls, v):
        return _blank_to_none(v)

    @model_validator(mode="after")
    def single_receipt_source(self) -> "CaseCreateRequest":
        if self.received_at is not None and self.received_on is not None:
            raise ValueError("give receivedAt or receivedOn, not both")
        return self


class RecordActionRequest(_CamelModel):
    action: str = Field(..., min_length=1)
    actor: Optional[str] = None
    detail: Optional[str] = None
    status: Optional[CaseStatus] = None
    expected_version: Optional[int] = Field(None, ge=1)


class RequesterCorrectionRequest(_CamelModel):
    requester: RequesterSchema
    actor: Optional[str] = None
    expected_version: Optional[int] = Field(None, ge=1)


class AttachmentsAddRequest(_CamelModel):
    attachments: List[AttachmentSchema] = Field(..., min_length=1)
    actor: Optional[str] = None
    expected_version: Optional[int] = Field(None, ge=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class CaseResponse(CaseRecordSchema):
    """Stored record plus values derived at read time."""

    business_days_remaining: int
    is_overdue: bool


class DeadlinePreviewResponse(_CamelModel):
    received_at: AwareDatetime
    t10: AwareDatetime
    reminder_t3: AwareDatetime
    reminder_t1: AwareDatetime


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------

def case_to_schema(record: CaseRecord) -> CaseRecordSchema:
    return CaseRecordSchema(
        case_id=record.case_id,
        environment=record.environment,
        module=record.module,
        status=record.status,
        requester=RequesterSchema(
            name=record.requester.name,
            email=record.requester.email,
            phone=record.requester.phone,
        ),
        intake=IntakeSchema(
            received_at=record.intake.received_at,
            channel=record.intake.channel,
            request_text=record.intake.request_text,
            legal_notice_accepted=record.intake.legal_notice_accepted,
        ),
        deadlines=DeadlinesSchema(
            t10=record.deadlines.t10,
            reminder_t3=record.deadlines.reminder_t3,
            reminder_t1=record.deadlines.reminder_t1,
        ),
        attachments=[attachment_to_schema(a) for a in record.attachments],
        audit_log=[
            AuditEntrySchema(at=e.at, actor=e.actor, action=e.action, detail=e.detail)
            for e in record.audit_log
        ],
        version=record.version,
    )


def case_from_schema(schema: CaseRecordSchema) -> CaseRecord:
    return CaseRecord(
        case_id=schema.case_id,
        environment=schema.environment,
        module=schema.module,
        status=schema.status,
        requester=Requester(
            name=schema.requester.name,
            email=schema.requester.email,
            phone=schema.requester.phone,
        ),
        intake=Intake(
            received_at=schema.intake.received_at,
            channel=schema.intake.channel,
            request_text=schema.intake.request_text,
            legal_notice_accepted=schema.intake.legal_notice_accepted,
        ),
        deadlines=Deadlines(
            t10=schema.deadlines.t10,
            reminder_t3=schema.deadlines.reminder_t3,
            reminder_t1=schema.deadlines.reminder_t1,
        ),
        attachments=tuple(attachment_from_schema(a) for a in schema.attachments),
        audit_log=tuple(audit_entry_from_schema(e) for e in schema.audit_log),
        version=schema.version,
    )


def attachment_to_schema(attachment: Attachment) -> AttachmentSchema:
    return AttachmentSchema(name=attachment.name, type=attachment.type, size=attachment.size)


def attachment_from_schema(schema: AttachmentSchema) -> Attachment:
    return Attachment(name=schema.name, type=schema.type, size=schema.size)


def audit_entry_from_schema(schema: AuditEntrySchema) -> AuditEntry:
    return AuditEntry(at=schema.at, actor=schema.actor, action=schema.action, detail=schema.detail)


def audit_entry_to_dict(entry: AuditEntry) -> dict:
    """JSON-ready camelCase dict for mirroring one audit entry."""
    return AuditEntrySchema(
        at=entry.at, actor=entry.actor, action=entry.action, detail=entry.detail
    ).model_dump(mode="json", by_alias=True)


def case_to_dict(record: CaseRecord) -> dict:
    """JSON-ready camelCase dict (storage format)."""
    return case_to_schema(record).model_dump(mode="json", by_alias=True)


def case_to_json(record: CaseRecord) -> str:
    return case_to_schema(record).model_dump_json(by_alias=True)
