"""Domain schemas. Storage format, request/response and validation."""

from prr_engine.domain.schemas.case import (
    AttachmentsAddRequest,
    AuditEntrySchema,
    CaseCreateRequest,
    CaseRecordSchema,
    CaseResponse,
    DeadlinePreviewResponse,
    RecordActionRequest,
    RequesterCorrectionRequest,
    RequesterSchema,
    case_from_schema,
    case_to_dict,
    case_to_json,
    case_to_schema,
)

__all__ = [
    "AttachmentsAddRequest",
    "AuditEntrySchema",
    "CaseCreateRequest",
    "CaseRecordSchema",
    "CaseResponse",
    "DeadlinePreviewResponse",
    "RecordActionRequest",
    "RequesterCorrectionRequest",
    "RequesterSchema",
    "case_from_schema",
    "case_to_dict",
    "case_to_json",
    "case_to_schema",
]
