"""Cases API router: intake, lifecycle actions, corrections, listing, packet export."""

from datetime import date, datetime, time, timezone
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from prr_engine.api.dependencies import get_actor, get_case_service
from prr_engine.application.case_repository import CaseFilter
from prr_engine.application.case_service import DEFAULT_STAFF_ACTOR, CaseService
from prr_engine.domain.models.case import CaseRecord, CaseStatus, IntakeChannel
from prr_engine.domain.schemas.case import (
    AttachmentsAddRequest,
    CaseCreateRequest,
    CaseResponse,
    RecordActionRequest,
    RequesterCorrectionRequest,
    attachment_from_schema,
    case_to_schema,
)

router = APIRouter()


def _to_response(record: CaseRecord, service: CaseService) -> CaseResponse:
    return CaseResponse.model_validate(
        {
            **case_to_schema(record).model_dump(),
            "business_days_remaining": service.business_days_remaining(record),
            "is_overdue": service.is_overdue(record),
        }
    )


def _staff_actor(body_actor: Optional[str], header_actor: Optional[str]) -> str:
    return (body_actor or "").strip() or header_actor or DEFAULT_STAFF_ACTOR


@router.post("/", response_model=CaseResponse, status_code=201)
async def create_case(
    body: CaseCreateRequest,
    actor: Annotated[Optional[str], Depends(get_actor)] = None,
    case_service: Annotated[CaseService, Depends(get_case_service)] = ...,
):
    """Create a case from a resident submission or staff intake."""
    record = await case_service.create_case(body, actor=actor)
    return _to_response(record, case_service)


@router.get("/", response_model=List[CaseResponse])
async def list_cases(
    status: Optional[CaseStatus] = None,
    channel: Optional[IntakeChannel] = None,
    due_on_or_before: Annotated[Optional[date], Query(alias="dueOnOrBefore")] = None,
    overdue: bool = False,
    case_service: Annotated[CaseService, Depends(get_case_service)] = ...,
):
    """List cases, newest receipt first."""
    case_filter = CaseFilter(
        status=status,
        channel=channel,
        due_on_or_before=(
            datetime.combine(due_on_or_before, time.max, tzinfo=timezone.utc)
            if due_on_or_before
            else None
        ),
        overdue_as_of=case_service.now() if overdue else None,
    )
    records = await case_service.list_cases(case_filter)
    return [_to_response(r, case_service) for r in records]


@router.get("/{case_id}", response_model=CaseResponse)
async def get_case(
    case_id: str,
    case_service: Annotated[CaseService, Depends(get_case_service)] = ...,
):
    record = await case_service.get_case(case_id)
    return _to_response(record, case_service)


@router.post("/{case_id}/actions", response_model=CaseResponse)
async def record_action(
    case_id: str,
    body: RecordActionRequest,
    actor: Annotated[Optional[str], Depends(get_actor)] = None,
    case_service: Annotated[CaseService, Depends(get_case_service)] = ...,
):
    """Append an audit entry, optionally advancing the status."""
    record = await case_service.record_action(
        case_id,
        actor=_staff_actor(body.actor, actor),
        action=body.action,
        detail=body.detail,
        status=body.status,
        expected_version=body.expected_version,
    )
    return _to_response(record, case_service)


@router.patch("/{case_id}/requester", response_model=CaseResponse)
async def correct_requester(
    case_id: str,
    body: RequesterCorrectionRequest,
    actor: Annotated[Optional[str], Depends(get_actor)] = None,
    case_service: Annotated[CaseService, Depends(get_case_service)] = ...,
):
    record = await case_service.correct_requester(
        case_id,
        actor=_staff_actor(body.actor, actor),
        requester=body.requester,
        expected_version=body.expected_version,
    )
    return _to_response(record, case_service)


@router.post("/{case_id}/attachments", response_model=CaseResponse)
async def add_attachments(
    case_id: str,
    body: AttachmentsAddRequest,
    actor: Annotated[Optional[str], Depends(get_actor)] = None,
    case_service: Annotated[CaseService, Depends(get_case_service)] = ...,
):
    record = await case_service.add_attachments(
        case_id,
        actor=_staff_actor(body.actor, actor),
        attachments=[attachment_from_schema(a) for a in body.attachments],
        expected_version=body.expected_version,
    )
    return _to_response(record, case_service)


@router.get("/{case_id}/packet", response_class=PlainTextResponse)
async def get_packet(
    case_id: str,
    case_service: Annotated[CaseService, Depends(get_case_service)] = ...,
):
    """Markdown case packet for download or archiving."""
    packet = await case_service.render_packet(case_id)
    return PlainTextResponse(
        packet.content,
        media_type="text/markdown; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{packet.filename}"',
            "X-Archive-Path": packet.archive_path,
        },
    )
