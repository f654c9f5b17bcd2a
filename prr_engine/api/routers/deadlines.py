"""Deadline preview router: GET /deadlines/preview, as shown on the intake form before submit."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from prr_engine.config.settings import AppSettings, get_settings
from prr_engine.domain.calendar import compute_reminders, compute_t10, normalize_receipt
from prr_engine.domain.schemas.case import DeadlinePreviewResponse

router = APIRouter()


@router.get("/preview", response_model=DeadlinePreviewResponse)
async def preview_deadlines(
    received_on: Annotated[date, Query(alias="receivedAt")],
    settings: Annotated[AppSettings, Depends(get_settings)],
):
    """T10 and reminder dates for a receipt date, without creating a case."""
    received_at = normalize_receipt(received_on)
    holidays = frozenset(settings.holidays)
    reminder_t3, reminder_t1 = compute_reminders(received_at, holidays)
    return DeadlinePreviewResponse(
        received_at=received_at,
        t10=compute_t10(received_at, holidays),
        reminder_t3=reminder_t3,
        reminder_t1=reminder_t1,
    )
