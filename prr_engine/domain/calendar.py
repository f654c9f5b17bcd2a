"""Business-day calendar and statutory deadline computation. Pure functions.

Weekends are the only non-business days unless the caller passes a holiday set.
Massachusetts state holidays are NOT built in; supply them via ``holidays``
(see ``AppSettings.holidays``) for a jurisdiction-correct calendar.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Collection, Optional, Tuple, TypeVar, Union

from prr_engine.domain.exceptions import InvalidArgumentError

T10_BUSINESS_DAYS = 10
REMINDER_T3_BUSINESS_DAYS = 7
REMINDER_T1_BUSINESS_DAYS = 9

# Receipt dates without a time are pinned to midday UTC so day-of-week never drifts across DST.
RECEIPT_NORMALIZATION_TIME = time(12, 0, tzinfo=timezone.utc)

DateLike = TypeVar("DateLike", date, datetime)


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def is_business_day(value: Union[date, datetime], holidays: Optional[Collection[date]] = None) -> bool:
    """False on Saturday/Sunday (by the value's own day-of-week) and on any supplied holiday."""
    day = _as_date(value)
    if day.weekday() >= 5:
        return False
    if holidays and day in holidays:
        return False
    return True


def add_business_days(
    start: DateLike,
    business_days: int,
    holidays: Optional[Collection[date]] = None,
) -> DateLike:
    """
    Advance one calendar day at a time, counting only business days, until
    business_days have been counted. start itself is never counted.
    Returns start unchanged when business_days == 0.
    """
    if isinstance(business_days, bool) or not isinstance(business_days, int):
        raise InvalidArgumentError(f"business_days must be an int, got {type(business_days).__name__}")
    if business_days < 0:
        raise InvalidArgumentError(f"business_days must be >= 0, got {business_days}")
    current = start
    remaining = business_days
    while remaining > 0:
        current = current + timedelta(days=1)
        if is_business_day(current, holidays):
            remaining -= 1
    return current


def compute_t10(receipt: DateLike, holidays: Optional[Collection[date]] = None) -> DateLike:
    """T10 statutory deadline: 10 business days after receipt."""
    return add_business_days(receipt, T10_BUSINESS_DAYS, holidays)


def compute_reminders(
    receipt: DateLike,
    holidays: Optional[Collection[date]] = None,
) -> Tuple[DateLike, DateLike]:
    """Staff reminder dates (T3, T1): three and one business days before T10."""
    return (
        add_business_days(receipt, REMINDER_T3_BUSINESS_DAYS, holidays),
        add_business_days(receipt, REMINDER_T1_BUSINESS_DAYS, holidays),
    )


def normalize_receipt(value: Union[date, datetime]) -> datetime:
    """Bare dates become midday UTC; naive datetimes are taken as UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    return datetime.combine(value, RECEIPT_NORMALIZATION_TIME)


def business_days_remaining(
    now: Union[date, datetime],
    deadline: Union[date, datetime],
    holidays: Optional[Collection[date]] = None,
) -> int:
    """Business days after now up to and including deadline. 0 once the deadline day has passed."""
    current = _as_date(now)
    end = _as_date(deadline)
    count = 0
    while current < end:
        current = current + timedelta(days=1)
        if is_business_day(current, holidays):
            count += 1
    return count
