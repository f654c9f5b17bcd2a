"""Shared fixtures: fixed clock, in-memory case store, in-memory Redis, case factory."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from prr_engine.application.case_repository import CaseFilter, sort_newest_first
from prr_engine.application.exceptions import ConcurrencyConflictError
from prr_engine.config.settings import AppSettings
from prr_engine.domain.models.case import (
    AuditEntry,
    CaseRecord,
    CaseStatus,
    Deadlines,
    Intake,
    IntakeChannel,
    Requester,
)

# Monday
MONDAY_RECEIPT = datetime(2026, 2, 2, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> None:
        self._now = self._now + timedelta(**kwargs)

    def set(self, now: datetime) -> None:
        self._now = now


class InMemoryCaseRepository:
    """In-memory CaseRepository with the same version semantics as the real stores."""

    def __init__(self) -> None:
        self._records: Dict[str, CaseRecord] = {}
        self.put_calls = 0

    async def get(self, case_id: str) -> Optional[CaseRecord]:
        return self._records.get(case_id)

    async def put(self, record: CaseRecord, expected_version: Optional[int]) -> None:
        self.put_calls += 1
        existing = self._records.get(record.case_id)
        if expected_version is None and existing is not None:
            raise ConcurrencyConflictError(f"Case {record.case_id} already exists")
        if expected_version is not None and (existing is None or existing.version != expected_version):
            raise ConcurrencyConflictError(f"Case {record.case_id} changed")
        self._records[record.case_id] = record

    async def list(self, case_filter: CaseFilter) -> List[CaseRecord]:
        return sort_newest_first([r for r in self._records.values() if case_filter.matches(r)])


class FakeRedis:
    """In-memory stand-in for RedisClient."""

    def __init__(self) -> None:
        self._store: Dict[str, str] = {}
        self._zsets: Dict[str, Dict[str, float]] = {}
        self._lists: Dict[str, List[str]] = {}

    async def get(self, key: str):
        return self._store.get(key)

    async def set(self, key: str, value: str) -> None:
        self._store[key] = value

    async def compare_and_set(
        self, key, version_key, index_key, value, expected_version, new_version, index_member, index_score
    ) -> bool:
        current = self._store.get(version_key)
        if expected_version is None:
            if current is not None:
                return False
        elif current != str(expected_version):
            return False
        self._store[key] = value
        self._store[version_key] = str(new_version)
        self._zsets.setdefault(index_key, {})[index_member] = index_score
        return True

    async def zrevrange(self, key: str, start: int = 0, end: int = -1):
        members = sorted(self._zsets.get(key, {}).items(), key=lambda kv: kv[1], reverse=True)
        names = [m for m, _ in members]
        return names[start:] if end == -1 else names[start:end + 1]

    async def rpush(self, key: str, value: str) -> int:
        self._lists.setdefault(key, []).append(value)
        return len(self._lists[key])

    async def lrange(self, key: str, start: int = 0, end: int = -1):
        items = self._lists.get(key, [])
        return items[start:] if end == -1 else items[start:end + 1]


def build_case(**overrides) -> CaseRecord:
    values = dict(
        case_id="PRR-2026-7KQ2",
        environment="PHILLIPSTON",
        module="PRR",
        status=CaseStatus.INTAKE,
        requester=Requester(name="Jane Resident", email="jane@phillipston.org", phone="978-555-0100"),
        intake=Intake(
            received_at=MONDAY_RECEIPT,
            channel=IntakeChannel.RESIDENT_FORM,
            request_text="Select board minutes for January 2026",
            legal_notice_accepted=True,
        ),
        deadlines=Deadlines(
            t10=datetime(2026, 2, 16, 12, 0, tzinfo=timezone.utc),
            reminder_t3=datetime(2026, 2, 11, 12, 0, tzinfo=timezone.utc),
            reminder_t1=datetime(2026, 2, 13, 12, 0, tzinfo=timezone.utc),
        ),
        audit_log=(
            AuditEntry(
                at=datetime(2026, 2, 2, 12, 5, tzinfo=timezone.utc),
                actor="resident",
                action="submitted",
            ),
        ),
    )
    values.update(overrides)
    return CaseRecord(**values)


@pytest.fixture
def make_case():
    return build_case


@pytest.fixture
def clock():
    # Monday afternoon
    return FakeClock(datetime(2026, 2, 2, 14, 30, tzinfo=timezone.utc))


@pytest.fixture
def settings():
    return AppSettings(_env_file=None)


@pytest.fixture
def case_repository():
    return InMemoryCaseRepository()


@pytest.fixture
def fake_redis():
    return FakeRedis()
