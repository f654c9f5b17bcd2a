"""Case application service. Orchestrates validate, build, persist, mirror audit, in that order."""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from prr_engine.application.case_repository import AuditSink, CaseFilter, CaseRepository
from prr_engine.application.clock import Clock
from prr_engine.application.exceptions import (
    CaseIdExhaustedError,
    CaseNotFoundError,
    ConcurrencyConflictError,
)
from prr_engine.config.settings import AppSettings
from prr_engine.domain.calendar import (
    business_days_remaining,
    compute_reminders,
    compute_t10,
    normalize_receipt,
)
from prr_engine.domain.identifiers import CaseIdGenerator
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
from prr_engine.domain.packet import CasePacket, build_case_packet
from prr_engine.domain.schemas.case import CaseCreateRequest, RequesterSchema
from prr_engine.domain.validators.case_validator import (
    validate_case,
    validate_case_create_request,
    validate_non_blank,
)

ACTION_SUBMITTED = "submitted"
ACTION_INTAKE_CREATED = "intake_created"
ACTION_REQUESTER_CORRECTED = "requester_corrected"
ACTION_ATTACHMENTS_ADDED = "attachments_added"
DEFAULT_RESIDENT_ACTOR = "resident"
DEFAULT_STAFF_ACTOR = "staff"


class CaseService:
    """
    Application-layer orchestration only. No HTTP, no FastAPI.
    Every write validates the full replacement record before it reaches the
    store, and writes are compare-and-set on the record version. The audit
    mirror is best-effort: failure is logged, the case write stands.
    """

    def __init__(
        self,
        repository: CaseRepository,
        clock: Clock,
        id_generator: CaseIdGenerator,
        settings: AppSettings,
        logger: logging.Logger,
        audit_sink: Optional[AuditSink] = None,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._id_generator = id_generator
        self._settings = settings
        self._logger = logger
        self._audit_sink = audit_sink

    @property
    def holidays(self) -> frozenset:
        return frozenset(self._settings.holidays)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------
    async def create_case(self, request: CaseCreateRequest, actor: Optional[str] = None) -> CaseRecord:
        """
        Validate intake, assign a caseId, compute T10 and reminders from the
        receipt time, and persist with a single submitted/intake_created entry.
        """
        validate_case_create_request(request)

        now = self._clock.now()
        received_at = self._receipt_time(request, now)
        t10 = compute_t10(received_at, self.holidays)
        reminder_t3, reminder_t1 = compute_reminders(received_at, self.holidays)

        resident = request.channel == IntakeChannel.RESIDENT_FORM
        entry = AuditEntry(
            at=now,
            actor=(actor or "").strip() or (DEFAULT_RESIDENT_ACTOR if resident else DEFAULT_STAFF_ACTOR),
            action=ACTION_SUBMITTED if resident else ACTION_INTAKE_CREATED,
        )
        case_id = await self._new_case_id(now)
        legal_notice = True if request.legal_notice_accepted is None else request.legal_notice_accepted

        record = validate_case(
            CaseRecord(
                case_id=case_id,
                environment=self._settings.case_environment_tag,
                module=self._settings.case_module_tag,
                status=CaseStatus.INTAKE,
                requester=Requester(name=request.name, email=request.email, phone=request.phone),
                intake=Intake(
                    received_at=received_at,
                    channel=request.channel,
                    request_text=request.request_text,
                    legal_notice_accepted=legal_notice,
                ),
                deadlines=Deadlines(t10=t10, reminder_t3=reminder_t3, reminder_t1=reminder_t1),
                audit_log=(entry,),
                attachments=tuple(
                    Attachment(name=a.name, type=a.type, size=a.size) for a in request.attachments
                ),
            ),
            self._settings.case_environment_tag,
            self._settings.case_module_tag,
        )

        await self._repository.put(record, expected_version=None)
        self._logger.info(
            "case_created",
            extra={
                "case_id": record.case_id,
                "channel": record.intake.channel.value,
                "status": record.status.value,
                "t10": record.deadlines.t10.isoformat(),
            },
        )
        await self._mirror(record.case_id, entry)
        return record

    # ------------------------------------------------------------------
    # Lifecycle actions
    # ------------------------------------------------------------------
    async def record_action(
        self,
        case_id: str,
        actor: str,
        action: str,
        detail: Optional[str] = None,
        status: Optional[CaseStatus] = None,
        expected_version: Optional[int] = None,
    ) -> CaseRecord:
        """
        Append {at, actor, action, detail} to the audit log and optionally move
        the case to status. Raises IllegalTransitionError if the move is not allowed.
        """
        validate_non_blank(actor, "actor")
        validate_non_blank(action, "action")
        current = await self._load_for_write(case_id, expected_version)
        entry = AuditEntry(at=self._next_timestamp(current), actor=actor, action=action, detail=detail)
        updated = current.with_entry(entry, status)
        await self._commit(current, updated, entry)
        self._logger.info(
            "case_action_recorded",
            extra={
                "case_id": case_id,
                "action": action,
                "from_status": current.status.value,
                "to_status": updated.status.value,
                "version": updated.version,
            },
        )
        return updated

    async def correct_requester(
        self,
        case_id: str,
        actor: str,
        requester: RequesterSchema,
        expected_version: Optional[int] = None,
    ) -> CaseRecord:
        """Staff correction of requester identity. Deadlines are left as computed at intake."""
        validate_non_blank(actor, "actor")
        current = await self._load_for_write(case_id, expected_version)
        changed = [
            name
            for name in ("name", "email", "phone")
            if getattr(current.requester, name) != getattr(requester, name)
        ]
        entry = AuditEntry(
            at=self._next_timestamp(current),
            actor=actor,
            action=ACTION_REQUESTER_CORRECTED,
            detail=f"fields={','.join(changed) or 'none'}",
        )
        updated = current.with_requester(
            Requester(name=requester.name, email=requester.email, phone=requester.phone),
            entry,
        )
        await self._commit(current, updated, entry)
        return updated

    async def add_attachments(
        self,
        case_id: str,
        actor: str,
        attachments: Sequence[Attachment],
        expected_version: Optional[int] = None,
    ) -> CaseRecord:
        validate_non_blank(actor, "actor")
        current = await self._load_for_write(case_id, expected_version)
        entry = AuditEntry(
            at=self._next_timestamp(current),
            actor=actor,
            action=ACTION_ATTACHMENTS_ADDED,
            detail=f"count={len(attachments)}; names={', '.join(a.name for a in attachments)}",
        )
        updated = current.with_attachments(tuple(attachments), entry)
        await self._commit(current, updated, entry)
        return updated

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def get_case(self, case_id: str) -> CaseRecord:
        record = await self._repository.get(case_id)
        if record is None:
            raise CaseNotFoundError(case_id)
        return record

    async def list_cases(self, case_filter: Optional[CaseFilter] = None) -> List[CaseRecord]:
        return await self._repository.list(case_filter or CaseFilter())

    async def render_packet(self, case_id: str) -> CasePacket:
        return build_case_packet(await self.get_case(case_id), self._settings.library_root)

    def now(self) -> datetime:
        return self._clock.now()

    def business_days_remaining(self, record: CaseRecord) -> int:
        return business_days_remaining(self._clock.now(), record.deadlines.t10, self.holidays)

    def is_overdue(self, record: CaseRecord) -> bool:
        return not record.is_terminal and record.deadlines.t10 < self._clock.now()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _receipt_time(self, request: CaseCreateRequest, now: datetime) -> datetime:
        if request.received_at is not None:
            return normalize_receipt(request.received_at)
        if request.received_on is not None:
            return normalize_receipt(request.received_on)
        return normalize_receipt(now)

    async def _new_case_id(self, now: datetime) -> str:
        for _ in range(self._settings.case_id_max_attempts):
            candidate = self._id_generator(now)
            if await self._repository.get(candidate) is None:
                return candidate
            self._logger.warning("case_id_collision", extra={"case_id": candidate})
        raise CaseIdExhaustedError(
            f"No unused case id after {self._settings.case_id_max_attempts} attempts"
        )

    async def _load_for_write(self, case_id: str, expected_version: Optional[int]) -> CaseRecord:
        current = await self.get_case(case_id)
        if expected_version is not None and current.version != expected_version:
            self._logger.warning(
                "case_conflict",
                extra={
                    "case_id": case_id,
                    "expected_version": expected_version,
                    "stored_version": current.version,
                },
            )
            raise ConcurrencyConflictError(
                f"Case {case_id} is at version {current.version}, expected {expected_version}"
            )
        return current

    def _next_timestamp(self, record: CaseRecord) -> datetime:
        """Clock reading, never earlier than the last audit entry."""
        now = self._clock.now()
        last = record.last_entry
        if last is not None and now < last.at:
            return last.at
        return now

    async def _commit(self, current: CaseRecord, updated: CaseRecord, entry: AuditEntry) -> None:
        validate_case(updated, self._settings.case_environment_tag, self._settings.case_module_tag)
        await self._repository.put(updated, expected_version=current.version)
        await self._mirror(updated.case_id, entry)

    async def _mirror(self, case_id: str, entry: AuditEntry) -> None:
        if self._audit_sink is None:
            return
        try:
            await self._audit_sink.append(case_id, entry)
        except Exception as e:
            self._logger.error(
                "audit_mirror_failed",
                extra={"case_id": case_id, "action": entry.action, "error": str(e)},
            )
            # Do not re-raise: the case record's own audit log is authoritative.
