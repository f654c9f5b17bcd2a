"""Redis-backed case store. One JSON document per case, a version key, and a receipt-time index."""

import json
import logging
from typing import List, Optional

from prr_engine.application.case_repository import CaseFilter, sort_newest_first
from prr_engine.application.exceptions import ConcurrencyConflictError
from prr_engine.domain.exceptions import DomainValidationError
from prr_engine.domain.models.case import CaseRecord
from prr_engine.domain.schemas.case import case_to_json
from prr_engine.domain.validators.case_validator import validate_case
from prr_engine.infrastructure.cache.redis_client import RedisClient

logger = logging.getLogger(__name__)


class RedisCaseRepository:
    """Implements CaseRepository. Every load is re-validated against the case schema."""

    def __init__(self, redis_client: RedisClient, namespace: str) -> None:
        self._redis = redis_client
        self._namespace = namespace

    def _case_key(self, case_id: str) -> str:
        return f"{self._namespace}:case:{case_id}"

    def _version_key(self, case_id: str) -> str:
        return f"{self._namespace}:case:{case_id}:version"

    @property
    def _index_key(self) -> str:
        return f"{self._namespace}:cases"

    async def get(self, case_id: str) -> Optional[CaseRecord]:
        raw = await self._redis.get(self._case_key(case_id))
        if not raw:
            return None
        return validate_case(json.loads(raw))

    async def put(self, record: CaseRecord, expected_version: Optional[int]) -> None:
        written = await self._redis.compare_and_set(
            self._case_key(record.case_id),
            self._version_key(record.case_id),
            self._index_key,
            case_to_json(record),
            expected_version,
            record.version,
            index_member=record.case_id,
            index_score=record.intake.received_at.timestamp(),
        )
        if not written:
            if expected_version is None:
                raise ConcurrencyConflictError(f"Case {record.case_id} already exists")
            raise ConcurrencyConflictError(
                f"Case {record.case_id} changed since version {expected_version}"
            )

    async def list(self, case_filter: CaseFilter) -> List[CaseRecord]:
        """Cases matching case_filter. A document that fails validation is logged and left out."""
        case_ids = await self._redis.zrevrange(self._index_key)
        records: List[CaseRecord] = []
        for case_id in case_ids:
            try:
                record = await self.get(case_id)
            except DomainValidationError as e:
                logger.error("case_document_invalid", extra={"case_id": case_id, "error": e.message})
                continue
            if record is not None and case_filter.matches(record):
                records.append(record)
        return sort_newest_first(records)
