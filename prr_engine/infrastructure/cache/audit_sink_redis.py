"""Append-only audit mirror: one Redis list per case, entries pushed to the tail."""

import json
from typing import List

from prr_engine.domain.models.case import AuditEntry
from prr_engine.domain.schemas.case import AuditEntrySchema, audit_entry_from_schema, audit_entry_to_dict
from prr_engine.infrastructure.cache.redis_client import RedisClient


class RedisAuditSink:
    """Implements AuditSink. There is no update or delete path."""

    def __init__(self, redis_client: RedisClient, namespace: str) -> None:
        self._redis = redis_client
        self._namespace = namespace

    def _key(self, case_id: str) -> str:
        return f"{self._namespace}:audit:{case_id}"

    async def append(self, case_id: str, entry: AuditEntry) -> None:
        payload = {"caseId": case_id, **audit_entry_to_dict(entry)}
        await self._redis.rpush(self._key(case_id), json.dumps(payload))

    async def entries(self, case_id: str) -> List[AuditEntry]:
        raw_entries = await self._redis.lrange(self._key(case_id))
        return [
            audit_entry_from_schema(AuditEntrySchema.model_validate(json.loads(raw)))
            for raw in raw_entries
        ]
