"""FastAPI dependency injection: settings, Redis, clock, CaseService, actor."""

import logging
from typing import Annotated, AsyncIterator, Optional

from fastapi import Depends, Request

from prr_engine.application.case_service import CaseService
from prr_engine.application.clock import Clock, SystemClock
from prr_engine.config.settings import AppSettings, get_settings
from prr_engine.domain.identifiers import make_case_id_generator
from prr_engine.infrastructure.cache.audit_sink_redis import RedisAuditSink
from prr_engine.infrastructure.cache.case_repository_redis import RedisCaseRepository
from prr_engine.infrastructure.cache.redis_client import RedisClient

_redis_client: RedisClient | None = None


def get_redis_client(settings: Annotated[AppSettings, Depends(get_settings)]) -> RedisClient:
    """Return singleton Redis client."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient(settings.redis_url)
    return _redis_client


def get_clock() -> Clock:
    return SystemClock()


async def get_case_service(
    settings: Annotated[AppSettings, Depends(get_settings)],
    redis: Annotated[RedisClient, Depends(get_redis_client)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> AsyncIterator[CaseService]:
    """Build CaseService over the configured store (Redis by default, SQL when CASE_STORE=database)."""
    logger = logging.getLogger("prr_engine.application.case_service")
    id_generator = make_case_id_generator(settings.case_id_prefix)

    if settings.case_store == "database":
        from prr_engine.infrastructure.database.case_repository_db import DbAuditSink, DbCaseRepository
        from prr_engine.infrastructure.database.session import get_session_factory

        async with get_session_factory()() as session:
            yield CaseService(
                repository=DbCaseRepository(session),
                clock=clock,
                id_generator=id_generator,
                settings=settings,
                logger=logger,
                audit_sink=DbAuditSink(session),
            )
        return

    namespace = settings.store_namespace
    yield CaseService(
        repository=RedisCaseRepository(redis_client=redis, namespace=namespace),
        clock=clock,
        id_generator=id_generator,
        settings=settings,
        logger=logger,
        audit_sink=RedisAuditSink(redis_client=redis, namespace=namespace),
    )


def get_actor(request: Request) -> Optional[str]:
    """Actor from request.state (set by middleware); None when the header is absent."""
    return getattr(request.state, "actor", None)
