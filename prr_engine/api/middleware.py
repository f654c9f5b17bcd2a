"""API middleware: correlation ID, actor context, request audit log line."""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from prr_engine.core.context import actor_ctx, correlation_id_ctx

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
ACTOR_HEADER = "X-Actor"

_CASE_PATH = re.compile(r"^/cases/(?P<case_id>[^/]+)")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Preserve the caller's X-Correlation-ID or mint one; echo it on the response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = (request.headers.get(CORRELATION_HEADER) or "").strip() or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        token = correlation_id_ctx.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            correlation_id_ctx.reset(token)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class ActorContextMiddleware(BaseHTTPMiddleware):
    """
    X-Actor is the signed-in staff member as resolved by the host. Optional:
    resident submissions arrive without it and fall back to the default actor.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        actor = (request.headers.get(ACTOR_HEADER) or "").strip() or None
        request.state.actor = actor
        token = actor_ctx.set(actor)
        try:
            return await call_next(request)
        finally:
            actor_ctx.reset(token)


class AuditTriggerMiddleware(BaseHTTPMiddleware):
    """One request_audit line per request, tagged with the case it touched."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        match = _CASE_PATH.match(request.url.path)
        logger.info(
            "request_audit",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "case_id": match.group("case_id") if match else None,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response
