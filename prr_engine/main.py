# prr_engine/main.py

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from prr_engine.api.middleware import (
    ActorContextMiddleware,
    AuditTriggerMiddleware,
    CorrelationIdMiddleware,
)
from prr_engine.api.routers import cases, deadlines, health
from prr_engine.application.exceptions import (
    ApplicationError,
    CaseNotFoundError,
    ConcurrencyConflictError,
)
from prr_engine.config.logging import configure_logging
from prr_engine.config.settings import get_settings
from prr_engine.domain.exceptions import DomainError, DomainValidationError, IllegalTransitionError

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> ActorContext -> AuditTrigger.
app.add_middleware(AuditTriggerMiddleware)
app.add_middleware(ActorContextMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(DomainValidationError)
async def domain_validation_error_handler(request, exc: DomainValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.exception_handler(IllegalTransitionError)
async def illegal_transition_error_handler(request, exc: IllegalTransitionError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(CaseNotFoundError)
async def case_not_found_error_handler(request, exc: CaseNotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(ConcurrencyConflictError)
async def concurrency_conflict_error_handler(request, exc: ConcurrencyConflictError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /cases, /deadlines
app.include_router(health.router)
app.include_router(cases.router, prefix="/cases")
app.include_router(deadlines.router, prefix="/deadlines")
