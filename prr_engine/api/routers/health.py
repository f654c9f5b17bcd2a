# prr_engine/api/routers/health.py

from fastapi import APIRouter, Request

from prr_engine.config.settings import get_settings

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Health check with correlation ID and the deployment tags cases are stamped with."""
    settings = get_settings()
    return {
        "status": "ok",
        "correlation_id": request.state.correlation_id,
        "environment": settings.environment,
        "case_environment": settings.case_environment_tag,
        "case_module": settings.case_module_tag,
        "vault_mode": settings.vault_mode,
        "version": settings.version,
    }
