"""
Health check router.

This router provides health check endpoints for monitoring and load balancers.
"""

from fastapi import APIRouter, Depends

from api.deps import get_settings, get_supabase_client
from backend.settings import Settings

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """
    Simple liveness endpoint.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok"}


@router.get("/health/ready")
def readiness(settings: Settings = Depends(get_settings)):
    """
    Readiness endpoint reporting which backends are configured.

    The service answers without Supabase (food proxy and macro calculator
    still work), so this reports rather than fails.
    """
    return {
        "status": "ok",
        "environment": settings.environment,
        "database_configured": get_supabase_client() is not None,
        "webhook_configured": bool(settings.macro_goals_webhook_url),
    }
