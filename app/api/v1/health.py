"""Health check endpoint with database connectivity and auth configuration status."""

from fastapi import APIRouter

from app.api.deps import DbSession
from app.core.config import get_settings
from app.core.database import check_db_connected
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: DbSession) -> HealthResponse:
    """
    Return service health, database connectivity and whether session tokens can be signed.
    Used by load balancers and monitoring.
    """
    settings = get_settings()
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
        auth_configured=settings.AUTH_SECRET is not None,
    )
