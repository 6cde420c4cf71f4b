"""Health check endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.common import HealthCheckResponse
from ..core.services import HealthService
from ..database import get_db_session
from ..integrations.supabase import SupabaseAuthClient, get_supabase_client

router = APIRouter(tags=["health"])


@router.get("/healthcheck", response_model=HealthCheckResponse)
async def health_check(
    session: AsyncSession = Depends(get_db_session),
    client: SupabaseAuthClient = Depends(get_supabase_client),
):
    """Database and auth provider reachability; 503 when either is down."""
    health = await HealthService(session, client).get_health_status()
    if health.status != "healthy":
        return JSONResponse(health.model_dump(mode="json"), status_code=503)
    return health
