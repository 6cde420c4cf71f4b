"""Health service implementation."""

import asyncio
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ...integrations.supabase import AuthProviderError, SupabaseAuthClient
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService


class HealthService(IHealthService):
    """Health check service implementation."""

    def __init__(self, session: AsyncSession, client: SupabaseAuthClient):
        self.session = session
        self.client = client
        self.settings = get_settings()

    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        db_health = await self.check_database_health()
        auth_health = await self.check_auth_provider_health()

        overall_status = "healthy"
        if not db_health["connected"] or not auth_health["connected"]:
            overall_status = "unhealthy"

        return HealthCheckResponse(
            status=overall_status,
            version=self.settings.app_version,
            checks={"database": db_health, "auth": auth_health},
        )

    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        loop = asyncio.get_running_loop()
        try:
            start_time = loop.time()
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()
            response_time = (loop.time() - start_time) * 1000

            return {
                "connected": True,
                "status": "healthy",
                "response_time_ms": round(response_time, 2),
            }
        except Exception as e:
            return {
                "connected": False,
                "status": "unhealthy",
                "error": type(e).__name__,
                "response_time_ms": None,
            }

    async def check_auth_provider_health(self) -> Dict[str, Any]:
        """Check the auth provider answers its health endpoint."""
        loop = asyncio.get_running_loop()
        try:
            start_time = loop.time()
            await self.client.health()
            response_time = (loop.time() - start_time) * 1000

            return {
                "connected": True,
                "status": "healthy",
                "response_time_ms": round(response_time, 2),
            }
        except AuthProviderError as e:
            return {
                "connected": False,
                "status": "unhealthy",
                "error": f"status {e.status_code}" if e.status_code else "unreachable",
                "response_time_ms": None,
            }
