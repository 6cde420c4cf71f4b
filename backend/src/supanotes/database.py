# Database connection setup (Supabase postgres in production)
from urllib.parse import urlparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import get_settings
from .core.models.base import BaseModel

# Get settings
settings = get_settings()


def _connect_args(database_url: str) -> dict:
    if not database_url.startswith("postgresql+asyncpg"):
        return {}
    host = urlparse(database_url).hostname or ""
    return {
        "statement_cache_size": 0,  # required for Supabase pooler compatibility
        "ssl": "require" if host.endswith("supabase.com") else False,
    }


# Create async engine using settings
engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    connect_args=_connect_args(settings.database_url),
)

# Session factory
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db_session():
    """Get database session, one per request."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables():
    """Create all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)
