# Main application entry point
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import auth_router, health_router, magic_link_router, notes_router, oauth_router
from .config import get_settings
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .database import create_tables
from .middleware.auth import AuthRedirect, AuthSessionMiddleware
from .templating import render

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Starting SupaNotes",
        extra={
            "version": settings.app_version,
            "environment": settings.environment,
            "debug": settings.debug,
        },
    )

    # Tests run against their own SQLite engine
    if os.getenv("SUPANOTES_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping DB table creation due to SUPANOTES_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

    yield

    logger.info("Shutting down SupaNotes")


app = FastAPI(
    title=settings.app_name,
    description="Notes app with Supabase authentication",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url=None,
)

# Last added runs outermost, so the request log sees the final status
app.add_middleware(AuthSessionMiddleware)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(AuthRedirect)
async def auth_redirect_handler(request: Request, exc: AuthRedirect):
    response = RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)
    if exc.clear_cookie:
        response.delete_cookie(settings.session_cookie_name, path="/")
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Errors are pages too; status and headers (e.g. Allow) are kept."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    response = render(
        request,
        "error.html",
        {"status_code": exc.status_code, "message": exc.detail},
        status_code=exc.status_code,
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


# Include routers
app.include_router(auth_router)
app.include_router(oauth_router)
app.include_router(magic_link_router)
app.include_router(notes_router)
app.include_router(health_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("supanotes.main:app", host=settings.host, port=settings.port, reload=settings.debug)
