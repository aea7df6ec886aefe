"""
FastAPI Application Entry Point.

This is the main application file for the Ronins Trek Backend: JSON API
under ``/api`` plus the static front-end shell for every other GET route.
"""

import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from trek_backend.app.core.config import settings
from trek_backend.app.api.router import router as api_router
from trek_backend.app.db.session import engine, Base
from trek_backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    database_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from trek_backend.app.core.observability import (
    ObservabilityMiddleware,
    SecurityHeadersMiddleware,
    configure_logging
)
from trek_backend.app.core.reliability import RateLimitMiddleware

# Import models to ensure they are registered with Base
from trek_backend.app.models.trek import Trek  # noqa: F401
from trek_backend.app.models.booking import Booking  # noqa: F401
from trek_backend.app.models.submission import Feedback, BusinessQuery  # noqa: F401
from trek_backend.app.models.team_member import TeamMember  # noqa: F401
from trek_backend.app.models.live_trek import (  # noqa: F401
    LiveTrek, TrekLocation, TrekTrackingState, LiveTrekSettings, GpsConfig
)

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    Creates database tables on startup and releases pooled connections on
    shutdown.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    description="Trek bookings, admin dashboard and GPS live tracking",
    lifespan=lifespan,
)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, database_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Middleware (last added runs first)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(ObservabilityMiddleware)


@app.get(f"{settings.api_prefix}/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and current server time
    """
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# Include API router
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/{full_path:path}", include_in_schema=False)
async def frontend(full_path: str):
    """
    Serve the static front-end.

    Existing files under the static directory are returned as-is; any other
    path falls back to ``index.html``. Unknown ``/api`` paths stay 404.
    """
    if full_path == "api" or full_path.startswith("api/"):
        raise StarletteHTTPException(status_code=404, detail="Not Found")

    static_root = os.path.abspath(settings.static_dir)
    candidate = os.path.abspath(os.path.join(static_root, full_path))
    if full_path and candidate.startswith(static_root + os.sep) and os.path.isfile(candidate):
        return FileResponse(candidate)

    index_path = os.path.join(static_root, "index.html")
    if not os.path.isfile(index_path):
        raise StarletteHTTPException(status_code=404, detail="Not Found")
    return FileResponse(index_path)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3003")))
