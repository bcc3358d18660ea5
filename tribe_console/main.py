"""FastAPI main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from tribe_console.core.config import settings
from tribe_console.core.middleware import setup_middleware
from tribe_console.core.exceptions import TribeConsoleError

from tribe_console.api.visibility import router as visibility_router
from tribe_console.api.roles import router as roles_router
from tribe_console.api.ranks import router as ranks_router
from tribe_console.api.role_ranks import router as role_ranks_router
from tribe_console.api.role_ranks import overrides_router as role_rank_overrides_router
from tribe_console.api.access_lists import router as access_lists_router
from tribe_console.api.access_lists import check_router as access_check_router
from tribe_console.api.members import router as members_router
from tribe_console.api.admin import router as admin_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("tribe_console")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting %s", settings.APP_NAME)
    if settings.CREATE_TABLES_ON_STARTUP:
        from tribe_console.db.base import Base
        from tribe_console.db.session import engine
        import tribe_console.models  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ready")

    yield

    logger.info("Shutting down %s", settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    description="Tribe roles, ranks, access lists and members",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware
setup_middleware(app)


@app.exception_handler(TribeConsoleError)
async def console_exception_handler(request: Request, exc: TribeConsoleError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
    )


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    logger.warning("Constraint violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=409,
        content={"detail": "Conflicts with an existing record."},
    )


# Register routers
app.include_router(visibility_router)
app.include_router(roles_router)
app.include_router(ranks_router)
app.include_router(role_ranks_router)
app.include_router(role_rank_overrides_router)
app.include_router(access_lists_router)
app.include_router(access_check_router)
app.include_router(members_router)
app.include_router(admin_router)


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Quick health check endpoint."""
    return {"status": "ok"}
