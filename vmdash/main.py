import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError

from vmdash.config import Settings, settings as default_settings
from vmdash.core.exceptions import register_exception_handlers
from vmdash.core.logging import configure_logging
from vmdash.core.middleware import RequestIdMiddleware
from vmdash.db.session import Database
from vmdash.demo_data import DEMO_VMS
from vmdash.models.vm import VirtualMachine

logger = logging.getLogger(__name__)


async def seed_demo_data(database: Database) -> None:
    """Insert the demo dataset when the table is empty."""
    async with database.session_factory() as session:
        result = await session.execute(select(VirtualMachine).limit(1))
        if result.scalar_one_or_none() is not None:
            return
        # Let the table assign fresh ids; demo ids are reserved for fallback mode
        for vm_data in DEMO_VMS:
            session.add(VirtualMachine(**{k: v for k, v in vm_data.items() if k != "id"}))
        await session.commit()
        logger.info("Demo VMs inserted", extra={"count": len(DEMO_VMS)})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings
    database: Database | None = app.state.database

    logger.info(
        "Application starting",
        extra={"version": app_settings.app_version, "env": app_settings.env},
    )

    if database is None:
        # Keep serving so /health and /api/debug can report the problem
        logger.critical("DATABASE_URL is not set; VM endpoints will answer 503")
    else:
        await database.create_all()
        logger.info("Database tables ready")
        if app_settings.seed_demo_data:
            await seed_demo_data(database)

    app.state.start_time = time.monotonic()
    logger.info("Application ready", extra={"version": app_settings.app_version})

    yield

    logger.info("Application shutting down")
    if database is not None:
        await database.dispose()
        logger.info("Database engine disposed")


def create_app(app_settings: Settings | None = None) -> FastAPI:
    app_settings = app_settings or default_settings
    configure_logging(app_settings)

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        description="REST API behind the VM dashboard: list, create, update and delete VM records.",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = app_settings
    app.state.database = (
        Database.from_url(app_settings.database_url, echo=app_settings.debug)
        if app_settings.database_url
        else None
    )
    app.state.start_time = 0.0

    app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(app)

    from vmdash.api.router import router as api_router

    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["health"])
    async def health_check() -> JSONResponse:
        database: Database | None = app.state.database
        if database is None:
            db_status = "unconfigured"
        else:
            db_status = "healthy"
            try:
                async with database.session_factory() as session:
                    await session.execute(text("SELECT 1"))
            except SQLAlchemyError:
                db_status = "unhealthy"

        overall = "healthy" if db_status == "healthy" else "unhealthy"
        start_time = app.state.start_time
        uptime = int(time.monotonic() - start_time) if start_time else 0

        return JSONResponse(
            status_code=200 if overall == "healthy" else 503,
            content={
                "status": overall,
                "version": app_settings.app_version,
                "env": app_settings.env,
                "uptime_s": uptime,
                "checks": {"database": {"status": db_status}},
            },
        )

    return app


app = create_app()
