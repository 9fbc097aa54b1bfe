"""Connectivity diagnostics for operators setting up DATABASE_URL."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, inspect, select, text
from sqlalchemy.exc import SQLAlchemyError

from vmdash.db.session import Database, get_database
from vmdash.models.vm import VirtualMachine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("", summary="Report database configuration and connectivity")
async def debug_database(
    database: Annotated[Database | None, Depends(get_database)],
) -> JSONResponse:
    if database is None:
        return JSONResponse(
            content={
                "status": "error",
                "message": "DATABASE_URL environment variable is not set",
                "database": {"configured": False, "connected": False},
            },
        )

    try:
        async with database.session_factory() as session:
            await session.execute(text("SELECT 1"))
            table_exists = await session.run_sync(
                lambda sync_session: inspect(sync_session.connection()).has_table(
                    VirtualMachine.__tablename__
                )
            )
            vm_count = 0
            if table_exists:
                result = await session.execute(select(func.count()).select_from(VirtualMachine))
                vm_count = result.scalar_one()
    except SQLAlchemyError as exc:
        logger.error("Database diagnostics failed", extra={"exc_type": type(exc).__name__})
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "Database connection failed",
                "error": str(exc),
                "database": {"configured": True, "connected": False},
            },
        )

    logger.debug("Database diagnostics", extra={"vm_count": vm_count})
    return JSONResponse(
        content={
            "status": "success",
            "message": "Database connection successful",
            "database": {
                "configured": True,
                "connected": True,
                "dialect": database.engine.dialect.name,
                "vmsTableExists": table_exists,
                "vmCount": vm_count,
            },
        },
    )
