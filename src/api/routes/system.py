"""
System endpoints
================

GET  /api/v1/health  -- liveness + database connectivity
POST /api/v1/init-db -- create the schema (idempotent)
GET  /api/v1/init-db -- list tables and row counts
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_database, get_db
from src.api.middleware import DEFAULT_LIMIT, limiter
from src.api.schemas import DatabaseStatusResponse, HealthResponse, InitDbResponse
from src.infrastructure.database import Database
from src.infrastructure.repositories import StationRepository, UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


def _now() -> datetime:
    return datetime.now(timezone.utc)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    responses={503: {"description": "Database unreachable"}},
)
async def health(database: Database = Depends(get_database)):
    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "database": "disconnected",
                "timestamp": _now().isoformat(),
            },
        )
    return HealthResponse(timestamp=_now())


@router.post(
    "/init-db",
    response_model=InitDbResponse,
    summary="Create database tables",
)
@limiter.limit(DEFAULT_LIMIT)
async def init_db(request: Request, database: Database = Depends(get_database)):
    tables = await database.create_all()
    logger.info("Database schema ensured: %s", ", ".join(tables))
    return InitDbResponse(
        message="Database initialized successfully", tables=tables, timestamp=_now()
    )


@router.get(
    "/init-db",
    response_model=DatabaseStatusResponse,
    summary="Inspect tables and row counts",
)
@limiter.limit(DEFAULT_LIMIT)
async def database_status(
    request: Request,
    db: AsyncSession = Depends(get_db),
    database: Database = Depends(get_database),
):
    tables = await database.table_names()
    counts = {}
    for repo in (UserRepository(db), StationRepository(db)):
        name = repo.model.__tablename__
        # not created yet
        counts[name] = await repo.count() if name in tables else 0
    return DatabaseStatusResponse(tables=tables, counts=counts, timestamp=_now())
