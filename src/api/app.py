"""
FastAPI application factory.

* Registers routes for auth, charging stations and system checks.
* Builds the process-wide collaborators (database, password hasher, token
  service) once and exposes them on ``app.state``; the database engine is
  disposed via the lifespan on shutdown.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.middleware import limiter
from src.api.routes import auth, stations, system
from src.config import Settings
from src.domain.entities import GeoValidationError
from src.infrastructure.database import Database
from src.infrastructure.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release pooled DB connections on shutdown."""
    yield
    await app.state.db.dispose()
    logger.info("Database engine disposed")


async def _geo_validation_handler(request: Request, exc: GeoValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def create_app(
    settings: Optional[Settings] = None, database: Optional[Database] = None
) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO)
    )

    app = FastAPI(
        title="EV Charging Stations API",
        description=(
            "Register, log in, and manage electric-vehicle charging stations. "
            "Listings can be filtered by status, connector, price and power, "
            "and searched by distance from a reference point."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = database or Database(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_expire_minutes,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(GeoValidationError, _geo_validation_handler)

    # Routers
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(stations.router, prefix="/api/v1")
    app.include_router(system.router, prefix="/api/v1")

    return app
