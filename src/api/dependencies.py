"""FastAPI dependency injection helpers."""

from typing import AsyncIterator, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings
from src.infrastructure.database import Database
from src.infrastructure.repositories import UserRepository
from src.infrastructure.security import (
    InvalidToken,
    PasswordHasher,
    TokenPayload,
    TokenService,
)

_bearer = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_db(
    database: Database = Depends(get_database),
) -> AsyncIterator[AsyncSession]:
    """Yield an async DB session; commit on success, rollback on error."""
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"}
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    tokens: TokenService = Depends(get_token_service),
    db: AsyncSession = Depends(get_db),
) -> TokenPayload:
    """Resolve the ``Authorization: Bearer`` token to an existing user or 401."""
    if credentials is None:
        raise _unauthorized("Authentication required")
    try:
        payload = tokens.verify(credentials.credentials)
    except InvalidToken:
        raise _unauthorized("Invalid or expired token")
    # signed for a user that has since been removed
    if await UserRepository(db).get_by_id(payload.user_id) is None:
        raise _unauthorized("Invalid or expired token")
    return payload
