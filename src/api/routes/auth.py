"""
Auth endpoints
==============

POST /api/v1/auth/register -- create an account, returns a bearer token
POST /api/v1/auth/login    -- exchange email + password for a bearer token
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from src.api.dependencies import get_db, get_password_hasher, get_token_service
from src.api.middleware import AUTH_LIMIT, limiter
from src.api.schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from src.infrastructure.repositories import UserRepository
from src.infrastructure.security import PasswordHasher, TokenPayload, TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(message: str, user, tokens: TokenService) -> AuthResponse:
    token = tokens.issue(
        TokenPayload(user_id=user.id, email=user.email, username=user.username)
    )
    return AuthResponse(
        message=message, token=token, user=UserResponse.model_validate(user)
    )


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    summary="Register a new user",
    responses={400: {"description": "Email or username already in use"}},
)
@limiter.limit(AUTH_LIMIT)
async def register(
    request: Request,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    repo = UserRepository(db)

    conflicts = await repo.find_conflicts(body.email, body.username)
    if any(u.email == body.email for u in conflicts):
        raise HTTPException(status_code=400, detail="Email already registered")
    if conflicts:
        raise HTTPException(status_code=400, detail="Username already taken")

    # bcrypt is CPU-bound; run it off the event loop
    password_hash = await run_in_threadpool(hasher.hash, body.password)
    try:
        user = await repo.create_user(
            username=body.username, email=body.email, password_hash=password_hash
        )
    except IntegrityError:
        # lost a race with a concurrent registration
        raise HTTPException(
            status_code=400, detail="Email or username already exists"
        )

    logger.info("Registered user id=%s username=%s", user.id, user.username)
    return _auth_response("User registered successfully", user, tokens)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in with email and password",
    responses={401: {"description": "Invalid email or password"}},
)
@limiter.limit(AUTH_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    user = await UserRepository(db).get_by_email(body.email)
    if user is None or not await run_in_threadpool(
        hasher.verify, body.password, user.password_hash
    ):
        logger.info("Failed login for %s", body.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return _auth_response("Login successful", user, tokens)
