"""
Password hashing and bearer-token issuance.

Both primitives are delegated to libraries: ``bcrypt`` for salted password
hashes and ``PyJWT`` for HS256-signed tokens.  The objects are built once
by the app factory from ``Settings`` and shared across requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt


class InvalidToken(Exception):
    """Raised when a bearer token is malformed, tampered with, or expired."""


_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    # bcrypt ignores (newer releases reject) anything past 72 bytes
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), hashed.encode("utf-8"))
        except ValueError:
            # unparseable stored hash
            return False


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    email: str
    username: str


class TokenService:
    def __init__(
        self, secret: str, algorithm: str = "HS256", expire_minutes: int = 43_200
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, payload: TokenPayload, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(payload.user_id),
            "email": payload.email,
            "username": payload.username,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenPayload:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
            return TokenPayload(
                user_id=int(claims["sub"]),
                email=claims.get("email", ""),
                username=claims.get("username", ""),
            )
        except (jwt.PyJWTError, ValueError) as exc:
            raise InvalidToken(str(exc)) from exc
