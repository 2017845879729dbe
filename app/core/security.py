from __future__ import annotations

import re
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.clock import Clock, SystemClock
from app.core.errors import AuthenticationError

_SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*()_+\-=\[\]{};:'\",.<>?/\\|`~]")


def build_password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def get_password_hash(password: str, context: CryptContext) -> str:
    return context.hash(password)


def verify_password(plain_password: str, hashed_password: str, context: CryptContext) -> bool:
    return context.verify(plain_password, hashed_password)


def validate_password_strength(password: str, min_length: int = 8) -> list[str]:
    """Return one message per violated rule; an empty list means the password is acceptable."""
    errors: list[str] = []
    if len(password) < min_length:
        errors.append(f"Password must be at least {min_length} characters long")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain at least one number")
    if not _SPECIAL_CHARACTERS.search(password):
        errors.append("Password must contain at least one special character")
    return errors


class TokenService:
    """Issue and verify HS256 access tokens carrying ``userId``/``email``/``role``."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 1440,
        clock: Clock | None = None,
    ) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self.clock = clock or SystemClock()

    def create_access_token(
        self,
        *,
        user_id: str,
        email: str,
        role: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        issued_at = self.clock.now()
        expire = issued_at + (expires_delta or timedelta(minutes=self.expire_minutes))
        to_encode: dict[str, Any] = {
            "sub": user_id,
            "userId": user_id,
            "email": email,
            "role": role,
            "type": "access",
            "iat": int(issued_at.timestamp()),
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any]:
        try:
            # Expiry is checked against the injected clock below.
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise AuthenticationError("Invalid token") from exc

        if payload.get("type") != "access" or not payload.get("userId"):
            raise AuthenticationError("Invalid token")
        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or exp <= self.clock.now().timestamp():
            raise AuthenticationError("Token expired")
        return payload
