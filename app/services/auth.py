from __future__ import annotations

import logging

from passlib.context import CryptContext

from app.core.clock import Clock
from app.core.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
    reraise_as_internal,
)
from app.core.logging import get_audit_logger
from app.core.security import (
    TokenService,
    get_password_hash,
    validate_password_strength,
    verify_password,
)
from app.models import User, UserRole
from app.repositories import UserRepository
from app.schemas.auth import AuthResponse, AuthTokens, RegisterRequest, UserOut


class AuthService:
    """Registration, credential checks and token issuance over the identity store."""

    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        clock: Clock,
        password_context: CryptContext,
        password_min_length: int = 8,
        logger: logging.Logger | None = None,
        audit_logger: logging.Logger | None = None,
    ) -> None:
        self.users = users
        self.tokens = tokens
        self.clock = clock
        self.password_context = password_context
        self.password_min_length = password_min_length
        self.logger = logger or logging.getLogger(__name__)
        self.audit = audit_logger or get_audit_logger()
        self._dummy_hash: str | None = None

    def _constant_time_verify(self, user: User | None, password: str) -> bool:
        if user is not None:
            return verify_password(password, user.hashed_password, self.password_context)
        # Unknown emails still pay for one bcrypt verification.
        if self._dummy_hash is None:
            self._dummy_hash = get_password_hash("not-a-real-password", self.password_context)
        verify_password(password, self._dummy_hash, self.password_context)
        return False

    def _issue(self, user: User) -> AuthResponse:
        access_token = self.tokens.create_access_token(
            user_id=user.id, email=user.email, role=user.role.value
        )
        return AuthResponse(
            user=UserOut.model_validate(user),
            tokens=AuthTokens(
                access_token=access_token,
                expires_in=self.tokens.expire_minutes * 60,
            ),
        )

    @reraise_as_internal("Registration failed")
    async def register(self, payload: RegisterRequest) -> AuthResponse:
        email = payload.email.strip().lower()
        if await self.users.find_by_email(email):
            self.audit.warning("Registration rejected: email already registered email=%s", email)
            raise ConflictError("User with this email already exists")
        if await self.users.find_by_employee_id(payload.employee_id):
            self.audit.warning(
                "Registration rejected: employee id taken employee_id=%s", payload.employee_id
            )
            raise ConflictError("User with this employee ID already exists")

        errors = validate_password_strength(payload.password, self.password_min_length)
        if errors:
            self.audit.warning("Registration rejected: weak password email=%s", email)
            raise ValidationError(
                "Password does not meet security requirements", details={"errors": errors}
            )

        now = self.clock.now()
        user = await self.users.create(
            User(
                id=self.clock.new_id(),
                email=email,
                hashed_password=get_password_hash(payload.password, self.password_context),
                first_name=payload.first_name,
                last_name=payload.last_name,
                employee_id=payload.employee_id,
                role=UserRole.EMPLOYEE,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
        )
        self.audit.info(
            "User registered user_id=%s email=%s employee_id=%s", user.id, user.email, user.employee_id
        )
        return self._issue(user)

    @reraise_as_internal("Login failed")
    async def login(self, email: str, password: str) -> AuthResponse:
        user = await self.users.find_by_email(email)
        if not self._constant_time_verify(user, password):
            self.audit.warning("Login failed email=%s", email)
            raise AuthenticationError("Invalid credentials")
        if not user.is_active:
            self.audit.warning("Login rejected: account disabled user_id=%s", user.id)
            raise AuthenticationError("Account is disabled")

        self.audit.info("User logged in user_id=%s role=%s", user.id, user.role.value)
        return self._issue(user)

    @reraise_as_internal("Failed to retrieve profile")
    async def get_profile(self, user_id: str) -> User:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        if not user.is_active:
            raise AuthenticationError("Account is disabled")
        return user

    async def authenticate(self, token: str) -> User:
        """Resolve a bearer token to an active user or raise ``AuthenticationError``."""
        payload = self.tokens.decode_token(token)
        user = await self.users.find_by_id(payload["userId"])
        if user is None:
            raise AuthenticationError("User not found")
        if not user.is_active:
            raise AuthenticationError("Account is disabled")
        return user

    async def validate_token(self, token: str) -> User:
        try:
            return await self.authenticate(token)
        except AuthenticationError as exc:
            self.logger.warning("Token validation failed: %s", exc.message)
            raise AuthenticationError("Invalid token") from exc

    def logout(self, user: User) -> None:
        # Tokens are stateless; the client discards its copy.
        self.audit.info("User logged out user_id=%s", user.id)
