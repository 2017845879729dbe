from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from app.models.types import UserRole
from app.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    employee_id: str = Field(min_length=1, max_length=50)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ValidateTokenRequest(CamelModel):
    token: str = Field(min_length=1)


class UserOut(CamelModel):
    id: str
    email: EmailStr
    first_name: str
    last_name: str
    employee_id: str
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None


class AuthTokens(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class AuthResponse(CamelModel):
    user: UserOut
    tokens: AuthTokens
