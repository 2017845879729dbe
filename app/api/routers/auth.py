from fastapi import APIRouter, Depends, status

from app.api import deps
from app.models import User
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserOut,
    ValidateTokenRequest,
)
from app.schemas.common import ApiResponse
from app.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new employee account",
)
async def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(deps.get_auth_service),
) -> ApiResponse[AuthResponse]:
    result = await auth_service.register(payload)
    return ApiResponse(data=result, message="User registered successfully")


@router.post("/login", response_model=ApiResponse[AuthResponse], summary="Authenticate and issue a token")
async def login(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(deps.get_auth_service),
) -> ApiResponse[AuthResponse]:
    result = await auth_service.login(credentials.email, credentials.password)
    return ApiResponse(data=result, message="Login successful")


@router.get("/profile", response_model=ApiResponse[UserOut], summary="Current user profile")
async def profile(
    current_user: User = Depends(deps.get_current_user),
    auth_service: AuthService = Depends(deps.get_auth_service),
) -> ApiResponse[UserOut]:
    user = await auth_service.get_profile(current_user.id)
    return ApiResponse(data=UserOut.model_validate(user))


@router.post("/validate", response_model=ApiResponse[UserOut], summary="Validate a token string")
async def validate_token(
    payload: ValidateTokenRequest,
    auth_service: AuthService = Depends(deps.get_auth_service),
) -> ApiResponse[UserOut]:
    user = await auth_service.validate_token(payload.token)
    return ApiResponse(data=UserOut.model_validate(user), message="Token is valid")


@router.post("/logout", response_model=ApiResponse[None], summary="Log out (client discards token)")
async def logout(
    current_user: User = Depends(deps.get_current_user),
    auth_service: AuthService = Depends(deps.get_auth_service),
) -> ApiResponse[None]:
    auth_service.logout(current_user)
    return ApiResponse(message="Logout successful")
