"""API router for signup, login, password reset and the caller's profile."""

from fastapi import APIRouter, Depends, status

from ....application.services.auth_service import AuthService
from ....application.services.profile_service import ProfileService
from ....core.dependencies import get_auth_service, get_profile_service
from ....domain.models import TokenClaims
from ...api.dependencies import require_user
from ...api.schemas.user_schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    ResetPasswordRequest,
    SignupRequest,
    UserProfileResponse,
    VerifyOtpRequest,
)

router = APIRouter(prefix="/api/user", tags=["users"])


@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Create an account. No token is issued; the client logs in next."""
    profile = payload.model_dump(exclude_unset=True, exclude={"name", "email", "password"})
    await auth_service.signup(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        profile=profile,
    )
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    token = await auth_service.login(payload.email, payload.password)
    return LoginResponse(token=token)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.forgot_password(payload.email)
    return MessageResponse(message="OTP sent to your email")


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp(
    payload: VerifyOtpRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    auth_service.verify_otp(payload.email, payload.otp)
    return MessageResponse(message="OTP verified, proceed to reset password")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.reset_password(payload.email, payload.otp, payload.new_password)
    return MessageResponse(message="Password reset successfully")


@router.get("/profile", response_model=UserProfileResponse)
async def get_profile(
    claims: TokenClaims = Depends(require_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> UserProfileResponse:
    user = profile_service.get_profile(claims.user_id)
    return UserProfileResponse.from_user(user)


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    payload: ProfileUpdateRequest,
    claims: TokenClaims = Depends(require_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> ProfileUpdateResponse:
    user = profile_service.update_profile(claims.user_id, payload.to_fields())
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserProfileResponse.from_user(user),
    )
