"""
User Controller
===============

Registration, e-mail/password sessions, the signed-in user's profile and
password recovery.
"""
from fastapi import APIRouter, Depends, Response, status

from wayfarer.api.v1.dependencies import get_bearer_token, get_user_service
from wayfarer.api.v1.errors import unwrap
from wayfarer.application.dto.user_dto import (
    ChangePasswordRequest,
    LoginRequest,
    PasswordResetRequest,
    RegisterUserRequest,
    ResetPasswordRequest,
    SessionResponse,
    UpdateProfileRequest,
    UserResponse,
)
from wayfarer.application.services.user_service import UserService

router = APIRouter(tags=["users"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a visitor account",
)
async def register_user(
    request: RegisterUserRequest,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = unwrap(await service.register_user(request))
    return UserResponse.from_domain(user)


@router.post("/login", response_model=SessionResponse, summary="Sign in with e-mail and password")
async def login(
    request: LoginRequest,
    service: UserService = Depends(get_user_service),
) -> SessionResponse:
    session, user = unwrap(await service.authenticate_user(request))
    return SessionResponse.from_domain(session, user)


@router.get("/me", response_model=UserResponse, summary="Current user")
async def get_current_user(
    token: str = Depends(get_bearer_token),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = unwrap(await service.get_current_user(token))
    return UserResponse.from_domain(user)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Sign out",
)
async def logout(
    token: str = Depends(get_bearer_token),
    service: UserService = Depends(get_user_service),
) -> Response:
    unwrap(await service.sign_out(token))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/logout-all",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Sign out on every device",
)
async def logout_everywhere(
    token: str = Depends(get_bearer_token),
    service: UserService = Depends(get_user_service),
) -> Response:
    user = unwrap(await service.get_current_user(token))
    unwrap(await service.sign_out_everywhere(user.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/me", response_model=UserResponse, summary="Update own profile")
async def update_profile(
    request: UpdateProfileRequest,
    token: str = Depends(get_bearer_token),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = unwrap(await service.get_current_user(token))
    updated = unwrap(await service.update_user_profile(user.id, request))
    return UserResponse.from_domain(updated)


@router.put(
    "/me/password",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Change own password",
)
async def change_password(
    request: ChangePasswordRequest,
    token: str = Depends(get_bearer_token),
    service: UserService = Depends(get_user_service),
) -> Response:
    user = unwrap(await service.get_current_user(token))
    unwrap(await service.change_user_password(user.id, request))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/password-reset",
    status_code=status.HTTP_202_ACCEPTED,
    response_class=Response,
    summary="E-mail a password reset link",
    description="Always accepted, so the response does not reveal whether the address is registered.",
)
async def request_password_reset(
    request: PasswordResetRequest,
    service: UserService = Depends(get_user_service),
) -> Response:
    unwrap(await service.request_password_reset(request))
    return Response(status_code=status.HTTP_202_ACCEPTED)


@router.post(
    "/password-reset/confirm",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Choose a new password with a reset token",
)
async def reset_password(
    request: ResetPasswordRequest,
    service: UserService = Depends(get_user_service),
) -> Response:
    unwrap(await service.reset_password(request))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/profile", response_model=UserResponse, summary="User profile")
async def get_user_profile(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = unwrap(await service.get_user_profile(user_id))
    return UserResponse.from_domain(user)
