"""Authentication endpoints."""

from fastapi import APIRouter, status

from agenda.dependencies import AccessToken, AuthServiceDep, CurrentUser
from agenda.schemas.auth import (
    AuthResponse,
    AuthUser,
    LoginRequest,
    RefreshTokenRequest,
    SessionResponse,
    SignupRequest,
)

router = APIRouter()


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Authentication"],
    summary="Register a tenant and its admin",
)
async def signup(data: SignupRequest, auth_service: AuthServiceDep) -> AuthResponse:
    """
    Create an identity in the auth backend, then the tenant and its admin user.

    Tokens are only returned when the backend does not require email
    confirmation first.
    """
    return await auth_service.signup(data)


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Authentication"],
    summary="Email and password login",
)
async def login(data: LoginRequest, auth_service: AuthServiceDep) -> AuthResponse:
    """
    Sign in through the auth backend.

    Args:
        data: Email and password
        auth_service: Auth service

    Returns:
        Access token, refresh token, and user information
    """
    return await auth_service.login(data)


@router.post(
    "/refresh",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Authentication"],
    summary="Refresh access token",
)
async def refresh(data: RefreshTokenRequest, auth_service: AuthServiceDep) -> AuthResponse:
    """Exchange a refresh token for a new session."""
    return await auth_service.refresh(data.refresh_token)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Authentication"],
    summary="Logout",
)
async def logout(token: AccessToken, auth_service: AuthServiceDep) -> None:
    """Revoke the current session in the auth backend."""
    await auth_service.logout(token)


@router.get(
    "/me",
    response_model=AuthUser,
    tags=["Authentication"],
    summary="Current user",
)
async def me(current_user: CurrentUser) -> AuthUser:
    """Return the authenticated user."""
    return current_user


@router.get(
    "/session",
    response_model=SessionResponse,
    tags=["Authentication"],
    summary="Current session",
)
async def session(token: AccessToken, auth_service: AuthServiceDep) -> SessionResponse:
    """Current user and token expiry as seen by the auth backend."""
    return await auth_service.get_session(token)
