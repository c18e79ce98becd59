"""Tests for the auth backend client, auth service and auth endpoints."""

import json
from datetime import timedelta
from uuid import uuid4

import httpx
import pytest

from agenda.core.auth_client import AuthClient
from agenda.core.exceptions import (
    BackendException,
    ConfigurationException,
    ConflictException,
    UnauthorizedException,
)
from agenda.core.security import generate_jwt
from agenda.schemas.auth import LoginRequest, SignupRequest
from agenda.schemas.users import UserRole
from agenda.services.auth_service import AuthService

JWT_SECRET = "test-jwt-secret"
IDENTITY_ID = uuid4()
OWNER_EMAIL = "owner@studiobella.com.br"


def session_body(user_id, email: str) -> dict:
    token = generate_jwt(
        {"sub": str(user_id), "aud": "authenticated"},
        JWT_SECRET,
        expires_delta=timedelta(hours=1),
    )
    return {
        "access_token": token,
        "refresh_token": "refresh-123",
        "expires_in": 3600,
        "token_type": "bearer",
        "user": {"id": str(user_id), "email": email},
    }


@pytest.fixture
def auth_handler():
    """Auth backend that knows one identity and one password."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        body = json.loads(request.content) if request.content else {}
        path = request.url.path

        if path == "/auth/v1/signup":
            if body["email"] == "taken@studiobella.com.br":
                return httpx.Response(422, json={"msg": "User already registered"})
            return httpx.Response(200, json=session_body(IDENTITY_ID, body["email"]))

        if path == "/auth/v1/token":
            if request.url.params["grant_type"] == "refresh_token":
                return httpx.Response(200, json=session_body(IDENTITY_ID, OWNER_EMAIL))
            if body["password"] != "s3nha-segura":
                return httpx.Response(
                    400,
                    json={
                        "error": "invalid_grant",
                        "error_description": "Invalid login credentials",
                    },
                )
            return httpx.Response(200, json=session_body(IDENTITY_ID, body["email"]))

        if path == "/auth/v1/logout":
            return httpx.Response(204)

        if path == "/auth/v1/user":
            return httpx.Response(200, json={"id": str(IDENTITY_ID)})

        if path.startswith("/auth/v1/admin/users/") and request.method == "DELETE":
            return httpx.Response(200, json={})

        return httpx.Response(404, json={"message": "Not found"})

    handler.calls = calls
    return handler


@pytest.fixture
def auth_service(database, auth_client, settings) -> AuthService:
    return AuthService(database, auth_client, settings)


def signup_request(**overrides) -> SignupRequest:
    data = {
        "name": "Olga Owner",
        "email": "owner@studiobella.com.br",
        "password": "s3nha-segura",
        "tenant_name": "Studio Nova",
    }
    data.update(overrides)
    return SignupRequest(**data)


async def test_client_sends_api_key_and_maps_errors(auth_client, auth_handler) -> None:
    """Every request carries the anon key; error bodies become BackendException."""
    with pytest.raises(BackendException) as exc_info:
        await auth_client.sign_in("owner@studiobella.com.br", "wrong-password")

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid login credentials"
    request = auth_handler.calls[-1]
    assert request.headers["apikey"] == "test-anon-key"
    assert request.url.params["grant_type"] == "password"


async def test_client_sends_bearer_token(auth_client, auth_handler) -> None:
    """Session-scoped calls authenticate with the access token."""
    await auth_client.sign_out("access-abc")

    assert auth_handler.calls[-1].headers["Authorization"] == "Bearer access-abc"


async def test_client_error_without_json_body() -> None:
    """Plain-text error bodies are used as the message."""
    client = AuthClient(
        "http://auth.test",
        "anon",
        transport=httpx.MockTransport(lambda request: httpx.Response(503, text="down")),
    )
    try:
        with pytest.raises(BackendException) as exc_info:
            await client.get_user("token")
    finally:
        await client.close()

    assert exc_info.value.status_code == 503
    assert exc_info.value.message == "down"


async def test_signup_creates_tenant_and_admin(auth_service) -> None:
    """Signup stores the tenant and an admin row keyed by the identity id."""
    response = await auth_service.signup(signup_request())

    assert response.user.id == IDENTITY_ID
    assert response.user.role == UserRole.ADMIN
    assert response.access_token
    assert response.refresh_token == "refresh-123"


async def test_signup_rejected_by_backend(auth_service) -> None:
    """Backend rejections keep their status and message."""
    with pytest.raises(BackendException) as exc_info:
        await auth_service.signup(signup_request(email="taken@studiobella.com.br"))

    assert exc_info.value.status_code == 422
    assert exc_info.value.message == "User already registered"


async def test_signup_with_staff_email_discards_identity(
    auth_service, auth_handler, tenant
) -> None:
    """A signup that cannot be stored deletes the identity with the service-role key."""
    with pytest.raises(ConflictException):
        await auth_service.signup(signup_request(email="admin@studiobella.com.br"))

    request = auth_handler.calls[-1]
    assert request.method == "DELETE"
    assert request.url.path == f"/auth/v1/admin/users/{IDENTITY_ID}"
    assert request.headers["apikey"] == "test-service-role-key"
    assert request.headers["Authorization"] == "Bearer test-service-role-key"


async def test_admin_call_needs_service_role_key() -> None:
    """Without the service-role key no admin request is sent."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    client = AuthClient("http://auth.test", "anon", transport=httpx.MockTransport(handler))
    try:
        with pytest.raises(ConfigurationException):
            await client.delete_user(str(IDENTITY_ID))
    finally:
        await client.close()

    assert calls == []


async def test_login_requires_user_row(auth_service) -> None:
    """An identity with no staff row cannot log in."""
    with pytest.raises(UnauthorizedException):
        await auth_service.login(
            LoginRequest(email="owner@studiobella.com.br", password="s3nha-segura")
        )


async def test_login_after_signup(auth_service) -> None:
    """Login returns the stored user and the backend session."""
    await auth_service.signup(signup_request())

    response = await auth_service.login(
        LoginRequest(email="owner@studiobella.com.br", password="s3nha-segura")
    )

    assert response.user.email == "owner@studiobella.com.br"
    assert response.expires_in == 3600


async def test_authenticate_rejects_bad_tokens(auth_service, tenant) -> None:
    """Invalid signatures, malformed subjects and unknown users are unauthorized."""
    with pytest.raises(UnauthorizedException, match="Could not validate credentials"):
        await auth_service.authenticate("not-a-jwt")

    forged = generate_jwt({"sub": str(tenant["admin"].id), "aud": "authenticated"}, "other")
    with pytest.raises(UnauthorizedException, match="Could not validate credentials"):
        await auth_service.authenticate(forged)

    bad_subject = generate_jwt({"sub": "abc", "aud": "authenticated"}, JWT_SECRET)
    with pytest.raises(UnauthorizedException, match="Invalid user ID format"):
        await auth_service.authenticate(bad_subject)

    unknown = generate_jwt({"sub": str(uuid4()), "aud": "authenticated"}, JWT_SECRET)
    with pytest.raises(UnauthorizedException, match="User not found"):
        await auth_service.authenticate(unknown)


async def test_authenticate_resolves_user(auth_service, tenant) -> None:
    """A valid token resolves to the staff member and their tenant."""
    token = generate_jwt({"sub": str(tenant["admin"].id), "aud": "authenticated"}, JWT_SECRET)

    user = await auth_service.authenticate(token)

    assert user.id == tenant["admin"].id
    assert user.tenant_id == tenant["id"]


async def test_signup_and_session_endpoints(client) -> None:
    """Signup, session lookup and logout over HTTP."""
    response = await client.post(
        "/api/v1/auth/signup",
        json={
            "name": "Olga Owner",
            "email": "owner@studiobella.com.br",
            "password": "s3nha-segura",
            "tenant_name": "Studio Nova",
        },
    )
    assert response.status_code == 201
    token = response.json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    me = await client.get("/api/v1/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["role"] == "admin"

    session = await client.get("/api/v1/auth/session", headers=headers)
    assert session.status_code == 200
    assert session.json()["expires_at"] is not None

    logout = await client.post("/api/v1/auth/logout", headers=headers)
    assert logout.status_code == 204


async def test_login_endpoint_maps_backend_error(client) -> None:
    """Wrong passwords come back with the backend's status."""
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "owner@studiobella.com.br", "password": "wrong-password"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid login credentials"


async def test_me_without_token(client) -> None:
    """Requests without a bearer token get 401."""
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
