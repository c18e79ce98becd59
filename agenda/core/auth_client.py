"""HTTP client for the hosted auth backend."""

from typing import Any

import httpx
import structlog

from agenda.config import Settings
from agenda.core.exceptions import BackendException, ConfigurationException

logger = structlog.get_logger()

AUTH_PATH = "/auth/v1"


def _error_message(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.text or response.reason_phrase


class AuthClient:
    """
    Thin wrapper around the auth backend's REST API.

    End-user calls carry the anon key. Admin calls (deleting an identity)
    authenticate with the service-role key instead. Non-2xx answers raise
    ``BackendException`` with the backend's status and message; transport
    errors propagate unchanged.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        *,
        service_role_key: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend base URL
            anon_key: End-user-scoped API key
            service_role_key: Privileged key for admin calls
            timeout: Request timeout in seconds
            transport: Optional transport (tests pass a mock here)
        """
        self.anon_key = anon_key
        self.service_role_key = service_role_key
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + AUTH_PATH,
            headers={"apikey": anon_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthClient":
        """Build the client from application settings."""
        return cls(
            settings.backend_url,
            settings.backend_anon_key,
            service_role_key=settings.backend_service_role_key,
            timeout=settings.auth_timeout_seconds,
        )

    async def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        access_token: str | None = None,
        privileged: bool = False,
        **kwargs: Any,
    ) -> dict[str, Any]:
        headers = {}
        if privileged:
            if not self.service_role_key:
                raise ConfigurationException("Service role key is not configured")
            headers["apikey"] = self.service_role_key
            headers["Authorization"] = f"Bearer {self.service_role_key}"
        elif access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        response = await self._client.request(method, path, headers=headers, **kwargs)

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "auth_backend_error",
                path=path,
                status_code=response.status_code,
                message=message,
            )
            raise BackendException(message, status_code=response.status_code)

        if not response.content:
            return {}
        return response.json()

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Register a new identity; ``metadata`` is stored as user metadata."""
        return await self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "data": metadata or {}},
        )

    async def sign_in(self, email: str, password: str) -> dict[str, Any]:
        """Exchange email and password for a session."""
        return await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def refresh_session(self, refresh_token: str) -> dict[str, Any]:
        """Exchange a refresh token for a new session."""
        return await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""
        await self._request("POST", "/logout", access_token=access_token)

    async def get_user(self, access_token: str) -> dict[str, Any]:
        """Fetch the identity behind an access token."""
        return await self._request("GET", "/user", access_token=access_token)

    async def delete_user(self, user_id: str) -> None:
        """Delete an identity (admin call, needs the service-role key)."""
        await self._request("DELETE", f"/admin/users/{user_id}", privileged=True)
