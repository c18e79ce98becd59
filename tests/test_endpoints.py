"""Tests for the HTTP surface: health, roles and resource endpoints."""

from datetime import UTC, datetime

import pytest
from httpx import AsyncClient
from structlog.testing import capture_logs

MONDAY_10AM = datetime(2030, 1, 7, 13, 0, tzinfo=UTC).isoformat()


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    """Test health check endpoint."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_detailed_health_check(client: AsyncClient) -> None:
    """Both credential tiers are reported healthy."""
    response = await client.get("/api/v1/health/detailed")
    assert response.status_code == 200
    data = response.json()
    assert data["database"] == "healthy"
    assert data["service_database"] == "healthy"


@pytest.mark.asyncio
async def test_ping_root_and_config(client: AsyncClient) -> None:
    """Ping, root and the public configuration."""
    assert (await client.get("/api/v1/ping")).json() == {"message": "pong"}
    assert (await client.get("/")).json()["docs"] == "/docs"

    config = (await client.get("/api/v1/config")).json()
    assert config["currency"] == "BRL"
    assert config["locale"] == "pt-BR"


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient) -> None:
    """Prometheus metrics are served at /metrics."""
    await client.get("/api/v1/ping")
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "http_request" in response.text


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client: AsyncClient) -> None:
    """HTTP errors share the application's error shape."""
    response = await client.get("/api/v1/nothing-here")
    assert response.status_code == 404
    assert response.json()["error"] == "HTTPException"


@pytest.mark.asyncio
async def test_invalid_token_rejected(client: AsyncClient, tenant: dict) -> None:
    """A malformed bearer token gets 401."""
    response = await client.get(
        "/api/v1/units/", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Could not validate credentials"


@pytest.mark.asyncio
async def test_unit_writes_require_admin(
    client: AsyncClient, auth_headers: dict, admin_headers: dict
) -> None:
    """Non-admin staff cannot create units; admins can."""
    payload = {"name": "Filial Sul", "address": "Avenida Paulista, 1000"}

    forbidden = await client.post("/api/v1/units/", json=payload, headers=auth_headers)
    assert forbidden.status_code == 403
    assert forbidden.json()["message"] == "Admin access required"

    created = await client.post("/api/v1/units/", json=payload, headers=admin_headers)
    assert created.status_code == 201
    assert created.json()["timezone"] == "America/Sao_Paulo"

    listing = await client.get("/api/v1/units/", headers=auth_headers)
    assert listing.status_code == 200
    assert len(listing.json()) == 2


@pytest.mark.asyncio
async def test_request_id_echoed_and_generated(client: AsyncClient) -> None:
    """A client request id is echoed; requests without one get a fresh id."""
    echoed = await client.get("/api/v1/ping", headers={"X-Request-ID": "req-42"})
    assert echoed.headers["X-Request-ID"] == "req-42"

    first = await client.get("/api/v1/ping")
    second = await client.get("/api/v1/ping")
    assert first.headers["X-Request-ID"]
    assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_log_names_tenant_and_user(
    client: AsyncClient, auth_headers: dict, tenant: dict
) -> None:
    """The completion entry of an authenticated request names its caller."""
    with capture_logs() as logs:
        response = await client.get("/api/v1/tenants/me", headers=auth_headers)

    assert response.status_code == 200
    completed = [entry for entry in logs if entry["event"] == "request_completed"]
    assert completed[-1]["tenant_id"] == str(tenant["id"])
    assert completed[-1]["user_id"] == str(tenant["reception"].id)


@pytest.mark.asyncio
async def test_my_tenant(client: AsyncClient, auth_headers: dict, admin_headers: dict) -> None:
    """Staff read their tenant; only admins change it."""
    response = await client.get("/api/v1/tenants/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Studio Bella"

    forbidden = await client.patch(
        "/api/v1/tenants/me", json={"plan": "premium"}, headers=auth_headers
    )
    assert forbidden.status_code == 403

    updated = await client.patch(
        "/api/v1/tenants/me", json={"plan": "premium"}, headers=admin_headers
    )
    assert updated.status_code == 200
    assert updated.json()["plan"] == "premium"


@pytest.mark.asyncio
async def test_customer_crud_and_search(client: AsyncClient, auth_headers: dict) -> None:
    """Customers are created, searched, updated and deleted."""
    created = await client.post(
        "/api/v1/customers/",
        json={"name": "Beatriz Souza", "email": "bia@gmail.com", "phone": "+5511912345678"},
        headers=auth_headers,
    )
    assert created.status_code == 201
    customer = created.json()
    assert customer["consent_flags"]["notifications"] is True

    duplicate = await client.post(
        "/api/v1/customers/",
        json={"name": "Beatriz S.", "email": "bia@gmail.com"},
        headers=auth_headers,
    )
    assert duplicate.status_code == 409

    search = await client.get(
        "/api/v1/customers/", params={"search": "beatriz"}, headers=auth_headers
    )
    assert search.status_code == 200
    body = search.json()
    assert body["meta"]["total"] == 1
    assert body["data"][0]["id"] == customer["id"]

    page = await client.get(
        "/api/v1/customers/", params={"page": 1, "limit": 1}, headers=auth_headers
    )
    assert page.json()["meta"] == {
        "page": 1,
        "limit": 1,
        "total": 2,
        "total_pages": 2,
        "has_more": True,
    }

    updated = await client.patch(
        f"/api/v1/customers/{customer['id']}",
        json={"consent_flags": {"marketing": True, "reminders": False, "notifications": False}},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["consent_flags"]["marketing"] is True

    deleted = await client.delete(f"/api/v1/customers/{customer['id']}", headers=auth_headers)
    assert deleted.status_code == 204

    missing = await client.get(f"/api/v1/customers/{customer['id']}", headers=auth_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_invalid_pagination_returns_422(client: AsyncClient, auth_headers: dict) -> None:
    """Out-of-range page sizes are validation errors."""
    response = await client.get(
        "/api/v1/customers/", params={"limit": 500}, headers=auth_headers
    )
    assert response.status_code == 422
    assert response.json()["details"][0]["field"] == "limit"


@pytest.mark.asyncio
async def test_service_catalog(
    client: AsyncClient, auth_headers: dict, admin_headers: dict
) -> None:
    """Admins manage services; inactive services drop out of the listing."""
    payload = {"name": "Manicure", "duration_minutes": 45, "base_price": "35.50"}

    assert (
        await client.post("/api/v1/services/", json=payload, headers=auth_headers)
    ).status_code == 403

    created = await client.post("/api/v1/services/", json=payload, headers=admin_headers)
    assert created.status_code == 201
    service_id = created.json()["id"]

    deactivated = await client.patch(
        f"/api/v1/services/{service_id}", json={"active": False}, headers=admin_headers
    )
    assert deactivated.status_code == 200

    listing = await client.get("/api/v1/services/", headers=auth_headers)
    assert service_id not in [item["id"] for item in listing.json()]


@pytest.mark.asyncio
async def test_professional_schedule_and_time_off(
    client: AsyncClient, auth_headers: dict, admin_headers: dict, tenant: dict
) -> None:
    """Rules need an admin; time off can be recorded by any staff member."""
    created = await client.post(
        "/api/v1/professionals/",
        json={"unit_id": str(tenant["unit"].id), "name": "Marcos Massagista"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    professional_id = created.json()["id"]

    rule = {"day_of_week": 2, "start_time": "13:00", "end_time": "18:00", "slot_minutes": 60}
    assert (
        await client.post(
            f"/api/v1/professionals/{professional_id}/schedule-rules",
            json=rule,
            headers=auth_headers,
        )
    ).status_code == 403

    rule_response = await client.post(
        f"/api/v1/professionals/{professional_id}/schedule-rules",
        json=rule,
        headers=admin_headers,
    )
    assert rule_response.status_code == 201
    assert rule_response.json()["start_time"] == "13:00"

    rules = await client.get(
        f"/api/v1/professionals/{professional_id}/schedule-rules", headers=auth_headers
    )
    assert len(rules.json()) == 1

    time_off = await client.post(
        f"/api/v1/professionals/{professional_id}/time-off",
        json={
            "start": "2030-01-08T16:00:00Z",
            "end": "2030-01-08T18:00:00Z",
            "reason": "Curso de atualização",
        },
        headers=auth_headers,
    )
    assert time_off.status_code == 201

    inside = await client.get(
        f"/api/v1/professionals/{professional_id}/time-off",
        params={"start": "2030-01-08T17:00:00Z", "end": "2030-01-08T19:00:00Z"},
        headers=auth_headers,
    )
    outside = await client.get(
        f"/api/v1/professionals/{professional_id}/time-off",
        params={"start": "2030-01-08T18:00:00Z", "end": "2030-01-08T19:00:00Z"},
        headers=auth_headers,
    )
    assert len(inside.json()) == 1
    assert outside.json() == []

    after_end = await client.get(
        f"/api/v1/professionals/{professional_id}/time-off",
        params={"start": "2030-01-08T18:00:00Z"},
        headers=auth_headers,
    )
    before_end = await client.get(
        f"/api/v1/professionals/{professional_id}/time-off",
        params={"end": "2030-01-08T17:00:00Z"},
        headers=auth_headers,
    )
    before_start = await client.get(
        f"/api/v1/professionals/{professional_id}/time-off",
        params={"end": "2030-01-08T16:00:00Z"},
        headers=auth_headers,
    )
    assert after_end.json() == []
    assert len(before_end.json()) == 1
    assert before_start.json() == []

    unit_staff = await client.get(
        f"/api/v1/units/{tenant['unit'].id}/professionals", headers=auth_headers
    )
    assert professional_id in [item["id"] for item in unit_staff.json()]


@pytest.mark.asyncio
async def test_tenants_are_isolated(
    client: AsyncClient, admin_headers: dict, database, tenant: dict
) -> None:
    """Rows of another tenant are not visible."""
    from agenda.schemas.tenants import TenantCreate
    from agenda.schemas.units import UnitCreate
    from agenda.services.tenant_service import TenantService
    from agenda.services.unit_service import UnitService

    other = await TenantService(database).create_tenant(TenantCreate(name="Concorrente"))
    foreign_unit = await UnitService(database).create_unit(
        other.id, UnitCreate(name="Loja", address="Rua Augusta, 500")
    )

    response = await client.get(f"/api/v1/units/{foreign_unit.id}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_report_and_notification_queue(
    client: AsyncClient,
    auth_headers: dict,
    admin_headers: dict,
    tenant: dict,
    professional,
    service,
) -> None:
    """Bookings show up in the report and queue a pending notification."""
    booked = await client.post(
        "/api/v1/appointments/",
        json={
            "unit_id": str(tenant["unit"].id),
            "professional_id": str(professional.id),
            "service_id": str(service.id),
            "customer_id": str(tenant["customer"].id),
            "start": MONDAY_10AM,
        },
        headers=auth_headers,
    )
    assert booked.status_code == 201

    params = {"from": "2030-01-07", "to": "2030-01-07"}
    assert (
        await client.get("/api/v1/reports/appointments", params=params, headers=auth_headers)
    ).status_code == 403

    report = await client.get("/api/v1/reports/appointments", params=params, headers=admin_headers)
    assert report.status_code == 200
    data = report.json()
    assert data["total"] == 1
    assert data["by_status"] == {"pending": 1}
    assert data["by_date"] == {"2030-01-07": 1}
    assert data["by_professional"] == {str(professional.id): 1}

    pending = await client.get("/api/v1/notifications/pending", headers=admin_headers)
    assert pending.status_code == 200
    notifications = pending.json()
    assert len(notifications) == 1
    assert notifications[0]["template_code"] == "appointment_created"

    sent = await client.patch(
        f"/api/v1/notifications/{notifications[0]['id']}",
        json={"status": "sent"},
        headers=admin_headers,
    )
    assert sent.status_code == 200
    assert sent.json()["sent_at"] is not None

    after = await client.get("/api/v1/notifications/pending", headers=admin_headers)
    assert after.json() == []
