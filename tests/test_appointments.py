"""Tests for booking, conflict detection and idempotent replay."""

import asyncio
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from agenda.config import Settings
from agenda.core.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
    ValidationException,
)
from agenda.database import CredentialTier, Database
from agenda.models import appointments, notifications
from agenda.schemas.appointments import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdate,
    AppointmentUpdate,
    CustomerData,
)
from agenda.schemas.customers import ConsentFlags, CustomerUpdate
from agenda.schemas.tenants import TenantCreate
from agenda.schemas.units import UnitCreate
from agenda.services.appointment_service import AppointmentService
from agenda.services.customer_service import CustomerService
from agenda.services.tenant_service import TenantService
from agenda.services.unit_service import UnitService

# Monday 2030-01-07, 10:00 in Sao Paulo
START = datetime(2030, 1, 7, 13, 0, tzinfo=UTC)


def booking(tenant: dict, professional, service, **overrides) -> AppointmentCreate:
    data = {
        "unit_id": tenant["unit"].id,
        "professional_id": professional.id,
        "service_id": service.id,
        "customer_id": tenant["customer"].id,
        "start": START,
    }
    data.update(overrides)
    return AppointmentCreate(**data)


@pytest.fixture
def appointment_service(database: Database, settings: Settings) -> AppointmentService:
    return AppointmentService(database, settings)


async def count_rows(database: Database, table) -> int:
    async with database.session(CredentialTier.SERVICE) as db:
        return (await db.execute(select(func.count()).select_from(table))).scalar_one()


async def test_create_appointment_derives_end_and_price(
    appointment_service, tenant, professional, service
) -> None:
    """The end comes from the service duration and the price from its base price."""
    appointment = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )

    assert appointment.start == START
    assert appointment.end == START + timedelta(minutes=30)
    assert appointment.status == AppointmentStatus.PENDING
    assert appointment.price_estimate == Decimal("80.00")
    assert appointment.customer_name == "Carla Cliente"
    assert appointment.professional_name == "Paula Profissional"
    assert appointment.service_name == "Corte de cabelo"


async def test_overlapping_booking_is_rejected(
    appointment_service, database, tenant, professional, service
) -> None:
    """A second booking intersecting an occupying one raises a conflict."""
    await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )

    with pytest.raises(ConflictException):
        await appointment_service.create_appointment(
            tenant["id"],
            booking(tenant, professional, service, start=START + timedelta(minutes=15)),
        )

    assert await count_rows(database, appointments) == 1


async def test_simultaneous_bookings_for_one_slot_create_one_row(
    appointment_service, database, tenant, professional, service
) -> None:
    """Two overlapping bookings sent at once leave a single appointment."""
    results = await asyncio.gather(
        appointment_service.create_appointment(
            tenant["id"], booking(tenant, professional, service)
        ),
        appointment_service.create_appointment(
            tenant["id"],
            booking(tenant, professional, service, start=START + timedelta(minutes=15)),
        ),
        return_exceptions=True,
    )

    created = [result for result in results if isinstance(result, AppointmentResponse)]
    rejected = [result for result in results if isinstance(result, ConflictException)]
    assert len(created) == 1
    assert len(rejected) == 1
    assert await count_rows(database, appointments) == 1


async def test_back_to_back_bookings_are_allowed(
    appointment_service, tenant, professional, service
) -> None:
    """A booking starting exactly when another ends does not conflict."""
    first = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )
    second = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service, start=first.end)
    )

    assert second.start == first.end


async def test_cancelled_appointment_frees_the_slot(
    appointment_service, tenant, professional, service
) -> None:
    """Cancelled appointments do not block new bookings."""
    first = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )
    await appointment_service.update_status(
        tenant["id"], first.id, AppointmentStatusUpdate(status=AppointmentStatus.CANCELLED)
    )

    second = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )

    assert second.id != first.id


async def test_idempotent_replay_returns_original(
    appointment_service, database, tenant, professional, service
) -> None:
    """Repeating a request with the same key returns the first appointment."""
    data = booking(tenant, professional, service, idempotency_key="idemp_retry_1")

    first = await appointment_service.create_appointment(tenant["id"], data)
    second = await appointment_service.create_appointment(tenant["id"], data)

    assert second.id == first.id
    assert await count_rows(database, appointments) == 1


async def test_idempotency_key_from_other_tenant_conflicts(
    appointment_service, database, tenant, professional, service
) -> None:
    """A key already used by another tenant is not replayed across tenants."""
    data = booking(tenant, professional, service, idempotency_key="idemp_shared")
    await appointment_service.create_appointment(tenant["id"], data)

    other = await TenantService(database).create_tenant(TenantCreate(name="Outro Salão"))

    with pytest.raises(ConflictException):
        await appointment_service.create_appointment(other.id, data)


async def test_check_idempotency(appointment_service, tenant, professional, service) -> None:
    """Looking up a key finds the appointment it created."""
    assert await appointment_service.check_idempotency("idemp_unknown") is None

    created = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service, idempotency_key="idemp_lookup")
    )
    found = await appointment_service.check_idempotency("idemp_lookup")

    assert found is not None
    assert found.id == created.id


async def test_professional_from_other_unit_is_rejected(
    appointment_service, database, tenant, professional, service
) -> None:
    """The professional must work at the requested unit."""
    other_unit = await UnitService(database).create_unit(
        tenant["id"], UnitCreate(name="Filial", address="Avenida Paulista, 1000")
    )

    with pytest.raises(BadRequestException):
        await appointment_service.create_appointment(
            tenant["id"], booking(tenant, professional, service, unit_id=other_unit.id)
        )


async def test_unknown_service_is_not_found(
    appointment_service, tenant, professional, service
) -> None:
    """Referencing a service of no tenant raises NotFoundException."""
    with pytest.raises(NotFoundException):
        await appointment_service.create_appointment(
            tenant["id"], booking(tenant, professional, service, service_id=tenant["unit"].id)
        )


async def test_inline_customer_is_created_once(
    appointment_service, database, tenant, professional, service
) -> None:
    """Inline customer data creates the customer, then reuses it by email."""
    customer = CustomerData(name="Nova Cliente", email="nova@gmail.com")

    first = await appointment_service.create_appointment(
        tenant["id"],
        booking(tenant, professional, service, customer_id=None, customer_data=customer),
    )
    second = await appointment_service.create_appointment(
        tenant["id"],
        booking(
            tenant,
            professional,
            service,
            customer_id=None,
            customer_data=customer,
            start=first.end,
        ),
    )

    assert first.customer_id == second.customer_id
    assert first.customer_email == "nova@gmail.com"


async def test_update_moving_start_keeps_duration(
    appointment_service, tenant, professional, service
) -> None:
    """Moving only the start shifts the end by the same amount."""
    appointment = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )

    moved = await appointment_service.update_appointment(
        tenant["id"], appointment.id, AppointmentUpdate(start=START + timedelta(hours=1))
    )

    assert moved.start == START + timedelta(hours=1)
    assert moved.end == START + timedelta(hours=1, minutes=30)


async def test_update_into_taken_interval_conflicts(
    appointment_service, tenant, professional, service
) -> None:
    """Updates run the conflict check, ignoring the appointment itself."""
    first = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )
    second = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service, start=first.end)
    )

    # Shifting within its own interval only overlaps itself
    await appointment_service.update_appointment(
        tenant["id"], second.id, AppointmentUpdate(start=second.start + timedelta(minutes=10))
    )

    with pytest.raises(ConflictException):
        await appointment_service.update_appointment(
            tenant["id"], second.id, AppointmentUpdate(start=first.start)
        )


async def test_update_with_end_before_start_is_invalid(
    appointment_service, tenant, professional, service
) -> None:
    """An update leaving an empty interval raises ValidationException."""
    appointment = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )

    with pytest.raises(ValidationException):
        await appointment_service.update_appointment(
            tenant["id"], appointment.id, AppointmentUpdate(end=START - timedelta(minutes=5))
        )


async def test_list_appointments_filters_by_status(
    appointment_service, tenant, professional, service
) -> None:
    """Listing filters by status and reports pagination metadata."""
    first = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )
    await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service, start=first.end)
    )
    await appointment_service.update_status(
        tenant["id"], first.id, AppointmentStatusUpdate(status=AppointmentStatus.CONFIRMED)
    )

    everything = await appointment_service.list_appointments(tenant["id"], AppointmentFilters())
    confirmed = await appointment_service.list_appointments(
        tenant["id"], AppointmentFilters(status=AppointmentStatus.CONFIRMED)
    )

    assert everything.meta.total == 2
    # Latest start first
    assert everything.data[0].start > everything.data[1].start
    assert [item.id for item in confirmed.data] == [first.id]


async def test_delete_appointment(appointment_service, tenant, professional, service) -> None:
    """Deleted appointments are gone; deleting twice raises NotFoundException."""
    appointment = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )

    await appointment_service.delete_appointment(tenant["id"], appointment.id)

    with pytest.raises(NotFoundException):
        await appointment_service.get_appointment(tenant["id"], appointment.id)
    with pytest.raises(NotFoundException):
        await appointment_service.delete_appointment(tenant["id"], appointment.id)


async def test_get_conflicting_appointments(
    appointment_service, tenant, professional, service
) -> None:
    """Conflicts are reported for intersecting intervals only."""
    appointment = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )

    overlapping = await appointment_service.get_conflicting_appointments(
        professional.id, START + timedelta(minutes=10), START + timedelta(minutes=40)
    )
    touching = await appointment_service.get_conflicting_appointments(
        professional.id, appointment.end, appointment.end + timedelta(minutes=30)
    )
    excluded = await appointment_service.get_conflicting_appointments(
        professional.id, START, appointment.end, exclude_id=appointment.id
    )

    assert [item.id for item in overlapping] == [appointment.id]
    assert touching == []
    assert excluded == []


async def test_booking_queues_customer_notification(
    appointment_service, database, tenant, professional, service
) -> None:
    """Creating and re-statusing a booking queue one email each."""
    appointment = await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )
    await appointment_service.update_status(
        tenant["id"], appointment.id, AppointmentStatusUpdate(status=AppointmentStatus.CONFIRMED)
    )

    async with database.session(CredentialTier.SERVICE) as db:
        result = await db.execute(select(notifications).order_by(notifications.c.template_code))
        rows = result.mappings().all()

    assert [row["template_code"] for row in rows] == [
        "appointment_created",
        "appointment_status_changed",
    ]
    payload = rows[0]["payload_json"]
    assert rows[0]["to"] == "carla@gmail.com"
    assert payload["date"] == "07/01/2030"
    assert payload["time"] == "10:00"
    assert payload["price"] == "R$ 80,00"


async def test_no_notification_without_consent(
    appointment_service, database, tenant, professional, service
) -> None:
    """Customers who opted out receive nothing."""
    await CustomerService(database).update_customer(
        tenant["id"],
        tenant["customer"].id,
        CustomerUpdate(consent_flags=ConsentFlags(notifications=False)),
    )

    await appointment_service.create_appointment(
        tenant["id"], booking(tenant, professional, service)
    )

    assert await count_rows(database, notifications) == 0


async def test_create_appointment_endpoint(
    client, auth_headers, tenant, professional, service
) -> None:
    """Booking over HTTP returns 201 and a repeated conflicting booking 409."""
    payload = {
        "unit_id": str(tenant["unit"].id),
        "professional_id": str(professional.id),
        "service_id": str(service.id),
        "customer_id": str(tenant["customer"].id),
        "start": START.isoformat(),
        "idempotency_key": "idemp_http",
    }

    response = await client.post("/api/v1/appointments/", json=payload, headers=auth_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["end"].startswith("2030-01-07T13:30:00")

    replay = await client.post("/api/v1/appointments/", json=payload, headers=auth_headers)
    assert replay.status_code == 201
    assert replay.json()["id"] == data["id"]

    payload["idempotency_key"] = "idemp_http_other"
    conflict = await client.post("/api/v1/appointments/", json=payload, headers=auth_headers)
    assert conflict.status_code == 409
    assert conflict.json()["error"] == "ConflictException"


async def test_create_appointment_requires_customer(
    client, auth_headers, tenant, professional, service
) -> None:
    """A booking without customer_id or customer_data fails validation."""
    payload = {
        "unit_id": str(tenant["unit"].id),
        "professional_id": str(professional.id),
        "service_id": str(service.id),
        "start": START.isoformat(),
    }

    response = await client.post("/api/v1/appointments/", json=payload, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["details"]


async def test_appointment_status_endpoint(
    client, auth_headers, tenant, professional, service
) -> None:
    """Status changes are exposed at /appointments/{id}/status."""
    payload = {
        "unit_id": str(tenant["unit"].id),
        "professional_id": str(professional.id),
        "service_id": str(service.id),
        "customer_id": str(tenant["customer"].id),
        "start": START.isoformat(),
    }
    created = await client.post("/api/v1/appointments/", json=payload, headers=auth_headers)
    appointment_id = created.json()["id"]

    response = await client.patch(
        f"/api/v1/appointments/{appointment_id}/status",
        json={"status": "confirmed"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"

    listing = await client.get(
        "/api/v1/appointments/", params={"status": "confirmed"}, headers=auth_headers
    )
    assert listing.status_code == 200
    assert listing.json()["meta"]["total"] == 1


async def test_appointments_require_authentication(client) -> None:
    """Unauthenticated requests are rejected with 401."""
    response = await client.get("/api/v1/appointments/")
    assert response.status_code == 401


async def test_update_endpoint_rejects_null_required_fields(
    client, auth_headers, tenant, professional, service
) -> None:
    """Explicit nulls on status or start are validation errors, not conflicts."""
    payload = {
        "unit_id": str(tenant["unit"].id),
        "professional_id": str(professional.id),
        "service_id": str(service.id),
        "customer_id": str(tenant["customer"].id),
        "start": START.isoformat(),
    }
    created = await client.post("/api/v1/appointments/", json=payload, headers=auth_headers)
    appointment_id = created.json()["id"]

    for body, field in (({"status": None}, "status"), ({"start": None}, "start")):
        response = await client.patch(
            f"/api/v1/appointments/{appointment_id}", json=body, headers=auth_headers
        )
        assert response.status_code == 422
        assert [detail["field"] for detail in response.json()["details"]] == [field]

    cleared = await client.patch(
        f"/api/v1/appointments/{appointment_id}", json={"notes": None}, headers=auth_headers
    )
    assert cleared.status_code == 200
    assert cleared.json()["status"] == "pending"
