import os
from collections.abc import AsyncGenerator
from datetime import timedelta
from decimal import Decimal

# Required settings must exist before the application modules are imported
os.environ.setdefault("BACKEND_URL", "http://auth.test")
os.environ.setdefault("BACKEND_ANON_KEY", "test-anon-key")
os.environ.setdefault("BACKEND_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SERVICE_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from agenda.config import Settings, load_settings
from agenda.core.auth_client import AuthClient
from agenda.core.security import generate_jwt
from agenda.database import Database
from agenda.main import create_app
from agenda.schemas.customers import CustomerCreate
from agenda.schemas.professionals import ProfessionalCreate
from agenda.schemas.schedule import ScheduleRuleCreate
from agenda.schemas.services import ServiceCreate
from agenda.schemas.tenants import TenantCreate
from agenda.schemas.units import UnitCreate
from agenda.schemas.users import UserCreate, UserRole
from agenda.services.catalog_service import CatalogService
from agenda.services.customer_service import CustomerService
from agenda.services.professional_service import ProfessionalService
from agenda.services.schedule_service import ScheduleService
from agenda.services.tenant_service import TenantService
from agenda.services.unit_service import UnitService
from agenda.services.user_service import UserService

JWT_SECRET = "test-jwt-secret"
UNIT_TIMEZONE = "America/Sao_Paulo"


def auth_backend_handler(request: httpx.Request) -> httpx.Response:
    """Stand-in for the hosted auth backend; answers are keyed on the path."""
    return httpx.Response(404, json={"msg": f"No route for {request.url.path}"})


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing both credential tiers at one SQLite file."""
    url = f"sqlite+aiosqlite:///{tmp_path}/test.db"
    return load_settings(
        DATABASE_URL=url,
        SERVICE_DATABASE_URL=url,
        JWT_SECRET_KEY=JWT_SECRET,
        LOG_FORMAT="console",
        ENVIRONMENT="test",
    )


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Create a test database with every table."""
    database = Database(settings.database_url, settings.service_database_url)
    await database.create_all()

    yield database

    await database.drop_all()
    await database.dispose()


@pytest.fixture
def auth_handler():
    """Request handler used by the mocked auth backend (override per test)."""
    return auth_backend_handler


@pytest_asyncio.fixture
async def auth_client(settings: Settings, auth_handler) -> AsyncGenerator[AuthClient, None]:
    """Auth backend client talking to an in-process mock."""
    client = AuthClient(
        settings.backend_url,
        settings.backend_anon_key,
        service_role_key=settings.backend_service_role_key,
        transport=httpx.MockTransport(auth_handler),
    )

    yield client

    await client.close()


@pytest_asyncio.fixture
async def client(
    settings: Settings, database: Database, auth_client: AuthClient
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    app = create_app(settings, database=database, auth_client=auth_client)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def tenant(database: Database) -> dict:
    """A tenant with one unit, an admin, a receptionist and a customer."""
    tenant = await TenantService(database).create_tenant(TenantCreate(name="Studio Bella"))
    unit = await UnitService(database).create_unit(
        tenant.id,
        UnitCreate(name="Centro", address="Rua das Flores, 100", timezone=UNIT_TIMEZONE),
    )
    users = UserService(database)
    admin = await users.create_user(
        tenant.id,
        UserCreate(name="Ana Admin", email="admin@studiobella.com.br", role=UserRole.ADMIN),
    )
    reception = await users.create_user(
        tenant.id,
        UserCreate(
            name="Rita Recepção",
            email="reception@studiobella.com.br",
            role=UserRole.RECEPTION,
        ),
    )
    customer = await CustomerService(database).create_customer(
        tenant.id,
        CustomerCreate(name="Carla Cliente", email="carla@gmail.com", phone="+5511987654321"),
    )

    return {
        "id": tenant.id,
        "unit": unit,
        "admin": admin,
        "reception": reception,
        "customer": customer,
    }


@pytest_asyncio.fixture
async def professional(database: Database, tenant: dict):
    """A professional working Mondays 09:00-12:00 in 30-minute steps."""
    professional = await ProfessionalService(database).create_professional(
        tenant["id"],
        ProfessionalCreate(unit_id=tenant["unit"].id, name="Paula Profissional"),
    )
    await ScheduleService(database).create_rule(
        tenant["id"],
        professional.id,
        ScheduleRuleCreate(day_of_week=1, start_time="09:00", end_time="12:00", slot_minutes=30),
    )
    return professional


@pytest_asyncio.fixture
async def service(database: Database, tenant: dict):
    """A 30-minute service."""
    return await CatalogService(database).create_service(
        tenant["id"],
        ServiceCreate(name="Corte de cabelo", duration_minutes=30, base_price=Decimal("80.00")),
    )


def bearer(user_id, secret: str = JWT_SECRET, **claims) -> dict:
    """Authorization header carrying a token for ``user_id``."""
    payload = {"sub": str(user_id), "aud": "authenticated", **claims}
    token = generate_jwt(payload, secret, expires_delta=timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(tenant: dict) -> dict:
    """Create authentication headers for the tenant's admin."""
    return bearer(tenant["admin"].id)


@pytest.fixture
def auth_headers(tenant: dict) -> dict:
    """Create authentication headers for a non-admin staff member."""
    return bearer(tenant["reception"].id)
