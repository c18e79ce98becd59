"""Database models."""

from agenda.models.appointments import OCCUPYING_STATUSES, appointments
from agenda.models.base import metadata
from agenda.models.customers import DEFAULT_CONSENT_FLAGS, customers
from agenda.models.notifications import notifications
from agenda.models.professionals import professionals
from agenda.models.schedule_rules import schedule_rules
from agenda.models.services import services
from agenda.models.tenants import tenants
from agenda.models.time_off import time_off
from agenda.models.units import units
from agenda.models.users import users

__all__ = [
    "DEFAULT_CONSENT_FLAGS",
    "OCCUPYING_STATUSES",
    "appointments",
    "customers",
    "metadata",
    "notifications",
    "professionals",
    "schedule_rules",
    "services",
    "tenants",
    "time_off",
    "units",
    "users",
]
