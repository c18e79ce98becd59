"""Payment request and response schemas (types only, no processing)."""

from decimal import Decimal
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from agenda.schemas.common import Name, Phone


class PaymentMethodType(str, Enum):
    """Supported payment providers."""

    MERCADOPAGO = "mercadopago"
    STRIPE = "stripe"


class PaymentStatus(str, Enum):
    """Payment lifecycle states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class PaymentCustomer(BaseModel):
    """Payer details."""

    name: Name
    email: EmailStr
    phone: Phone | None = None


class PaymentRequest(BaseModel):
    """Request to charge for an appointment."""

    appointment_id: UUID
    amount: Decimal = Field(..., gt=0)
    currency: Literal["BRL"] = "BRL"
    method: PaymentMethodType
    customer_data: PaymentCustomer


class PaymentResponse(BaseModel):
    """Provider answer to a payment request."""

    id: str
    status: PaymentStatus
    checkout_url: str | None = None
    external_id: str | None = None
