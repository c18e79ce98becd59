"""Public application configuration schema."""

from pydantic import BaseModel, Field


class AppConfig(BaseModel):
    """Locale and feature flags exposed to clients."""

    timezone: str = Field(default="America/Sao_Paulo")
    locale: str = Field(default="pt-BR")
    currency: str = Field(default="BRL")
    enable_payments: bool = Field(default=False)
    enable_notifications: bool = Field(default=True)
