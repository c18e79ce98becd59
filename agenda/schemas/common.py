"""Shared field types, pagination and validation result schemas."""

from enum import Enum
from typing import Annotated, Any, ClassVar, Generic, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import (
    AfterValidator,
    BaseModel,
    Field,
    StringConstraints,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from agenda.core.exceptions import FieldError, field_errors

PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"
DATE_ONLY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"

Phone = Annotated[str, StringConstraints(pattern=PHONE_PATTERN)]
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]


def _check_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {value}")
    return value


TimezoneName = Annotated[str, AfterValidator(_check_timezone)]

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class PaginationParams(BaseModel):
    """Query parameters for paginated listings."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    search: str | None = None
    sort_by: str | None = None
    sort_order: str = Field(default="asc", pattern="^(asc|desc)$")

    @property
    def offset(self) -> int:
        """Row offset for this page."""
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    """Pagination metadata for list responses."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool


class PaginatedResponse(BaseModel, Generic[T]):
    """A page of items plus metadata."""

    data: list[T]
    meta: PaginationMeta


class ValidationResult(BaseModel, Generic[T]):
    """Outcome of validating a payload without raising."""

    success: bool
    data: T | None = None
    errors: list[FieldError] | None = None


class PartialUpdate(BaseModel):
    """
    Base for partial-update schemas.

    Omitted fields are left unchanged. An explicit null is accepted only for
    the fields in ``nullable_fields``; every other field maps to a column
    that requires a value.
    """

    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    @field_validator("*")
    @classmethod
    def reject_null(cls, value: Any, info: ValidationInfo) -> Any:
        """Reject an explicit null on a field that cannot be cleared."""
        if value is None and info.field_name not in cls.nullable_fields:
            raise ValueError("Field cannot be null")
        return value


class IdempotencyKey(BaseModel):
    """Client-chosen token that de-duplicates a booking request."""

    idempotency_key: str = Field(..., min_length=1, max_length=255)


def validate_payload(schema: type[M], data: Any) -> ValidationResult[M]:
    """
    Validate ``data`` against ``schema``.

    Args:
        schema: Pydantic model to validate against
        data: Raw input

    Returns:
        Result with the parsed model, or the field-level errors
    """
    try:
        return ValidationResult[schema](success=True, data=schema.model_validate(data))
    except ValidationError as e:
        return ValidationResult[schema](success=False, errors=field_errors(e.errors()))


def column_values(model: BaseModel, **dump_options: Any) -> dict[str, Any]:
    """
    Dump a schema into values for a table insert or update.

    Enum members are replaced by their values; ``dump_options`` go to
    ``model_dump`` (e.g. ``exclude_unset=True`` for partial updates).
    """
    values = model.model_dump(**dump_options)
    return {key: value.value if isinstance(value, Enum) else value for key, value in values.items()}
