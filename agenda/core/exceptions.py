"""Custom application exceptions."""

from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError


class FieldError(BaseModel):
    """A single field-level validation failure."""

    field: str
    message: str
    code: str


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ConfigurationException(AppException):
    """Required configuration is missing or invalid."""

    def __init__(self, message: str = "Invalid configuration"):
        """Initialize with 500 status code."""
        super().__init__(message, status_code=500)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class UnauthorizedException(AppException):
    """Unauthorized access exception."""

    def __init__(self, message: str = "Unauthorized"):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401)


class ForbiddenException(AppException):
    """Forbidden access exception."""

    def __init__(self, message: str = "Forbidden"):
        """Initialize with 403 status code."""
        super().__init__(message, status_code=403)


class BadRequestException(AppException):
    """Bad request exception."""

    def __init__(self, message: str = "Bad request"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class ConflictException(AppException):
    """Conflict exception."""

    def __init__(self, message: str = "Conflict"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class ValidationException(AppException):
    """Validation error exception with per-field details."""

    def __init__(
        self,
        message: str = "Validation error",
        errors: list[FieldError] | None = None,
    ):
        """Initialize with 422 status code."""
        super().__init__(message, status_code=422)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationException":
        """Build from a pydantic validation error."""
        return cls("Validation error", errors=field_errors(exc.errors()))


class BackendException(AppException):
    """Error reported by the hosted backend, passed through as-is."""

    def __init__(self, message: str, status_code: int = 502, payload: Any = None):
        """Initialize with the backend's status code."""
        super().__init__(message, status_code=status_code)
        self.payload = payload


def field_errors(errors: list[dict[str, Any]] | Any) -> list[FieldError]:
    """
    Flatten pydantic error dicts into field errors.

    Args:
        errors: Output of ``ValidationError.errors()``

    Returns:
        One FieldError per violation, with a dotted field path
    """
    result = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        result.append(
            FieldError(
                field=".".join(loc) or "__root__",
                message=error.get("msg", "Invalid value"),
                code=error.get("type", "invalid"),
            )
        )
    return result
