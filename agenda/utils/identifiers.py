"""Random identifiers and keys."""

import secrets
import string

ALPHABET = string.ascii_letters + string.digits + "_-"
ALPHANUMERIC = string.ascii_letters + string.digits


def _random_token(length: int, alphabet: str = ALPHABET) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_id(length: int = 16) -> str:
    """Short URL-safe id."""
    return _random_token(length)


def generate_idempotency_key() -> str:
    """Key a client can attach to a booking request."""
    return f"idemp_{_random_token(32)}"


def generate_api_key() -> str:
    """Public API key."""
    return f"pk_{_random_token(32)}"


def generate_secret_key() -> str:
    """Secret API key."""
    return f"sk_{_random_token(64)}"


def generate_random_string(length: int) -> str:
    """Random alphanumeric string."""
    return _random_token(length, ALPHANUMERIC)
