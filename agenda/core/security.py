"""Security utilities for JWT and password handling."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

BCRYPT_ROUNDS = 12

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed or unknown hash
        return False


def generate_jwt(
    payload: dict[str, Any],
    secret: str,
    expires_delta: timedelta = timedelta(hours=1),
    algorithm: str = "HS256",
) -> str:
    """
    Sign a JWT.

    Args:
        payload: Claims to encode
        secret: Signing secret
        expires_delta: Lifetime of the token
        algorithm: Signing algorithm

    Returns:
        Encoded JWT token
    """
    to_encode = payload.copy()
    now = datetime.now(UTC)

    to_encode.update(
        {
            "exp": now + expires_delta,
            "iat": now,
        }
    )

    return jwt.encode(to_encode, secret, algorithm=algorithm)


def verify_jwt(
    token: str,
    secret: str,
    algorithms: list[str] | None = None,
    audience: str | None = None,
) -> dict[str, Any] | None:
    """
    Decode and validate a JWT.

    Args:
        token: JWT token to decode
        secret: Verification secret
        algorithms: Accepted algorithms (HS256 when omitted)
        audience: Expected ``aud`` claim, if the issuer sets one

    Returns:
        Decoded payload or None if invalid
    """
    options = {"verify_aud": audience is not None}
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=algorithms or ["HS256"],
            audience=audience,
            options=options,
        )
    except JWTError:
        return None
