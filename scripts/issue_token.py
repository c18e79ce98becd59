#!/usr/bin/env python3
"""
Sign a development access token for an existing user.

Tokens are normally issued by the auth backend; this mirrors its claims so
the API can be exercised locally.

Usage:
    python scripts/issue_token.py <user_id> [--minutes 60]
"""

import argparse
from datetime import timedelta

from dotenv import load_dotenv

from agenda.config import get_settings
from agenda.core.security import generate_jwt


def main() -> None:
    """Print a signed token for the given user id."""
    parser = argparse.ArgumentParser(description="Sign a development access token")
    parser.add_argument("user_id", help="users.id of the staff member")
    parser.add_argument("--minutes", type=int, default=None, help="Token lifetime")
    args = parser.parse_args()

    settings = get_settings()
    minutes = args.minutes or settings.access_token_expire_minutes
    claims = {"sub": args.user_id, "role": "authenticated"}
    if settings.jwt_audience:
        claims["aud"] = settings.jwt_audience

    print(
        generate_jwt(
            claims,
            settings.jwt_secret_key,
            expires_delta=timedelta(minutes=minutes),
            algorithm=settings.jwt_algorithm,
        )
    )


if __name__ == "__main__":
    load_dotenv()
    main()
