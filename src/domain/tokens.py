"""
Signup token issuance and shape checking.

Tokens are 128 random bits from the secrets module, rendered in the
canonical dashed hex form (8-4-4-4-12). Verification links also accept
the legacy 22-character hex form, so both shapes pass the format gate.
"""

import re
import secrets
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

Clock = Callable[[], datetime]

TOKEN_PATTERN = re.compile(
    r"[0-9a-f]{22}|[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)

TOKEN_BYTES = 16


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def generate_token() -> str:
    """Generate an unguessable token in dashed hex form."""
    return str(uuid.UUID(bytes=secrets.token_bytes(TOKEN_BYTES)))


def is_well_formed_token(token: str | None) -> bool:
    """True if the whole string has an accepted token shape."""
    return bool(token) and TOKEN_PATTERN.fullmatch(token) is not None


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires: datetime


@dataclass(frozen=True)
class TokenIssuer:
    """
    Issues signup tokens with an expiry of now + lifetime.

    The clock is injectable so expiry boundaries can be tested
    without sleeping.
    """

    lifetime: timedelta
    clock: Clock = field(default=utc_now)

    def __post_init__(self) -> None:
        if self.lifetime <= timedelta(0):
            raise ValueError("signup token lifetime must be positive")

    def issue(self) -> IssuedToken:
        return IssuedToken(token=generate_token(), expires=self.clock() + self.lifetime)
