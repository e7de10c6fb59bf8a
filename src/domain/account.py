"""
Account entity - the record a signup creates and verification completes.

Account State Machine (derived, never stored)
=============================================

States:
- PENDING: unverified, token present and not yet expired
- EXPIRED: unverified, token past its expiry (or cleared after expiry)
- VERIFIED: email verified, no token (terminal)

Transitions:
    (none)  -> PENDING   signup
    PENDING -> PENDING   resend (new token replaces the old one)
    EXPIRED -> PENDING   resend
    PENDING -> EXPIRED   time passes; detected lazily at verification
    PENDING -> VERIFIED  verification with a live token

Invariant: signup_token and signup_token_expires are both set or both None.
The helpers below are the only code paths that touch them.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AccountState(str, Enum):
    """Derived lifecycle state of an account."""

    PENDING = "PENDING"
    EXPIRED = "EXPIRED"
    VERIFIED = "VERIFIED"


@dataclass
class Account:
    """An account and its outstanding email verification, if any."""

    name: str
    email: str
    account_type: str
    password_credential: str
    email_verified: bool = False
    email_verification_timestamp: datetime | None = None
    signup_token: str | None = None
    signup_token_expires: datetime | None = None
    id: int | None = None
    created_at: datetime | None = None

    def assign_token(self, token: str, expires: datetime) -> None:
        """Attach a verification token, replacing any outstanding one."""
        self.signup_token = token
        self.signup_token_expires = expires

    def clear_token(self) -> None:
        self.signup_token = None
        self.signup_token_expires = None

    def is_token_expired(self, now: datetime) -> bool:
        """
        Check the outstanding token against the reference instant.

        The expiry instant itself counts as expired: a token is only
        valid while now < signup_token_expires. An account without a
        token has nothing left to verify and is reported as expired.
        """
        if self.signup_token_expires is None:
            return True
        return now >= self.signup_token_expires

    def mark_verified(self, now: datetime) -> None:
        """Complete verification: set the flag and timestamp, drop the token."""
        self.email_verified = True
        self.email_verification_timestamp = now
        self.clear_token()

    def state(self, now: datetime) -> AccountState:
        if self.email_verified:
            return AccountState.VERIFIED
        if self.is_token_expired(now):
            return AccountState.EXPIRED
        return AccountState.PENDING
