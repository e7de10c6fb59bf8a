"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from datetime import datetime
from enum import Enum
from typing import Protocol

from .account import Account


class LookupField(str, Enum):
    """Unique account fields the repository can be queried by."""

    NAME = "name"
    EMAIL = "email"
    SIGNUP_TOKEN = "signup_token"


class SignupOutcome(Enum):
    """
    Outward result of signup and resend.

    Signup returns EMAIL_SENT both for a fresh account and for an
    email that is already registered, so callers cannot tell them apart.
    """

    EMAIL_SENT = "email_sent"


class VerifyResult(Enum):
    """
    Result of a verification attempt.

    NOT_APPLICABLE covers both malformed and unknown tokens; the caller
    should fall through to its generic not-found handling.
    """

    VERIFIED = "verified"
    EXPIRED = "expired"
    NOT_APPLICABLE = "not_applicable"


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def find_by(self, field: LookupField, value: str) -> Account | None:
        """
        Look up a single account by a unique field.

        Args:
            field: Which unique field to match
            value: Exact value to match

        Returns:
            The account, or None if no account matches
        """
        ...

    def save(
        self,
        name: str,
        email: str,
        password_credential: str,
        account_type: str,
        signup_token: str,
        signup_token_expires: datetime,
    ) -> Account:
        """
        Insert a new unverified account.

        Assigns identity and creation time.

        Raises:
            AccountExists: name or email is already taken
            RepositoryUnavailable: storage failure
        """
        ...

    def update(self, account: Account, expected_token: str | None = None) -> Account | None:
        """
        Persist the mutable fields of an existing account.

        Writes email_verified, email_verification_timestamp, signup_token
        and signup_token_expires; leaves every other stored field untouched.

        The write is a single compare-and-set: it applies only while the
        stored account is still unverified and, when expected_token is
        given, still holds that token.

        Returns:
            The stored account, or None if a concurrent write changed it
            first and nothing was written

        Raises:
            RepositoryUnavailable: storage failure or unknown account
        """
        ...


class Notifier(Protocol):
    """
    Port interface for signup email delivery.

    Implementations raise DeliveryFailed when the message cannot be
    handed to the mail transport; any other transport error is wrapped.
    """

    def notify_signup(self, name: str, email: str, token: str) -> None:
        """Send the verification link for a new account."""
        ...

    def notify_resend(self, name: str, email: str, token: str) -> None:
        """Send a fresh verification link for an existing account."""
        ...

    def notify_duplicate(self, name: str, email: str) -> None:
        """Tell the owner of an address that someone tried to sign up with it."""
        ...
