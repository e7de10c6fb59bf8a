"""
Domain exceptions - Semantic error types for signup and verification.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.

Every rule violation carries a stable ErrorCode so callers can
serialize it without inspecting the exception type.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """
    Stable error codes returned to clients.

    Codes 01-06 are signup validation failures in check order,
    08 is the resend validation failure, 07/10/11 are conflicts
    and 09 reports an expired verification link.
    """

    MISSING_FIELDS = "signup.01"
    NAME_NOT_URL_SAFE = "signup.02"
    NAME_NOT_LOWERCASE = "signup.03"
    NAME_NOT_LETTER_FIRST = "signup.04"
    INVALID_EMAIL = "signup.05"
    MISSING_ACCOUNT_TYPE = "signup.06"
    NAME_TAKEN = "signup.07"
    INVALID_RESEND_EMAIL = "signup.08"
    LINK_EXPIRED = "signup.09"
    ACCOUNT_NOT_FOUND = "signup.10"
    ALREADY_VERIFIED = "signup.11"


class SignupError(Exception):
    """Base class for signup domain errors."""

    def __init__(self, code: ErrorCode) -> None:
        super().__init__(code.value)
        self.code = code


class InvalidInput(SignupError):
    """Request data failed validation. No lookup was performed."""

    pass


class NameTaken(SignupError):
    """Another account already owns the requested name."""

    def __init__(self) -> None:
        super().__init__(ErrorCode.NAME_TAKEN)


class AccountNotFound(SignupError):
    """No account owns the email given to resend."""

    def __init__(self) -> None:
        super().__init__(ErrorCode.ACCOUNT_NOT_FOUND)


class AlreadyVerified(SignupError):
    """The account behind the resend email has already been verified."""

    def __init__(self) -> None:
        super().__init__(ErrorCode.ALREADY_VERIFIED)


class AccountExists(Exception):
    """
    Raised by repositories when save() hits a uniqueness constraint.

    Signals that a concurrent signup claimed the name or email
    between the workflow's lookups and its insert.
    """

    def __init__(self, field: str) -> None:
        super().__init__(f"account with this {field} already exists")
        self.field = field


class InfrastructureError(Exception):
    """Base class for collaborator failures (persistence, mail delivery)."""

    pass


class RepositoryUnavailable(InfrastructureError):
    """Persistence call failed."""

    pass


class DeliveryFailed(InfrastructureError):
    """Notification could not be handed to the mail transport."""

    pass
