"""
Domain layer - Pure business logic with zero framework imports.

This package contains the signup and email verification workflows.
It defines its own port interfaces for infrastructure abstraction,
ensuring true hexagonal architecture decoupling.
"""

from .account import Account, AccountState
from .config import SignupConfig
from .events import EventHooks, SignupEvent
from .exceptions import (
    AccountExists,
    AccountNotFound,
    AlreadyVerified,
    DeliveryFailed,
    ErrorCode,
    InfrastructureError,
    InvalidInput,
    NameTaken,
    RepositoryUnavailable,
    SignupError,
)
from .ports import AccountRepository, LookupField, Notifier, SignupOutcome, VerifyResult
from .signup import SignupService
from .tokens import IssuedToken, TokenIssuer, is_well_formed_token
from .validation import validate_resend, validate_signup

__all__ = [
    "Account",
    "AccountExists",
    "AccountNotFound",
    "AccountRepository",
    "AccountState",
    "AlreadyVerified",
    "DeliveryFailed",
    "ErrorCode",
    "EventHooks",
    "InfrastructureError",
    "InvalidInput",
    "IssuedToken",
    "LookupField",
    "NameTaken",
    "Notifier",
    "RepositoryUnavailable",
    "SignupConfig",
    "SignupError",
    "SignupEvent",
    "SignupOutcome",
    "SignupService",
    "TokenIssuer",
    "VerifyResult",
    "is_well_formed_token",
    "validate_resend",
    "validate_signup",
]
