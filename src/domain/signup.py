"""
Signup domain service - email verification token state machine.

This module contains the three workflows that move an account through
its verification lifecycle (see src.domain.account for the states):

- signup: validate, reject duplicate names, quietly handle duplicate
  emails, create a PENDING account and mail its token
- resend_verification: reissue the token of an unverified account
- verify: consume a token, either completing verification or clearing
  an expired token

Every step is a single repository or notifier call. Failures of those
collaborators propagate unchanged; nothing is retried or rolled back,
so an account saved before a failed notification stays saved.
"""

import logging
from dataclasses import dataclass, field

import bcrypt

from .account import Account
from .config import SignupConfig
from .events import EventHooks, SignupEvent
from .exceptions import (
    AccountExists,
    AccountNotFound,
    AlreadyVerified,
    InvalidInput,
    NameTaken,
)
from .ports import AccountRepository, LookupField, Notifier, SignupOutcome, VerifyResult
from .tokens import Clock, TokenIssuer, is_well_formed_token, utc_now
from .validation import validate_resend, validate_signup

logger = logging.getLogger(__name__)


@dataclass
class SignupService:
    """
    Domain service for signup and email verification.

    Stateless between calls: all state lives in the repository, so
    one instance may serve concurrent requests.
    """

    repository: AccountRepository
    notifier: Notifier
    config: SignupConfig
    events: EventHooks = field(default_factory=EventHooks)
    clock: Clock = utc_now
    _issuer: TokenIssuer = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._issuer = TokenIssuer(lifetime=self.config.token_lifetime, clock=self.clock)

    def signup(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        account_type: str | None,
    ) -> SignupOutcome:
        """
        Register a new account and mail its verification token.

        If the email already belongs to an account, its owner is notified
        instead and the same EMAIL_SENT outcome is returned, so the
        response does not reveal which addresses are registered.

        Raises:
            InvalidInput: a validation check failed (no lookup performed)
            NameTaken: another account owns the name
            InfrastructureError: repository or notifier failure
        """
        error = validate_signup(name, email, password, account_type)
        if error is not None:
            raise InvalidInput(error)

        if self.repository.find_by(LookupField.NAME, name) is not None:
            raise NameTaken()

        existing = self.repository.find_by(LookupField.EMAIL, email)
        if existing is not None:
            return self._notify_duplicate(existing)

        issued = self._issuer.issue()
        try:
            account = self.repository.save(
                name,
                email,
                self._hash_password(password),
                account_type,
                issued.token,
                issued.expires,
            )
        except AccountExists as exc:
            # Lost a race with a concurrent signup for the same name or email
            if exc.field == LookupField.NAME.value:
                raise NameTaken() from None
            existing = self.repository.find_by(LookupField.EMAIL, email)
            if existing is None:
                raise
            return self._notify_duplicate(existing)

        logger.info("Account created: %s", account.name)
        self.notifier.notify_signup(account.name, account.email, issued.token)
        self.events.publish(SignupEvent.POST_SIGNUP, account)
        return SignupOutcome.EMAIL_SENT

    def resend_verification(self, email: str | None) -> SignupOutcome:
        """
        Issue a fresh token for an unverified account and mail it.

        The new token replaces any outstanding one, so earlier links stop
        working even if they had not expired yet.

        Raises:
            InvalidInput: email missing or malformed
            AccountNotFound: no account owns the email
            AlreadyVerified: the account is already verified
            InfrastructureError: repository or notifier failure
        """
        error = validate_resend(email)
        if error is not None:
            raise InvalidInput(error)

        account = self.repository.find_by(LookupField.EMAIL, email)
        if account is None:
            raise AccountNotFound()
        if account.email_verified:
            raise AlreadyVerified()

        issued = self._issuer.issue()
        account.assign_token(issued.token, issued.expires)
        stored = self.repository.update(account)
        if stored is None:
            # Verified by a concurrent request after the lookup
            raise AlreadyVerified()
        account = stored

        logger.info("Verification token reissued: %s", account.name)
        self.notifier.notify_resend(account.name, account.email, issued.token)
        return SignupOutcome.EMAIL_SENT

    def verify(self, token: str | None) -> VerifyResult:
        """
        Redeem a verification token.

        Returns:
            NOT_APPLICABLE if the token is malformed, unknown, or replaced
            or consumed by a concurrent request before it could be redeemed,
            EXPIRED if it was past its expiry (the token is cleared),
            VERIFIED if the account is now verified (the token is consumed)

        Raises:
            InfrastructureError: repository failure
        """
        if not is_well_formed_token(token):
            return VerifyResult.NOT_APPLICABLE

        account = self.repository.find_by(LookupField.SIGNUP_TOKEN, token)
        if account is None:
            return VerifyResult.NOT_APPLICABLE

        # Writes land only while the account still holds this token
        now = self.clock()
        if account.is_token_expired(now):
            account.clear_token()
            if self.repository.update(account, expected_token=token) is None:
                return VerifyResult.NOT_APPLICABLE
            logger.warning("Expired verification link used: %s", account.name)
            return VerifyResult.EXPIRED

        account.mark_verified(now)
        stored = self.repository.update(account, expected_token=token)
        if stored is None:
            return VerifyResult.NOT_APPLICABLE
        account = stored

        logger.info("Email verified: %s", account.name)
        self.events.publish(SignupEvent.VERIFIED, account)
        return VerifyResult.VERIFIED

    def _notify_duplicate(self, existing: Account) -> SignupOutcome:
        logger.warning("Signup attempted with registered email of %s", existing.name)
        self.notifier.notify_duplicate(existing.name, existing.email)
        return SignupOutcome.EMAIL_SENT

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt with the configured cost factor."""
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.config.bcrypt_cost)).decode()
