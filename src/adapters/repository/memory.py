"""
In-memory repository adapter - Implements AccountRepository protocol.

Dict-backed store for tests and local runs without PostgreSQL.
Mirrors the database guarantees the domain relies on: unique
name/email, single-record compare-and-set updates, and copies on every
read and write so callers only ever mutate their own Account.
"""

import threading
from dataclasses import replace
from datetime import datetime, timezone
from itertools import count

from src.domain.account import Account
from src.domain.exceptions import AccountExists, RepositoryUnavailable
from src.domain.ports import LookupField


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with a locked dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._accounts: dict[int, Account] = {}
        self._ids = count(1)
        self._lock = threading.Lock()

    def find_by(self, field: LookupField, value: str) -> Account | None:
        attribute = LookupField(field).value
        with self._lock:
            for account in self._accounts.values():
                if getattr(account, attribute) == value:
                    return replace(account)
        return None

    def save(
        self,
        name: str,
        email: str,
        password_credential: str,
        account_type: str,
        signup_token: str,
        signup_token_expires: datetime,
    ) -> Account:
        with self._lock:
            for existing in self._accounts.values():
                if existing.name == name:
                    raise AccountExists("name")
                if existing.email == email:
                    raise AccountExists("email")

            account = Account(
                id=next(self._ids),
                name=name,
                email=email,
                account_type=account_type,
                password_credential=password_credential,
                signup_token=signup_token,
                signup_token_expires=signup_token_expires,
                created_at=datetime.now(timezone.utc),
            )
            self._accounts[account.id] = account
            return replace(account)

    def update(self, account: Account, expected_token: str | None = None) -> Account | None:
        """Write the verification fields; other stored fields are preserved."""
        with self._lock:
            stored = self._accounts.get(account.id)
            if stored is None:
                raise RepositoryUnavailable(f"account {account.id} no longer exists")
            if stored.email_verified:
                return None
            if expected_token is not None and stored.signup_token != expected_token:
                return None

            updated = replace(
                stored,
                email_verified=account.email_verified,
                email_verification_timestamp=account.email_verification_timestamp,
                signup_token=account.signup_token,
                signup_token_expires=account.signup_token_expires,
            )
            self._accounts[account.id] = updated
            return replace(updated)

    def all(self) -> list[Account]:
        """Snapshot of every stored account, in insertion order."""
        with self._lock:
            return [replace(account) for account in self._accounts.values()]
