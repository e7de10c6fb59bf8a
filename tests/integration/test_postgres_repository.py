"""
Integration tests for PostgresAccountRepository.

Tests repository operations against a real PostgreSQL database.
Requires PostgreSQL to be running (via docker-compose).
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.domain.exceptions import AccountExists, RepositoryUnavailable
from src.domain.ports import LookupField
from src.domain.tokens import generate_token

pytestmark = pytest.mark.integration

EXPIRES = datetime(2030, 1, 1, tzinfo=timezone.utc)


def save(repository: PostgresAccountRepository, name: str = "bob", email: str = "bob@example.com", token=None):
    return repository.save(name, email, "$2b$04$hash", "user", token or generate_token(), EXPIRES)


class TestSave:
    """Tests for save method."""

    def test_save_returns_account_with_identity(self, repository: PostgresAccountRepository) -> None:
        account = save(repository)

        assert account.id is not None
        assert account.created_at is not None
        assert account.name == "bob"
        assert account.email_verified is False
        assert account.email_verification_timestamp is None
        assert account.signup_token_expires == EXPIRES

    def test_duplicate_name_raises_account_exists(self, repository: PostgresAccountRepository) -> None:
        save(repository)
        with pytest.raises(AccountExists) as exc_info:
            save(repository, email="other@example.com")
        assert exc_info.value.field == "name"

    def test_duplicate_email_raises_account_exists(self, repository: PostgresAccountRepository) -> None:
        save(repository)
        with pytest.raises(AccountExists) as exc_info:
            save(repository, name="alice")
        assert exc_info.value.field == "email"

    def test_duplicate_token_is_infrastructure_error(self, repository: PostgresAccountRepository) -> None:
        token = generate_token()
        save(repository, token=token)
        with pytest.raises(RepositoryUnavailable):
            save(repository, name="alice", email="alice@example.com", token=token)

    def test_special_characters_are_parameterized(self, repository: PostgresAccountRepository) -> None:
        account = save(repository, name="o'brien", email="o'brien+x@example.com")
        assert repository.find_by(LookupField.EMAIL, "o'brien+x@example.com") == account


class TestFindBy:
    """Tests for find_by method."""

    @pytest.mark.parametrize("field", list(LookupField))
    def test_find_by_each_field(self, repository: PostgresAccountRepository, field: LookupField) -> None:
        account = save(repository)
        value = getattr(account, field.value)

        assert repository.find_by(field, value) == account

    def test_find_missing_returns_none(self, repository: PostgresAccountRepository) -> None:
        assert repository.find_by(LookupField.NAME, "nobody") is None


class TestUpdate:
    """Tests for update method."""

    def test_update_verifies_and_clears_token(self, repository: PostgresAccountRepository) -> None:
        account = save(repository)
        token = account.signup_token
        now = datetime.now(timezone.utc)
        account.mark_verified(now)

        updated = repository.update(account)

        assert updated.email_verified is True
        assert updated.email_verification_timestamp == now
        assert updated.signup_token is None
        assert updated.signup_token_expires is None
        assert repository.find_by(LookupField.SIGNUP_TOKEN, token) is None

    def test_update_preserves_untouched_fields(self, repository: PostgresAccountRepository) -> None:
        account = save(repository)
        account.name = "mallory"
        account.password_credential = "plain"
        account.assign_token(generate_token(), EXPIRES + timedelta(days=1))

        updated = repository.update(account)

        assert updated.name == "bob"
        assert updated.password_credential == "$2b$04$hash"
        assert updated.signup_token == account.signup_token

    def test_token_without_expiry_rejected_by_constraint(
        self, repository: PostgresAccountRepository
    ) -> None:
        account = save(repository)
        account.signup_token_expires = None

        with pytest.raises(RepositoryUnavailable):
            repository.update(account)

    def test_update_unsaved_account(self, repository: PostgresAccountRepository) -> None:
        account = save(repository)
        account.id = None
        with pytest.raises(RepositoryUnavailable):
            repository.update(account)

    def test_update_deleted_account(self, repository: PostgresAccountRepository, pool: ConnectionPool) -> None:
        account = save(repository)
        with pool.connection() as conn:
            conn.execute("DELETE FROM accounts WHERE id = %s", (account.id,))
            conn.commit()

        with pytest.raises(RepositoryUnavailable):
            repository.update(account)


class TestConditionalUpdate:
    """Updates are guarded on the state the caller read."""

    def test_matching_expected_token_writes(self, repository: PostgresAccountRepository) -> None:
        account = save(repository)
        token = account.signup_token
        account.mark_verified(datetime.now(timezone.utc))

        updated = repository.update(account, expected_token=token)

        assert updated is not None
        assert updated.email_verified is True

    def test_replaced_token_is_not_overwritten(self, repository: PostgresAccountRepository) -> None:
        stale = save(repository)
        old_token = stale.signup_token
        fresh = repository.find_by(LookupField.NAME, "bob")
        fresh.assign_token(generate_token(), EXPIRES)
        repository.update(fresh)

        stale.clear_token()

        assert repository.update(stale, expected_token=old_token) is None
        assert repository.find_by(LookupField.NAME, "bob").signup_token == fresh.signup_token

    def test_verified_account_is_not_overwritten(self, repository: PostgresAccountRepository) -> None:
        stale = save(repository)
        winner = repository.find_by(LookupField.NAME, "bob")
        winner.mark_verified(datetime.now(timezone.utc))
        repository.update(winner)

        stale.assign_token(generate_token(), EXPIRES)

        assert repository.update(stale) is None
        stored = repository.find_by(LookupField.NAME, "bob")
        assert stored.email_verified is True
        assert stored.signup_token is None

    def test_concurrent_verifies_exactly_one_lands(self, pool: ConnectionPool) -> None:
        account = save(PostgresAccountRepository(pool))
        token = account.signup_token

        def attempt(_: int) -> bool:
            repository = PostgresAccountRepository(pool)
            found = repository.find_by(LookupField.SIGNUP_TOKEN, token)
            if found is None:
                return False
            found.mark_verified(datetime.now(timezone.utc))
            return repository.update(found, expected_token=token) is not None

        with ThreadPoolExecutor(max_workers=5) as executor:
            results = list(executor.map(attempt, range(5)))

        assert results.count(True) == 1


class TestConcurrentSaves:
    """Uniqueness holds under concurrent inserts."""

    def test_concurrent_saves_exactly_one_succeeds(self, pool: ConnectionPool) -> None:
        def attempt(_: int) -> bool:
            try:
                save(PostgresAccountRepository(pool))
            except AccountExists:
                return False
            return True

        with ThreadPoolExecutor(max_workers=5) as executor:
            results = list(executor.map(attempt, range(5)))

        assert results.count(True) == 1

        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM accounts WHERE email = %s", ("bob@example.com",))
            assert cursor.fetchone()[0] == 1


class TestConnectionFailure:
    def test_driver_errors_wrapped(self) -> None:
        class BrokenPool:
            def connection(self):
                raise psycopg.OperationalError("connection refused")

        repository = PostgresAccountRepository(BrokenPool())  # type: ignore[arg-type]

        with pytest.raises(RepositoryUnavailable):
            repository.find_by(LookupField.NAME, "bob")
