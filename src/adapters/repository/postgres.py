"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Consistency Design:
-------------------
The domain performs no locking. Uniqueness of name, email and
signup_token is enforced by UNIQUE constraints, and the token/expiry
co-presence invariant by a CHECK constraint (see migrations/).
Each write is a single statement, so updates are atomic per row.

Updates are compare-and-set: the WHERE clause requires the row to be
unverified and, for verification writes, to still hold the token that
was redeemed. A resend committed between a verify's lookup and its
write therefore survives, and only one of two concurrent verifies of
the same token lands.

Two concurrent resends for the same email both succeed; the later
UPDATE wins and the earlier emailed token stops matching any row.
"""

import logging
from datetime import datetime
from pathlib import Path

import psycopg
from psycopg import errors
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.domain.account import Account
from src.domain.exceptions import AccountExists, RepositoryUnavailable
from src.domain.ports import LookupField

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, name, email, account_type, password_credential, email_verified,
    email_verification_timestamp, signup_token, signup_token_expires, created_at
"""

# Lookup columns are interpolated into SQL, so only whitelisted names are allowed
_LOOKUP_COLUMNS = {
    LookupField.NAME: "name",
    LookupField.EMAIL: "email",
    LookupField.SIGNUP_TOKEN: "signup_token",
}

# Constraint name -> account field reported by AccountExists
_UNIQUE_CONSTRAINTS = {
    "accounts_name_key": "name",
    "accounts_email_key": "email",
}


def _to_account(row: dict) -> Account:
    return Account(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        account_type=row["account_type"],
        password_credential=row["password_credential"],
        email_verified=row["email_verified"],
        email_verification_timestamp=row["email_verification_timestamp"],
        signup_token=row["signup_token"],
        signup_token_expires=row["signup_token_expires"],
        created_at=row["created_at"],
    )


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by(self, field: LookupField, value: str) -> Account | None:
        column = _LOOKUP_COLUMNS[LookupField(field)]
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE {column} = %s"

        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, (value,))
                row = cursor.fetchone()
        except psycopg.Error as exc:
            raise RepositoryUnavailable(f"account lookup by {column} failed") from exc

        return _to_account(row) if row is not None else None

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

        A UNIQUE violation means a concurrent signup claimed the name or
        email after the workflow looked them up; it is reported as
        AccountExists so the domain can apply its duplicate rules.
        """
        sql = f"""
            INSERT INTO accounts
                (name, email, account_type, password_credential,
                 signup_token, signup_token_expires, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, NOW())
            RETURNING {_COLUMNS}
        """

        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(
                    sql,
                    (name, email, account_type, password_credential, signup_token, signup_token_expires),
                )
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation as exc:
            constraint = exc.diag.constraint_name
            field = _UNIQUE_CONSTRAINTS.get(constraint)
            if field is None:
                raise RepositoryUnavailable(f"unexpected constraint violation: {constraint}") from exc
            raise AccountExists(field) from exc
        except psycopg.Error as exc:
            raise RepositoryUnavailable("account insert failed") from exc

        return _to_account(row)

    def update(self, account: Account, expected_token: str | None = None) -> Account | None:
        """
        Persist verification fields of an existing account.

        Only the fields the workflows mutate are written; name, email,
        account type and credential are left as stored. The UPDATE is
        guarded on the row still being unverified and, when
        expected_token is given, still holding that token. A guarded-out
        row yields None.
        """
        if account.id is None:
            raise RepositoryUnavailable("cannot update an account that was never saved")

        guard = "AND signup_token = %s" if expected_token is not None else ""
        sql = f"""
            UPDATE accounts
            SET email_verified = %s,
                email_verification_timestamp = %s,
                signup_token = %s,
                signup_token_expires = %s
            WHERE id = %s AND email_verified = FALSE {guard}
            RETURNING {_COLUMNS}
        """
        params = [
            account.email_verified,
            account.email_verification_timestamp,
            account.signup_token,
            account.signup_token_expires,
            account.id,
        ]
        if expected_token is not None:
            params.append(expected_token)

        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                if row is None:
                    cursor.execute("SELECT 1 FROM accounts WHERE id = %s", (account.id,))
                    exists = cursor.fetchone() is not None
                conn.commit()
        except psycopg.Error as exc:
            raise RepositoryUnavailable("account update failed") from exc

        if row is not None:
            return _to_account(row)
        if not exists:
            raise RepositoryUnavailable(f"account {account.id} no longer exists")
        logger.info("Update of account %s skipped: changed concurrently", account.id)
        return None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
