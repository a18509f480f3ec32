"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
account store port using psycopg3 with raw SQL.

Uniqueness
----------
The ``users_email_key`` UNIQUE constraint is the single source of truth.
``insert`` does not check first: a conflicting INSERT fails with
``UniqueViolation``, which is translated to the domain's
``UniquenessViolation`` so the registration service can answer EMAIL_TAKEN
for a lost race.

Every other psycopg error (connection refused, pool exhausted, rejected
parameter data) surfaces as ``StoreUnavailable``. Nothing here retries.
"""

import logging
from pathlib import Path

import psycopg
from psycopg import errors
from psycopg_pool import ConnectionPool, PoolTimeout

from src.domain.exceptions import StoreUnavailable, UniquenessViolation
from src.domain.ports import Account

logger = logging.getLogger(__name__)


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

    def find_by_email(self, email: str) -> Account | None:
        """
        Fetch the account with exactly this email.

        Plain equality on TEXT: no lower(), no trimming.
        """
        sql = """
            SELECT id, email, password_hash, created_at
            FROM users
            WHERE email = %s
            LIMIT 1
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (email,))
                row = cursor.fetchone()
        except (psycopg.Error, PoolTimeout) as e:
            raise StoreUnavailable("account lookup failed") from e

        if row is None:
            return None
        return Account(id=row[0], email=row[1], password_hash=row[2], created_at=row[3])

    def insert(self, email: str, password_hash: str) -> Account:
        """
        Insert a new account row; id and created_at come from the database.

        Raises:
            UniquenessViolation: If the email already exists
            StoreUnavailable: If the database cannot be reached
        """
        sql = """
            INSERT INTO users (email, password_hash)
            VALUES (%s, %s)
            RETURNING id, email, password_hash, created_at
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (email, password_hash))
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation as e:
            raise UniquenessViolation(email) from e
        except (psycopg.Error, PoolTimeout) as e:
            raise StoreUnavailable("account insert failed") from e

        return Account(id=row[0], email=row[1], password_hash=row[2], created_at=row[3])

    def ping(self) -> None:
        """Round-trip a trivial query; raises StoreUnavailable on failure."""
        try:
            with self._pool.connection() as conn:
                conn.execute("SELECT 1")
        except (psycopg.Error, PoolTimeout) as e:
            raise StoreUnavailable("database ping failed") from e


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
