"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Uniqueness of email and username is enforced by the users_email_key and
users_username_key constraints; violations are reported to the domain as
DuplicateKeyError naming the offending column. Verified-only lookups
filter on verified_at IS NOT NULL in SQL, so unverified accounts never
reach the login path.
"""

import logging
from pathlib import Path

import psycopg
from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from src.domain.exceptions import DuplicateKeyError, NotFound, RepositoryError
from src.domain.user import User

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, first_name, last_name, username, email, password_hash, "
    "verified_at, created_at, updated_at"
)

# Unique constraint name -> domain field
_UNIQUE_CONSTRAINTS = {
    "users_email_key": "email",
    "users_username_key": "username",
}


def _row_to_user(row: tuple) -> User:
    return User(
        id=row[0],
        first_name=row[1],
        last_name=row[2],
        username=row[3],
        email=row[4],
        password_hash=row[5],
        verified_at=row[6],
        created_at=row[7],
        updated_at=row[8],
    )


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def register(self, user: User) -> None:
        """
        Insert a new user row.

        Raises:
            DuplicateKeyError: On email or username uniqueness violation
            RepositoryError: On any other database error
        """
        sql = f"""
            INSERT INTO users ({_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        params = (
            user.id,
            user.first_name,
            user.last_name,
            user.username,
            user.email,
            user.password_hash,
            user.verified_at,
            user.created_at,
            user.updated_at,
        )

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                conn.commit()
        except pg_errors.UniqueViolation as e:
            field = _UNIQUE_CONSTRAINTS.get(e.diag.constraint_name or "")
            if field is None:
                raise RepositoryError(str(e)) from e
            raise DuplicateKeyError(field) from e
        except psycopg.Error as e:
            logger.error("Failed to insert user %s: %s", user.id, e)
            raise RepositoryError(str(e)) from e

    def find_user_by_id(self, user_id: str) -> User:
        return self._find_one(f"SELECT {_COLUMNS} FROM users WHERE id = %s", (user_id,))

    def find_verified_user_by_email(self, email: str) -> User:
        sql = f"SELECT {_COLUMNS} FROM users WHERE email = %s AND verified_at IS NOT NULL"
        return self._find_one(sql, (email,))

    def find_verified_user_by_username(self, username: str) -> User:
        sql = f"SELECT {_COLUMNS} FROM users WHERE username = %s AND verified_at IS NOT NULL"
        return self._find_one(sql, (username,))

    def update(self, user: User) -> None:
        """
        Persist mutable columns of an existing user.

        Raises:
            NotFound: If no row has the user's id
            RepositoryError: On database error
        """
        sql = """
            UPDATE users
            SET first_name = %s, last_name = %s, username = %s, email = %s,
                password_hash = %s, verified_at = %s, updated_at = %s
            WHERE id = %s
        """
        params = (
            user.first_name,
            user.last_name,
            user.username,
            user.email,
            user.password_hash,
            user.verified_at,
            user.updated_at,
            user.id,
        )

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                conn.commit()
                updated = cursor.rowcount
        except psycopg.Error as e:
            logger.error("Failed to update user %s: %s", user.id, e)
            raise RepositoryError(str(e)) from e

        if updated == 0:
            raise NotFound("user not found")

    def _find_one(self, sql: str, params: tuple) -> User:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
        except psycopg.Error as e:
            raise RepositoryError(str(e)) from e

        if row is None:
            raise NotFound("user not found")
        return _row_to_user(row)


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
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
