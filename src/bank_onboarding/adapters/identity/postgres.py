"""
PostgreSQL identity provider adapter - Implements IdentityProvider protocol.

Accounts are rows in the `accounts` table with bcrypt password hashes.

Security Design - Timing Oracle Prevention:
------------------------------------------
sign_in() always runs bcrypt.checkpw(), comparing against a pre-computed
dummy hash when the email is unknown, so response time does not reveal
whether an account exists. Both "unknown email" and "wrong password"
raise the same AuthenticationFailed message.
"""

import logging
import uuid
from typing import Any, Protocol

import bcrypt
import psycopg
from psycopg_pool import ConnectionPool

from bank_onboarding.domain.exceptions import (
    AuthenticationFailed,
    CollaboratorError,
    EmailAlreadyInUse,
)
from bank_onboarding.domain.models import Identity, Session

logger = logging.getLogger(__name__)

# Pre-computed bcrypt hash for timing oracle prevention.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10)).decode()


class EmailSender(Protocol):
    """Delivery channel for account emails."""

    def send_verification_email(self, email: str) -> None: ...


class PostgresIdentityProvider:
    """
    Implements IdentityProvider protocol via psycopg3 and bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Emails are normalized (stripped, lowercased) for storage and lookup.
    """

    def __init__(self, pool: ConnectionPool, email_sender: EmailSender, bcrypt_cost: int = 10) -> None:
        """
        Initialize identity provider.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            email_sender: Channel used for verification emails
            bcrypt_cost: bcrypt work factor for new password hashes
        """
        self._pool = pool
        self._email_sender = email_sender
        self._bcrypt_cost = bcrypt_cost

    def create_account(
        self, email: str, password: str, role: str, profile_hints: dict[str, Any]
    ) -> Identity:
        """
        Create an account, refusing emails that are already registered.

        Uses INSERT ... ON CONFLICT DO NOTHING so the UNIQUE constraint on
        email settles concurrent signups for the same address.

        Raises:
            EmailAlreadyInUse: If the email is already registered
            CollaboratorError: If the database write fails
        """
        normalized_email = self._normalize_email(email)
        password_hash = bcrypt.hashpw(
            password.encode(), bcrypt.gensalt(rounds=self._bcrypt_cost)
        ).decode()
        uid = uuid.uuid4().hex

        sql = """
            INSERT INTO accounts (uid, email, password_hash, role, display_name, phone_number, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, NOW())
            ON CONFLICT (email) DO NOTHING
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(
                    sql,
                    (
                        uid,
                        normalized_email,
                        password_hash,
                        role,
                        profile_hints.get("display_name"),
                        profile_hints.get("phone_number"),
                    ),
                )
                conn.commit()
                created = cursor.rowcount == 1
        except psycopg.Error as e:
            logger.error(f"Account creation failed: {e}")
            raise CollaboratorError("Failed to create an account. Please try again.") from e

        if not created:
            raise EmailAlreadyInUse("The email address is already in use by another account.")

        logger.info("Created %s account %s", role, uid)
        return Identity(uid=uid, email=normalized_email, role=role)

    def sign_in(self, email: str, password: str) -> Session:
        """
        Authenticate and record the login time.

        Raises:
            AuthenticationFailed: If the email is unknown or the password is wrong
            CollaboratorError: If the database cannot be reached
        """
        normalized_email = self._normalize_email(email)

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(
                    "SELECT uid, password_hash FROM accounts WHERE email = %s",
                    (normalized_email,),
                )
                row = cursor.fetchone()

                stored_hash = row[1] if row is not None else _DUMMY_BCRYPT_HASH
                # Always run bcrypt, even for unknown emails
                password_valid = bcrypt.checkpw(password.encode(), stored_hash.encode())

                if row is None or not password_valid:
                    conn.commit()
                    raise AuthenticationFailed("Invalid email or password.")

                uid = row[0]
                cursor.execute("UPDATE accounts SET last_login = NOW() WHERE uid = %s", (uid,))
                conn.commit()
        except psycopg.Error as e:
            logger.error(f"Sign-in failed: {e}")
            raise CollaboratorError("Failed to sign in. Please try again.") from e

        return Session(uid=uid, email=normalized_email)

    def send_verification_email(self, session: Session) -> None:
        """
        Send the verification email and stamp when it was sent.

        Raises:
            CollaboratorError: If the send time cannot be recorded
        """
        self._email_sender.send_verification_email(session.email)
        try:
            with self._pool.connection() as conn:
                conn.execute(
                    "UPDATE accounts SET verification_sent_at = NOW() WHERE uid = %s",
                    (session.uid,),
                )
                conn.commit()
        except psycopg.Error as e:
            raise CollaboratorError("Failed to send verification email.") from e

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()
