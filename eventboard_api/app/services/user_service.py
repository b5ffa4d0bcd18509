"""
Business logic for users.

Registration stores a PBKDF2 hash of the password; authentication
verifies it in constant time.  E‑mail addresses are unique and stored
lower‑cased.
"""

import logging
import sqlite3
from typing import Optional

from ..core.db import get_connection, utcnow_iso
from ..core.security import hash_password, verify_password
from ..schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, name, email, created_at"


class UserService:
    """Service for registering, authenticating and looking up users."""

    @classmethod
    async def create_user(cls, data: UserCreate) -> UserRead:
        """Create a new user and return it.

        Raises ``ValueError`` when the e‑mail is already registered.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            exists = cursor.execute("SELECT id FROM users WHERE email = ?", (data.email,)).fetchone()
            if exists:
                raise ValueError("User already exists with this email")
            now = utcnow_iso()
            try:
                cursor.execute(
                    "INSERT INTO users (name, email, password, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                    (data.name, data.email, hash_password(data.password), now, now),
                )
            except sqlite3.IntegrityError as e:
                # Lost a race with a concurrent registration of the same e‑mail
                raise ValueError("User already exists with this email") from e
            user_id = cursor.lastrowid
            conn.commit()
            logger.info("Registered user %s (id=%s)", data.email, user_id)
            return UserRead(id=user_id, name=data.name, email=data.email, created_at=now)
        finally:
            conn.close()

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Optional[UserRead]:
        """Return the user when ``email`` and ``password`` match, otherwise ``None``."""
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {USER_COLUMNS}, password FROM users WHERE email = ?",
                (email.lower(),),
            ).fetchone()
        finally:
            conn.close()
        if not row or not verify_password(password, row["password"]):
            logger.warning("Failed login attempt for %s", email)
            return None
        logger.info("User %s logged in", email)
        return cls._row_to_user(row)

    @classmethod
    async def get_user_by_id(cls, user_id: int) -> Optional[UserRead]:
        conn = get_connection()
        try:
            row = conn.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()
        finally:
            conn.close()
        return cls._row_to_user(row) if row else None

    @classmethod
    async def set_password(cls, email: str, password: str) -> bool:
        """Replace the password hash of the user with ``email``.

        Returns ``False`` when no such user exists.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE users SET password = ?, updated_at = ? WHERE email = ?",
                (hash_password(password), utcnow_iso(), email.lower()),
            )
            conn.commit()
            updated = cursor.rowcount > 0
        finally:
            conn.close()
        if updated:
            logger.info("Password reset for %s", email)
        return updated

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> UserRead:
        return UserRead(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            created_at=row["created_at"],
        )
