"""
Business logic for users.

The ``UserService`` is the credential store: it registers users with a
salted password hash, verifies credentials at login and looks users up
by id when a session is deserialized.
"""

import logging
import sqlite3
from typing import Optional

from ..schemas.user import UserCreate, UserRead


DUPLICATE_USERNAME_MESSAGE = "A user with the given username is already registered"


class UserService:
    """Service for registering and authenticating users."""

    @classmethod
    async def register(cls, data: UserCreate) -> UserRead:
        """Create a new user and return it.

        Raises ``ValueError`` with a user-facing message when the
        username is already taken.
        """
        logger = logging.getLogger(__name__)
        from wanderlust.app.core.db import get_connection
        from wanderlust.app.core.security import hash_password
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO users (username, email, password) VALUES (?, ?, ?)",
                (data.username, data.email, hash_password(data.password)),
            )
            user_id = cursor.lastrowid
            conn.commit()
            logger.info("Registered user %s (%s)", data.username, user_id)
            return UserRead(id=user_id, username=data.username, email=data.email)
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ValueError(DUPLICATE_USERNAME_MESSAGE) from e
        finally:
            conn.close()

    @classmethod
    async def authenticate(cls, username: str, password: str) -> Optional[UserRead]:
        """Return the user if ``username``/``password`` match, else ``None``."""
        from wanderlust.app.core.db import get_connection
        from wanderlust.app.core.security import verify_password
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, username, email, password FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        finally:
            conn.close()
        if not row or not verify_password(password, row["password"]):
            logging.getLogger(__name__).info("Failed login for %s", username)
            return None
        return UserRead(id=row["id"], username=row["username"], email=row["email"])

    @classmethod
    async def get_user(cls, user_id: int) -> Optional[UserRead]:
        from wanderlust.app.core.db import get_connection
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, username, email FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            return None
        return UserRead(id=row["id"], username=row["username"], email=row["email"])

    @classmethod
    async def set_password(cls, username: str, password: str) -> bool:
        """Replace a user's password hash.  Returns ``False`` for unknown users."""
        from wanderlust.app.core.db import get_connection
        from wanderlust.app.core.security import hash_password
        conn = get_connection()
        try:
            cursor = conn.execute(
                "UPDATE users SET password = ? WHERE username = ?",
                (hash_password(password), username),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()
