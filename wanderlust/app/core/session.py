"""
Server-side sessions and one-shot flash notices.

Session data lives in the ``sessions`` table; the browser only holds a
signed random identifier in a cookie.  ``SessionMiddleware`` loads the
session for every request into ``request.state.session`` and resolves
the logged-in user into ``request.state.user``.  After the handler ran,
the session is written back when it changed (or when it has not been
touched for ``settings.session_touch_after`` seconds) and the cookie is
refreshed.

Flash notices are stored in the session under ``"flash"`` and removed
as soon as a rendered page reads them.
"""

import json
import logging
import secrets
import time
from typing import Any, List, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .config import settings
from .db import get_connection
from .security import sign_value, unsign_value


FLASH_KEY = "flash"


class Session(dict):
    """Per-request session mapping that remembers whether it changed."""

    def __init__(self, data: Optional[dict] = None, session_id: Optional[str] = None, updated_at: float = 0.0):
        super().__init__(data or {})
        self.session_id = session_id
        self.updated_at = updated_at
        self.previous_id: Optional[str] = None
        self.modified = False

    def __setitem__(self, key, value) -> None:
        super().__setitem__(key, value)
        self.modified = True

    def __delitem__(self, key) -> None:
        super().__delitem__(key)
        self.modified = True

    def pop(self, key, *default):
        if key in self:
            self.modified = True
        return super().pop(key, *default)

    def setdefault(self, key, default=None):
        if key not in self:
            self.modified = True
        return super().setdefault(key, default)

    def update(self, *args, **kwargs) -> None:
        super().update(*args, **kwargs)
        self.modified = True

    def clear(self) -> None:
        if self:
            self.modified = True
        super().clear()

    def regenerate(self) -> None:
        """Issue a new identifier for this session, keeping its data.

        Called whenever the authenticated identity changes so a session
        id seen before login cannot be reused afterwards.
        """
        if self.session_id and not self.previous_id:
            self.previous_id = self.session_id
        self.session_id = None
        self.modified = True


class SessionStore:
    """Persistence of session rows in SQLite."""

    @classmethod
    def load(cls, session_id: str, now: Optional[float] = None) -> Optional[Tuple[dict, float]]:
        """Return ``(data, updated_at)`` for a live session, else ``None``."""
        now = now or time.time()
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT data, expires_at, updated_at FROM sessions WHERE id = ?",
                (session_id,),
            ).fetchone()
        finally:
            conn.close()
        if not row or row["expires_at"] <= now:
            return None
        try:
            data = json.loads(row["data"])
        except ValueError:
            return None
        return data, row["updated_at"]

    @classmethod
    def save(cls, session_id: str, data: dict, expires_at: float, updated_at: float) -> None:
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO sessions (id, data, expires_at, updated_at) VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    data = excluded.data,
                    expires_at = excluded.expires_at,
                    updated_at = excluded.updated_at
                """,
                (session_id, json.dumps(data), expires_at, updated_at),
            )
            conn.commit()
        finally:
            conn.close()

    @classmethod
    def delete(cls, session_id: str) -> None:
        conn = get_connection()
        try:
            conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
            conn.commit()
        finally:
            conn.close()

    @classmethod
    def purge_expired(cls, now: Optional[float] = None) -> int:
        """Delete expired sessions and return how many were removed."""
        now = now or time.time()
        conn = get_connection()
        try:
            cursor = conn.execute("DELETE FROM sessions WHERE expires_at <= ?", (now,))
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()


def get_session(request: Request) -> Session:
    """Return the session attached by ``SessionMiddleware``."""
    return request.state.session


def flash(request: Request, category: str, message: str) -> None:
    """Queue a notice for the next rendered page."""
    session = get_session(request)
    flashes = {key: list(value) for key, value in session.get(FLASH_KEY, {}).items()}
    flashes.setdefault(category, []).append(message)
    session[FLASH_KEY] = flashes


def pop_flashes(request: Request, category: str) -> List[str]:
    """Return and clear the queued notices of one category."""
    session = get_session(request)
    flashes = session.get(FLASH_KEY)
    if not flashes or category not in flashes:
        return []
    messages = flashes[category]
    remaining = {key: value for key, value in flashes.items() if key != category}
    if remaining:
        session[FLASH_KEY] = remaining
    else:
        del session[FLASH_KEY]
    return messages


class SessionMiddleware(BaseHTTPMiddleware):
    """Attach a server-side session and the current user to each request."""

    async def dispatch(self, request: Request, call_next):
        now = time.time()
        session = None
        session_id = unsign_value(request.cookies.get(settings.session_cookie, ""))
        if session_id:
            loaded = SessionStore.load(session_id, now)
            if loaded is not None:
                data, updated_at = loaded
                session = Session(data, session_id=session_id, updated_at=updated_at)
        if session is None:
            session = Session()
        request.state.session = session
        request.state.user = await self._load_user(session)

        response = await call_next(request)
        self._commit(session, response, now)
        return response

    async def _load_user(self, session: Session) -> Any:
        user_id = session.get("user_id")
        if user_id is None:
            return None
        from wanderlust.app.services.user_service import UserService
        user = await UserService.get_user(user_id)
        if user is None:
            logging.getLogger(__name__).info("Dropping session of missing user %s", user_id)
            session.pop("user_id")
        return user

    def _commit(self, session: Session, response, now: float) -> None:
        if session.previous_id:
            SessionStore.delete(session.previous_id)

        if not session:
            if session.session_id:
                SessionStore.delete(session.session_id)
            if session.session_id or session.previous_id:
                response.delete_cookie(settings.session_cookie)
            return

        if session.session_id is None:
            session.session_id = secrets.token_urlsafe(32)
        elif not session.modified and now - session.updated_at < settings.session_touch_after:
            return

        SessionStore.save(session.session_id, dict(session), now + settings.session_max_age, now)
        response.set_cookie(
            settings.session_cookie,
            sign_value(session.session_id),
            max_age=settings.session_max_age,
            httponly=True,
            samesite="lax",
            secure=settings.environment == "production",
        )
