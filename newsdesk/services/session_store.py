"""Cookie-keyed server-side sessions for the admin panel.

Route handlers talk to a ``SessionStore`` (``load``/``save``/``destroy``
keyed by the raw cookie token). ``DatabaseSessionStore`` keeps the rows in
``admin_sessions`` and only ever stores an HMAC of the token. Swap the store
by overriding the ``get_session_store`` dependency.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.config import settings
from newsdesk.schemas.admin import AdminSession
from newsdesk.utils.db_async import get_session

ADMIN_SESSION_COOKIE_NAME = "newsdesk_admin_session"

SESSION_TTL = timedelta(hours=settings.session_ttl_hours)


@dataclass
class SessionData:
    """What the panel keeps about a logged-in operator."""

    admin_logged_in: bool = False
    admin_id: int | None = None
    admin_username: str | None = None


class SessionStore(Protocol):
    async def load(self, token: str) -> SessionData | None: ...

    async def save(self, token: str, data: SessionData) -> None: ...

    async def destroy(self, token: str) -> None: ...


def generate_session_token() -> str:
    """Generate a raw cookie token (stored only as a hash server-side)."""
    return secrets.token_urlsafe(32)


def _hash_token(token: str) -> str:
    key = settings.secret_key.encode("utf-8")
    return hmac.new(key, token.encode("utf-8"), hashlib.sha256).hexdigest()


class DatabaseSessionStore:
    """``SessionStore`` backed by the ``admin_sessions`` table."""

    def __init__(self, db: AsyncSession, ttl: timedelta = SESSION_TTL):
        self.db = db
        self.ttl = ttl

    async def load(self, token: str) -> SessionData | None:
        """Return the session for ``token`` unless it is unknown or expired."""
        now = datetime.now(timezone.utc)
        async with self.db.begin():
            result = await self.db.execute(
                select(AdminSession).where(
                    AdminSession.token_hash == _hash_token(token),  # type: ignore[arg-type]
                    AdminSession.expires_at > now,  # type: ignore[operator,arg-type]
                )
            )
            row = result.scalar_one_or_none()
        if row is None:
            return None
        return SessionData(
            admin_logged_in=row.admin_logged_in,
            admin_id=row.admin_id,
            admin_username=row.admin_username,
        )

    async def save(self, token: str, data: SessionData) -> None:
        """Create or replace the session row for ``token``."""
        now = datetime.now(timezone.utc)
        token_hash = _hash_token(token)
        async with self.db.begin():
            await self.db.execute(
                delete(AdminSession).where(
                    AdminSession.token_hash == token_hash  # type: ignore[arg-type]
                )
            )
            self.db.add(
                AdminSession(
                    token_hash=token_hash,
                    admin_logged_in=data.admin_logged_in,
                    admin_id=data.admin_id,
                    admin_username=data.admin_username,
                    created_at=now,
                    expires_at=now + self.ttl,
                )
            )

    async def destroy(self, token: str) -> None:
        """Delete the session row for ``token`` (idempotent)."""
        async with self.db.begin():
            await self.db.execute(
                delete(AdminSession).where(
                    AdminSession.token_hash == _hash_token(token)  # type: ignore[arg-type]
                )
            )


async def get_session_store(
    db: AsyncSession = Depends(get_session),
) -> SessionStore:
    """FastAPI dependency returning the session store for this request."""
    return DatabaseSessionStore(db)
