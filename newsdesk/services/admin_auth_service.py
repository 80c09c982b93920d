"""Admin account lookup and login/logout helpers for the admin UI."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.schemas.admin import AdminAccount
from newsdesk.services.credentials import verify_credential
from newsdesk.services.session_store import (
    SessionData,
    SessionStore,
    generate_session_token,
)

logger = logging.getLogger(__name__)


async def get_admin_by_username(
    db: AsyncSession,
    *,
    username: str,
) -> AdminAccount | None:
    """Fetch the admin row for ``username`` (exact match)."""
    async with db.begin():
        result = await db.execute(
            select(AdminAccount).where(
                AdminAccount.username == username  # type: ignore[arg-type]
            )
        )
        return result.scalar_one_or_none()


async def authenticate_admin(
    db: AsyncSession,
    *,
    username: str,
    password: str,
) -> AdminAccount | None:
    """Return the admin if credentials are valid.

    Unknown usernames and wrong passwords both return None so callers cannot
    tell them apart.
    """
    admin = await get_admin_by_username(db, username=username)
    if admin is None:
        return None
    if not verify_credential(password, admin.credential):
        return None
    return admin


async def start_admin_session(
    store: SessionStore,
    admin: AdminAccount,
    *,
    previous_token: str | None = None,
) -> str:
    """Create a fresh authenticated session and return its raw token.

    Any session already attached to the browser is dropped first so a token
    issued before login is never promoted.
    """
    if previous_token:
        await store.destroy(previous_token)

    raw_token = generate_session_token()
    await store.save(
        raw_token,
        SessionData(
            admin_logged_in=True,
            admin_id=admin.id,
            admin_username=admin.username,
        ),
    )
    return raw_token


async def end_admin_session(store: SessionStore, raw_token: str | None) -> None:
    """Destroy the session for ``raw_token``; failures are logged, not raised."""
    if not raw_token:
        return
    try:
        await store.destroy(raw_token)
    except Exception:
        logger.exception("Failed to destroy admin session")
