"""Admin account and session tables for the admin panel.

Accounts are provisioned out of band (see ``newsdesk.cli.admin_accounts``);
the web panel only reads them. Session rows back the cookie-keyed session
store used by ``/admin/*``.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from newsdesk.services.credentials import Credential, parse_stored_credential


class AdminAccount(SQLModel, table=True):  # type: ignore[call-arg]
    """Operator account. ``password`` holds a legacy plaintext value or a hash."""

    __tablename__ = "admin"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(max_length=150, unique=True, index=True)
    password: str = Field(max_length=255)

    @property
    def credential(self) -> Credential:
        return parse_stored_credential(self.password)


class AdminSession(SQLModel, table=True):  # type: ignore[call-arg]
    """Server-side session for an admin (cookie token is stored hashed)."""

    __tablename__ = "admin_sessions"

    id: int | None = Field(default=None, primary_key=True)
    token_hash: str = Field(unique=True, index=True)
    admin_logged_in: bool = Field(default=False)
    admin_id: int | None = Field(default=None, foreign_key="admin.id", index=True)
    admin_username: str | None = Field(default=None)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
    expires_at: datetime = Field(sa_type=DateTime(timezone=True), index=True)
