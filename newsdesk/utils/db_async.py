"""Async SQLAlchemy engine and session helpers."""

import ssl
from typing import Any, AsyncGenerator, Dict, Optional, Tuple

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from newsdesk.config import settings

POSTGRES_DRIVERS = ("postgres", "postgresql")
ASYNCPG_DRIVER = "postgresql+asyncpg"

# libpq query options asyncpg refuses as connect kwargs
_LIBPQ_ONLY_OPTIONS = ("sslmode", "channel_binding")


def _normalize_db_url(raw: str) -> URL:
    """Parse ``raw`` and pick the asyncpg driver for bare Postgres URLs.

    ``postgres://`` and ``postgresql://`` become ``postgresql+asyncpg://``.
    URLs naming a driver (``postgresql+psycopg``, ``sqlite+aiosqlite``) are
    returned as parsed.
    """
    url = make_url(raw)
    if url.drivername in POSTGRES_DRIVERS:
        url = url.set(drivername=ASYNCPG_DRIVER)
    return url


def _ssl_connect_args(sslmode: Optional[str]) -> Dict[str, Any]:
    """Map a libpq ``sslmode`` onto asyncpg's ``ssl`` connect argument."""
    if not sslmode:
        return {}

    mode = sslmode.lower()
    if mode == "disable":
        return {"ssl": False}
    if mode in {"allow", "prefer"}:
        return {}

    context = ssl.create_default_context()
    if mode == "require":
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    elif mode == "verify-ca":
        context.check_hostname = False
    return {"ssl": context}


def _prepare_connection(raw: str) -> Tuple[str, Dict[str, Any]]:
    """Return the engine URL string and driver connect kwargs for ``raw``.

    Only asyncpg URLs are rewritten; every other driver passes through.
    """
    url = _normalize_db_url(raw)
    if url.drivername != ASYNCPG_DRIVER:
        return raw, {}

    sslmode = url.query.get("sslmode")
    if isinstance(sslmode, tuple):
        sslmode = sslmode[-1]
    cleaned = url.difference_update_query(_LIBPQ_ONLY_OPTIONS)
    return cleaned.render_as_string(hide_password=False), _ssl_connect_args(sslmode)


DATABASE_URL, CONNECT_ARGS = _prepare_connection(settings.database_url)

engine = create_async_engine(
    DATABASE_URL,
    echo=settings.sql_echo,
    pool_pre_ping=True,
    connect_args=CONNECT_ARGS,
)
SessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async with SessionLocal() as session:
        yield session

def load_schema_modules() -> None:
    """Import every table module so SQLModel.metadata is fully populated."""
    # Local imports avoid circular imports at module import time
    from newsdesk.schemas import admin  # noqa: F401
    from newsdesk.schemas import news  # noqa: F401

async def init_db():
    """Initialize the database (create tables)."""
    load_schema_modules()

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

async def dispose_engine() -> None:
    """Dispose of the async engine and its connection pool."""
    await engine.dispose()

def describe_database_url(url: str) -> str:
    """Return a sanitized, human-readable description of the DB URL for logging.

    Example: "postgresql+asyncpg://user@host:5432/dbname"
    Passwords are never included.
    """
    try:
        u = make_url(url)
        auth = u.username or "?"
        host = u.host or "?"
        port = f":{u.port}" if u.port else ""
        db = u.database or "?"
        return f"{u.drivername}://{auth}@{host}{port}/{db}"
    except Exception:
        # Never log the raw URL
        return "<unparseable database URL>"
