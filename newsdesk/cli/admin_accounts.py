"""Provision admin accounts for the panel.

Usage:
    python -m newsdesk.cli.admin_accounts init-db
    python -m newsdesk.cli.admin_accounts create-admin --username alice
    python -m newsdesk.cli.admin_accounts hash-passwords
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.config import settings
from newsdesk.logging_config import setup_logging
from newsdesk.schemas.admin import AdminAccount
from newsdesk.services.credentials import PlaintextCredential, hash_password
from newsdesk.utils.db_async import SessionLocal, dispose_engine, init_db

logger = logging.getLogger(__name__)


async def create_admin(db: AsyncSession, *, username: str, password: str) -> int:
    """Insert an admin with a hashed password and return its id.

    Raises:
        ValueError: if the username is blank or already taken.
    """
    username = username.strip()
    if not username:
        raise ValueError("Username must not be blank")

    account = AdminAccount(username=username, password=hash_password(password))
    try:
        async with db.begin():
            db.add(account)
            await db.flush()
            account_id = account.id
    except IntegrityError as exc:
        raise ValueError(f"Admin {username!r} already exists") from exc
    if account_id is None:
        raise RuntimeError("Insert did not return an admin id")
    return account_id


async def hash_plaintext_passwords(db: AsyncSession) -> int:
    """Replace every plaintext admin password with its hash. Returns the count."""
    async with db.begin():
        result = await db.execute(select(AdminAccount))
        accounts = result.scalars().all()

        migrated = 0
        for account in accounts:
            credential = account.credential
            if not isinstance(credential, PlaintextCredential):
                continue
            await db.execute(
                update(AdminAccount)
                .where(AdminAccount.id == account.id)  # type: ignore[arg-type]
                .values(password=hash_password(credential.value))
            )
            migrated += 1
    return migrated


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage newsdesk admin accounts")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create database tables")

    create = sub.add_parser("create-admin", help="Create an admin account")
    create.add_argument("--username", required=True)
    create.add_argument(
        "--password",
        default=None,
        help="Password (prompted for when omitted)",
    )

    sub.add_parser(
        "hash-passwords",
        help="Hash every admin password still stored as plaintext",
    )
    return parser


async def run(args: argparse.Namespace) -> int:
    try:
        if args.command == "init-db":
            await init_db()
            logger.info("Tables created")
            return 0

        if args.command == "create-admin":
            password = args.password or getpass.getpass("Password: ")
            if not password:
                logger.error("Password must not be empty")
                return 1
            async with SessionLocal() as db:
                try:
                    account_id = await create_admin(
                        db, username=args.username, password=password
                    )
                except ValueError as exc:
                    logger.error("%s", exc)
                    return 1
            logger.info("Created admin %s (id=%s)", args.username, account_id)
            return 0

        if args.command == "hash-passwords":
            async with SessionLocal() as db:
                migrated = await hash_plaintext_passwords(db)
            logger.info("Hashed %d plaintext password(s)", migrated)
            return 0
    finally:
        await dispose_engine()

    return 2


def main(argv: Optional[Sequence[str]] = None) -> int:
    setup_logging(level=settings.log_level, access_log=False)
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
