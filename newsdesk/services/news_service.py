"""News repository for the admin panel.

Every function opens its own transaction on the given session and issues
parameterized statements only. Updates and deletes are single conditional
statements whose affected row count tells the caller whether the id existed.
"""

from __future__ import annotations

import math
from typing import Optional

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.schemas.news import News

PAGE_SIZE = 5

_LIKE_ESCAPE = "\\"


def parse_page(raw: str | int | None) -> int:
    """Parse a ``page`` query value, defaulting to 1 and never going below 1."""
    try:
        page = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return max(page, 1)


def page_offset(page: int, page_size: int = PAGE_SIZE) -> int:
    """Zero-based row offset for a 1-based page number."""
    return (page - 1) * page_size


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages needed to show ``count`` rows."""
    return math.ceil(count / page_size)


def _search_clause(search: Optional[str]):
    if not search:
        return None
    escaped = (
        search.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    pattern = f"%{escaped}%"
    return or_(
        News.type.ilike(pattern, escape=_LIKE_ESCAPE),  # type: ignore[attr-defined]
        News.content_name.ilike(pattern, escape=_LIKE_ESCAPE),  # type: ignore[attr-defined]
        News.content_url.ilike(pattern, escape=_LIKE_ESCAPE),  # type: ignore[attr-defined]
    )


async def count_news(db: AsyncSession, search: Optional[str] = None) -> int:
    """Count news rows matching ``search`` (all rows when empty)."""
    query = select(func.count()).select_from(News)
    clause = _search_clause(search)
    if clause is not None:
        query = query.where(clause)

    async with db.begin():
        total = await db.scalar(query)
    return total or 0


async def list_news(
    db: AsyncSession,
    search: Optional[str] = None,
    limit: Optional[int] = PAGE_SIZE,
    offset: int = 0,
) -> list[News]:
    """Return matching news rows, newest first.

    Args:
        db: Async database session
        search: Case-insensitive substring matched against type, name and URL
        limit: Page size; None returns every matching row
        offset: Number of rows to skip

    Returns:
        News rows ordered by timestamp descending (id descending on ties)
    """
    query = select(News).order_by(
        News.timestamp.desc(),  # type: ignore[attr-defined]
        News.id.desc(),  # type: ignore[union-attr]
    )
    clause = _search_clause(search)
    if clause is not None:
        query = query.where(clause)
    if limit is not None:
        query = query.limit(limit)
    if offset:
        query = query.offset(offset)

    async with db.begin():
        result = await db.execute(query.execution_options(populate_existing=True))
        return list(result.scalars().all())


async def get_news(db: AsyncSession, news_id: int) -> News | None:
    """Fetch one news row by id."""
    async with db.begin():
        result = await db.execute(
            select(News)
            .where(News.id == news_id)  # type: ignore[arg-type]
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


async def create_news(
    db: AsyncSession,
    *,
    news_type: str,
    content_name: str,
    content_url: str,
) -> int:
    """Insert a news row and return its id. Name and URL are trimmed."""
    item = News(
        type=news_type,
        content_name=content_name.strip(),
        content_url=content_url.strip(),
    )
    async with db.begin():
        db.add(item)
        await db.flush()
        new_id = item.id
    if new_id is None:
        raise RuntimeError("Insert did not return a news id")
    return new_id


async def update_news(
    db: AsyncSession,
    news_id: int,
    *,
    news_type: str,
    content_name: str,
    content_url: str,
) -> bool:
    """Rewrite type, name and URL of one row. False when the id does not exist."""
    async with db.begin():
        result = await db.execute(
            update(News)
            .where(News.id == news_id)  # type: ignore[arg-type]
            .values(
                type=news_type,
                content_name=content_name.strip(),
                content_url=content_url.strip(),
            )
        )
    return result.rowcount > 0


async def delete_news(db: AsyncSession, news_id: int) -> bool:
    """Delete one row. False when the id does not exist."""
    async with db.begin():
        result = await db.execute(
            delete(News).where(News.id == news_id)  # type: ignore[arg-type]
        )
    return result.rowcount > 0
