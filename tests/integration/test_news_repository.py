"""Integration tests for the news repository functions."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from newsdesk.schemas.news import News
from newsdesk.services.news_service import (
    PAGE_SIZE,
    count_news,
    create_news,
    delete_news,
    get_news,
    list_news,
    page_offset,
    total_pages,
    update_news,
)


async def _seed(db_session: AsyncSession, rows: list[tuple[str, str, str]]) -> list[int]:
    """Insert rows with increasing timestamps (last row is newest)."""
    base = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    items = [
        News(
            type=news_type,
            content_name=name,
            content_url=url,
            timestamp=base + timedelta(minutes=i),
        )
        for i, (news_type, name, url) in enumerate(rows)
    ]
    db_session.add_all(items)
    await db_session.commit()
    return [item.id for item in items]  # type: ignore[misc]


@pytest.mark.asyncio
class TestCreateAndGet:
    async def test_insert_trims_name_and_url(self, db_session: AsyncSession):
        news_id = await create_news(
            db_session,
            news_type="Business",
            content_name="  Acme Q3  ",
            content_url="https://example.com/q3",
        )

        item = await get_news(db_session, news_id)
        assert item is not None
        assert item.content_name == "Acme Q3"
        assert item.content_url == "https://example.com/q3"
        assert item.type == "Business"
        assert item.timestamp is not None

    async def test_url_whitespace_trimmed(self, db_session: AsyncSession):
        news_id = await create_news(
            db_session,
            news_type="National",
            content_name="Budget",
            content_url="  https://example.com/budget \n",
        )
        item = await get_news(db_session, news_id)
        assert item is not None
        assert item.content_url == "https://example.com/budget"

    async def test_get_missing_returns_none(self, db_session: AsyncSession):
        assert await get_news(db_session, 9999) is None


@pytest.mark.asyncio
class TestListAndCount:
    async def test_newest_first(self, db_session: AsyncSession):
        await _seed(
            db_session,
            [
                ("Business", "Oldest", "https://example.com/1"),
                ("Business", "Middle", "https://example.com/2"),
                ("Business", "Newest", "https://example.com/3"),
            ],
        )
        items = await list_news(db_session)
        assert [i.content_name for i in items] == ["Newest", "Middle", "Oldest"]

    async def test_twelve_items_paginate_into_three_pages(self, db_session: AsyncSession):
        await _seed(
            db_session,
            [("National", f"Story {i:02d}", f"https://example.com/{i}") for i in range(12)],
        )

        total = await count_news(db_session)
        assert total == 12
        assert total_pages(total, PAGE_SIZE) == 3

        last_page = await list_news(
            db_session, limit=PAGE_SIZE, offset=page_offset(3, PAGE_SIZE)
        )
        assert [i.content_name for i in last_page] == ["Story 01", "Story 00"]

        first_page = await list_news(db_session, limit=PAGE_SIZE, offset=0)
        assert len(first_page) == PAGE_SIZE
        assert first_page[0].content_name == "Story 11"

    async def test_search_is_case_insensitive_across_fields(self, db_session: AsyncSession):
        await _seed(
            db_session,
            [
                ("Business", "Market wrap", "https://finance.example.com/wrap"),
                ("International", "Summit recap", "https://world.example.com/summit"),
                ("National", "Election night", "https://example.com/ELECTION"),
            ],
        )

        by_type = await list_news(db_session, "internat")
        assert [i.content_name for i in by_type] == ["Summit recap"]

        by_name = await list_news(db_session, "MARKET")
        assert [i.content_name for i in by_name] == ["Market wrap"]

        by_url = await list_news(db_session, "election")
        assert [i.content_name for i in by_url] == ["Election night"]

        assert await count_news(db_session, "example.com") == 3
        assert await count_news(db_session, "nothing-matches") == 0

    async def test_like_wildcards_are_literal(self, db_session: AsyncSession):
        await _seed(
            db_session,
            [
                ("Business", "Growth 100% confirmed", "https://example.com/a"),
                ("Business", "Growth 1000 confirmed", "https://example.com/b"),
                ("Business", "snake_case story", "https://example.com/c"),
                ("Business", "snakeXcase story", "https://example.com/d"),
            ],
        )
        assert [i.content_name for i in await list_news(db_session, "100%")] == [
            "Growth 100% confirmed"
        ]
        assert [i.content_name for i in await list_news(db_session, "snake_case")] == [
            "snake_case story"
        ]

    @pytest.mark.parametrize("search", [None, "", "business", "example", "zzz"])
    async def test_count_matches_unbounded_list(
        self, db_session: AsyncSession, search: str | None
    ):
        await _seed(
            db_session,
            [
                ("Business", f"Item {i}", f"https://example.com/{i}")
                for i in range(7)
            ]
            + [("National", "Other", "https://other.test/x")],
        )
        everything = await list_news(db_session, search, limit=None, offset=0)
        assert await count_news(db_session, search) == len(everything)


@pytest.mark.asyncio
class TestUpdateAndDelete:
    async def test_update_rewrites_fields_only(self, db_session: AsyncSession):
        (news_id,) = await _seed(
            db_session, [("Business", "Before", "https://example.com/before")]
        )
        original = await get_news(db_session, news_id)
        assert original is not None
        original_timestamp = original.timestamp

        ok = await update_news(
            db_session,
            news_id,
            news_type="International",
            content_name="  After  ",
            content_url="https://example.com/after ",
        )
        assert ok is True

        item = await get_news(db_session, news_id)
        assert item is not None
        assert item.id == news_id
        assert item.type == "International"
        assert item.content_name == "After"
        assert item.content_url == "https://example.com/after"
        assert item.timestamp == original_timestamp

    async def test_update_missing_is_not_found(self, db_session: AsyncSession):
        ok = await update_news(
            db_session,
            12345,
            news_type="Business",
            content_name="Nothing",
            content_url="https://example.com",
        )
        assert ok is False

    async def test_delete_existing_then_missing(self, db_session: AsyncSession):
        (news_id,) = await _seed(
            db_session, [("Business", "Doomed", "https://example.com/doomed")]
        )
        assert await delete_news(db_session, news_id) is True
        assert await get_news(db_session, news_id) is None
        assert await delete_news(db_session, news_id) is False

    async def test_delete_missing_does_not_raise(self, db_session: AsyncSession):
        assert await delete_news(db_session, 424242) is False

    async def test_concurrent_deletes_succeed_once(
        self,
        db_session: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        (news_id,) = await _seed(
            db_session, [("National", "Contested", "https://example.com/race")]
        )

        async def _delete() -> bool:
            async with session_factory() as session:
                return await delete_news(session, news_id)

        results = await asyncio.gather(_delete(), _delete())
        assert sorted(results) == [False, True]
        assert await count_news(db_session) == 0
