"""Admin News CRUD routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from newsdesk.models.news import NewsActionResponse, NewsFormData
from newsdesk.routes.admin.helpers import NEWS_LIST_URL, render, require_auth
from newsdesk.schemas.news import NewsType
from newsdesk.services.news_service import (
    PAGE_SIZE,
    count_news,
    create_news,
    delete_news,
    get_news,
    list_news,
    page_offset,
    parse_page,
    total_pages,
    update_news,
)
from newsdesk.services.news_validation import validate_news_form
from newsdesk.services.session_store import SessionStore, get_session_store
from newsdesk.utils.db_async import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/news", tags=["admin-news"])

SUCCESS_MESSAGES: dict[str, str] = {
    "created": "News added successfully",
    "updated": "News updated successfully",
}

ERROR_MESSAGES: dict[str, str] = {
    "invalid_id": "Invalid news ID",
    "not_found": "News not found",
    "load_failed": "Error loading news data",
    "update_failed": "An error occurred while updating news",
}


def _parse_news_id(raw: str) -> int | None:
    try:
        news_id = int(raw)
    except ValueError:
        return None
    return news_id if news_id > 0 else None


def _list_redirect(**params: str) -> RedirectResponse:
    query = "&".join(f"{key}={value}" for key, value in params.items())
    url = f"{NEWS_LIST_URL}?{query}" if query else NEWS_LIST_URL
    return RedirectResponse(url=url, status_code=303)


def _news_form(
    request: Request,
    template: str,
    *,
    username: str | None,
    form: NewsFormData,
    error: str | None = None,
) -> Response:
    return render(
        request,
        template,
        admin_username=username,
        news_types=[t.value for t in NewsType],
        form=form,
        error=error,
    )


@router.get("", response_class=HTMLResponse)
async def list_news_page(
    request: Request,
    search: str = Query(default=""),
    page: str | None = Query(default=None),
    success: str | None = Query(default=None),
    error: str | None = Query(default=None),
    db: AsyncSession = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
) -> Response:
    """Paginated, searchable news list."""
    redirect, session = await require_auth(request, store)
    if redirect:
        return redirect

    search = search.strip()
    current_page = parse_page(page)

    try:
        total = await count_news(db, search or None)
        items = await list_news(
            db,
            search or None,
            limit=PAGE_SIZE,
            offset=page_offset(current_page, PAGE_SIZE),
        )
    except Exception:
        logger.exception("Error fetching news")
        return render(
            request,
            "admin/news/index.html",
            admin_username=session.admin_username,
            news=[],
            search_query="",
            current_page=1,
            total_pages=0,
            total_count=0,
            limit=PAGE_SIZE,
            success=None,
            error="Error loading news data",
        )

    return render(
        request,
        "admin/news/index.html",
        admin_username=session.admin_username,
        news=items,
        search_query=search,
        current_page=current_page,
        total_pages=total_pages(total, PAGE_SIZE),
        total_count=total,
        limit=PAGE_SIZE,
        success=SUCCESS_MESSAGES.get(success) if success else None,
        error=ERROR_MESSAGES.get(error) if error else None,
    )


@router.get("/add", response_class=HTMLResponse)
async def add_news_page(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> Response:
    """Display the empty add news form."""
    redirect, session = await require_auth(request, store)
    if redirect:
        return redirect

    return _news_form(
        request,
        "admin/news/add.html",
        username=session.admin_username,
        form=NewsFormData(),
    )


@router.post("/add", response_class=HTMLResponse)
async def add_news(
    request: Request,
    news_type: str = Form(default="", alias="type"),
    content_name: str = Form(default="", alias="contentName"),
    content_url: str = Form(default="", alias="contentUrl"),
    db: AsyncSession = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
) -> Response:
    """Validate and insert a news item."""
    redirect, session = await require_auth(request, store)
    if redirect:
        return redirect

    submitted = NewsFormData(
        type=news_type,
        content_name=content_name,
        content_url=content_url,
    )

    error = validate_news_form(news_type, content_name, content_url)
    if error:
        return _news_form(
            request,
            "admin/news/add.html",
            username=session.admin_username,
            form=submitted,
            error=error,
        )

    try:
        news_id = await create_news(
            db,
            news_type=news_type,
            content_name=content_name,
            content_url=content_url,
        )
    except Exception:
        logger.exception("Error adding news")
        return _news_form(
            request,
            "admin/news/add.html",
            username=session.admin_username,
            form=submitted,
            error="An error occurred while adding news. Please try again.",
        )

    logger.info("News %s created by %s", news_id, session.admin_username)
    return _list_redirect(success="created")


@router.get("/edit/{news_id}", response_class=HTMLResponse)
async def edit_news_page(
    request: Request,
    news_id: str,
    db: AsyncSession = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
) -> Response:
    """Display the edit form for one news item."""
    redirect, session = await require_auth(request, store)
    if redirect:
        return redirect

    parsed_id = _parse_news_id(news_id)
    if parsed_id is None:
        return _list_redirect(error="invalid_id")

    try:
        item = await get_news(db, parsed_id)
    except Exception:
        logger.exception("Error fetching news %s for edit", parsed_id)
        return _list_redirect(error="load_failed")

    if item is None:
        return _list_redirect(error="not_found")

    return _news_form(
        request,
        "admin/news/edit.html",
        username=session.admin_username,
        form=NewsFormData.from_news(item),
    )


@router.post("/edit/{news_id}", response_class=HTMLResponse)
async def edit_news(
    request: Request,
    news_id: str,
    news_type: str = Form(default="", alias="type"),
    content_name: str = Form(default="", alias="contentName"),
    content_url: str = Form(default="", alias="contentUrl"),
    db: AsyncSession = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
) -> Response:
    """Validate and apply an edit to one news item."""
    redirect, session = await require_auth(request, store)
    if redirect:
        return redirect

    parsed_id = _parse_news_id(news_id)
    if parsed_id is None:
        return _list_redirect(error="invalid_id")

    try:
        error = validate_news_form(news_type, content_name, content_url)
        if error:
            # Blank fields fall back to the stored row
            current = await get_news(db, parsed_id)
            if current is None:
                return _list_redirect(error="not_found")
            return _news_form(
                request,
                "admin/news/edit.html",
                username=session.admin_username,
                form=NewsFormData.from_news(current).merged_with(
                    news_type, content_name, content_url
                ),
                error=error,
            )

        updated = await update_news(
            db,
            parsed_id,
            news_type=news_type,
            content_name=content_name,
            content_url=content_url,
        )
    except Exception:
        logger.exception("Error updating news %s", parsed_id)
        return _list_redirect(error="update_failed")

    if not updated:
        return _list_redirect(error="not_found")

    logger.info("News %s updated by %s", parsed_id, session.admin_username)
    return _list_redirect(success="updated")


@router.delete("/{news_id}")
async def delete_news_item(
    request: Request,
    news_id: str,
    db: AsyncSession = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
) -> Response:
    """Delete one news item and report the outcome as JSON."""
    redirect, session = await require_auth(request, store)
    if redirect:
        return redirect

    parsed_id = _parse_news_id(news_id)
    if parsed_id is None:
        return _action_response(400, False, "News ID is required")

    try:
        deleted = await delete_news(db, parsed_id)
    except Exception:
        logger.exception("Error deleting news %s", parsed_id)
        return _action_response(500, False, "Error deleting news")

    if not deleted:
        return _action_response(404, False, "News not found")

    logger.info("News %s deleted by %s", parsed_id, session.admin_username)
    return _action_response(200, True, "News deleted successfully")


def _action_response(status_code: int, success: bool, message: str) -> JSONResponse:
    body = NewsActionResponse(success=success, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())
