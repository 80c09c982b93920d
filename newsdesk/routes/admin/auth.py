"""Admin authentication routes (login, logout)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from newsdesk.config import settings
from newsdesk.routes.admin.helpers import (
    LOGIN_URL,
    NEWS_LIST_URL,
    get_admin_session,
    get_session_token,
    render,
)
from newsdesk.services.admin_auth_service import (
    authenticate_admin,
    end_admin_session,
    start_admin_session,
)
from newsdesk.services.session_store import (
    ADMIN_SESSION_COOKIE_NAME,
    SESSION_TTL,
    SessionStore,
    get_session_store,
)
from newsdesk.utils.db_async import get_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-auth"])

INVALID_CREDENTIALS = "Invalid username or password"


def _login_form(request: Request, error: str | None = None) -> Response:
    return render(request, "admin/login.html", error=error, success=None)


@router.get("/login", response_class=HTMLResponse)
async def admin_login_page(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> Response:
    """Render the login form, or skip it when already logged in."""
    if await get_admin_session(request, store) is not None:
        return RedirectResponse(url=NEWS_LIST_URL, status_code=303)
    return _login_form(request)


@router.post("/login", response_class=HTMLResponse)
async def admin_login(
    request: Request,
    username: str = Form(default=""),
    password: str = Form(default=""),
    db: AsyncSession = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
) -> Response:
    """Check credentials and set a session cookie on success."""
    if not username or not password:
        return _login_form(request, error="Username and password are required")

    try:
        admin = await authenticate_admin(db, username=username, password=password)
        if admin is None:
            return _login_form(request, error=INVALID_CREDENTIALS)

        raw_token = await start_admin_session(
            store,
            admin,
            previous_token=get_session_token(request),
        )
    except Exception:
        logger.exception("Admin login failed")
        return _login_form(
            request, error="An error occurred during login. Please try again."
        )

    logger.info("Admin %s logged in", admin.username)
    response = RedirectResponse(url=NEWS_LIST_URL, status_code=303)
    response.set_cookie(
        key=ADMIN_SESSION_COOKIE_NAME,
        value=raw_token,
        httponly=True,
        samesite="lax",
        secure=not settings.is_dev,
        path="/",
        max_age=int(SESSION_TTL.total_seconds()),
    )
    return response


@router.api_route("/logout", methods=["GET", "POST"])
async def admin_logout(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> RedirectResponse:
    """Destroy the current session and clear the cookie."""
    await end_admin_session(store, get_session_token(request))

    response = RedirectResponse(url=LOGIN_URL, status_code=303)
    response.delete_cookie(ADMIN_SESSION_COOKIE_NAME, path="/")
    return response
