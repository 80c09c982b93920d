"""Shared helpers for admin routes."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.responses import Response

from newsdesk.services.session_store import (
    ADMIN_SESSION_COOKIE_NAME,
    SessionData,
    SessionStore,
)

logger = logging.getLogger(__name__)

LOGIN_URL = "/admin/login"
NEWS_LIST_URL = "/admin/news"


def base_context(request: Request, **extra: Any) -> dict[str, Any]:
    """Build base template context with common values.

    Args:
        request: The FastAPI request object.
        **extra: Additional context values to include.

    Returns:
        Dict with request, current_year, and any extra values.
    """
    return {
        "request": request,
        "current_year": datetime.now().year,
        **extra,
    }


def get_session_token(request: Request) -> str | None:
    """Raw session token from the request cookie, if any."""
    return request.cookies.get(ADMIN_SESSION_COOKIE_NAME) or None


async def get_admin_session(
    request: Request,
    store: SessionStore,
) -> SessionData | None:
    """Return the authenticated session for this request, or None.

    Args:
        request: The FastAPI request object.
        store: Session store to resolve the cookie token against.

    Returns:
        The session data when it exists and is flagged as logged in. A store
        failure is logged and treated as no session.
    """
    raw_token = get_session_token(request)
    if raw_token is None:
        return None
    try:
        data = await store.load(raw_token)
    except Exception:
        logger.exception("Failed to load admin session")
        return None
    if data is None or not data.admin_logged_in:
        return None
    return data


async def require_auth(
    request: Request,
    store: SessionStore,
) -> tuple[Response | None, SessionData | None]:
    """Require an authenticated session, redirecting to login if needed.

    Returns:
        Tuple of (redirect_response, session). If redirect is not None, return it.
    """
    session = await get_admin_session(request, store)
    if session is None:
        return RedirectResponse(url=LOGIN_URL, status_code=303), None
    return None, session


def render(
    request: Request,
    template: str,
    status_code: int = 200,
    **context: Any,
) -> Response:
    """Render an admin template with the base context."""
    return request.app.state.templates.TemplateResponse(
        request,
        template,
        base_context(request, **context),
        status_code=status_code,
    )
