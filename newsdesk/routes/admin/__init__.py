"""Admin panel routes.

This module provides the admin UI routes organized into sub-routers:
- auth: Login, logout (public routes)
- news: News list/add/edit/delete (authenticated routes)
"""

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from newsdesk.routes.admin.auth import router as auth_router
from newsdesk.routes.admin.helpers import LOGIN_URL
from newsdesk.routes.admin.news import router as news_router

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("")
async def admin_home() -> RedirectResponse:
    """Send bare /admin to the login page."""
    return RedirectResponse(url=LOGIN_URL, status_code=303)


# Include sub-routers
router.include_router(auth_router)
router.include_router(news_router)
