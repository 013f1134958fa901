"""
Viewer roles and session cookies

Each calendar has two cookies, ``admin-<slug>`` and ``access-<slug>``,
holding signed session tokens. The role of a request is resolved from them
into a single ViewerRole.
"""
import logging
import os

from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from advent.calendar.constants import ACCESS_COOKIE_MAX_AGE, ADMIN_COOKIE_MAX_AGE
from advent.calendar.models import Calendar
from advent.calendar.schemas import ViewerRole
from advent.shared.database import get_db
from advent.shared.session_tokens import issue_session_token, validate_session_token

logger = logging.getLogger(__name__)

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


def admin_cookie_name(slug: str) -> str:
    return f"admin-{slug}"


def access_cookie_name(slug: str) -> str:
    return f"access-{slug}"


def resolve_viewer_role(request: Request, calendar: Calendar) -> ViewerRole:
    slug = calendar.slug
    admin_token = request.cookies.get(admin_cookie_name(slug))
    if validate_session_token(admin_token, slug, ViewerRole.ADMIN.value):
        return ViewerRole.ADMIN

    if not calendar.has_password:
        return ViewerRole.GUEST_WITH_ACCESS

    access_token = request.cookies.get(access_cookie_name(slug))
    if validate_session_token(access_token, slug, ViewerRole.GUEST_WITH_ACCESS.value):
        return ViewerRole.GUEST_WITH_ACCESS

    return ViewerRole.GUEST_LOCKED


def _set_session_cookie(response: Response, name: str, token: str, max_age: int) -> None:
    response.set_cookie(
        key=name,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=ENVIRONMENT == "production",
        samesite="lax",
    )


def grant_admin(response: Response, slug: str) -> None:
    token = issue_session_token(slug, ViewerRole.ADMIN.value, ADMIN_COOKIE_MAX_AGE)
    _set_session_cookie(response, admin_cookie_name(slug), token, ADMIN_COOKIE_MAX_AGE)


def grant_access(response: Response, slug: str) -> None:
    token = issue_session_token(slug, ViewerRole.GUEST_WITH_ACCESS.value, ACCESS_COOKIE_MAX_AGE)
    _set_session_cookie(response, access_cookie_name(slug), token, ACCESS_COOKIE_MAX_AGE)


def revoke_all(response: Response, slug: str) -> None:
    response.delete_cookie(admin_cookie_name(slug))
    response.delete_cookie(access_cookie_name(slug))


# ──────────────────────────────────────────────────────────────────────────────
# FastAPI dependencies
# ──────────────────────────────────────────────────────────────────────────────

def get_calendar(slug: str, db: Session = Depends(get_db)) -> Calendar:
    calendar = db.query(Calendar).filter(Calendar.slug == slug).first()
    if not calendar:
        raise HTTPException(status_code=404, detail="Calendar not found")
    return calendar


def get_viewer_role(request: Request, calendar: Calendar = Depends(get_calendar)) -> ViewerRole:
    return resolve_viewer_role(request, calendar)


def require_admin(role: ViewerRole = Depends(get_viewer_role)) -> ViewerRole:
    if role is not ViewerRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": "Admin access required",
                "category": "security",
            },
        )
    return role
