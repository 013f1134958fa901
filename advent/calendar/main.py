"""
Calendar Service API

Advent calendars addressed by slug. Creators get an admin session and edit
day content; visitors see one day per calendar date, optionally behind a
guest password.
"""
import logging
from datetime import datetime

from fastapi import FastAPI, APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from advent.shared.database import check_db_connection, get_db, engine, Base
from advent.shared.cors import setup_cors
from advent.shared.errors import ConfigurationError, log_and_sanitize_error
from advent.shared.passwords import hash_password, verify_password
from advent.shared.security_headers import setup_security_headers
from advent.shared.upsert import atomic_upsert
from advent.calendar.access import (
    get_calendar,
    get_viewer_role,
    grant_access,
    grant_admin,
    require_admin,
    revoke_all,
)
from advent.calendar.assembler import assemble_days
from advent.calendar.constants import (
    DEFAULT_BACKGROUND,
    DEFAULT_CARD_STYLE,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_DAY_CONTENT,
    DEFAULT_THEME_COLOR,
    RESERVED_SLUGS,
)
from advent.calendar.gate import get_now
from advent.calendar.models import Calendar, CalendarDay
from advent.calendar.schemas import (
    AuthResult,
    CalendarCreate,
    CalendarProfile,
    CalendarSettingsUpdate,
    DayUpdate,
    DayView,
    PasswordCheck,
    PasswordUpdate,
    ViewerRole,
)
from advent.calendar.themes import (
    format_background,
    format_card_style,
    parse_background,
    parse_card_style,
)

logger = logging.getLogger("calendar-service")
logging.basicConfig(level=logging.INFO)

app = FastAPI(
    title="Calendar Service",
    version="1.0.0",
    description="Personalized advent calendars with date-gated daily surprises",
    docs_url="/calendar/docs",
    redoc_url="/calendar/redoc",
    openapi_url="/calendar/openapi.json",
)

setup_cors(app)
setup_security_headers(app)

# Create database tables
Base.metadata.create_all(bind=engine)


def error_response(message: str, category: str, status_code: int) -> JSONResponse:
    """Consistent error payloads across the API."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "category": category,
        },
    )


@app.exception_handler(ConfigurationError)
async def configuration_exception_handler(request: Request, exc: ConfigurationError):
    logger.error("Misconfigured calendar on %s: %s", request.url.path, exc)
    return error_response(
        message="This calendar is not configured correctly.",
        category="configuration",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s", request.url.path)
    return error_response(
        message="A database error occurred while processing the request.",
        category="database",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail
    message = (
        detail.get("message") if isinstance(detail, dict) else str(detail)
    ) or "Request failed."
    category = (
        detail.get("category") if isinstance(detail, dict) else None
    )

    if not category:
        if exc.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
            category = "security"
        elif exc.status_code >= 500:
            category = "server_error"
        else:
            category = "client_error"

    return error_response(
        message=message,
        category=category,
        status_code=exc.status_code,
    )


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error on %s", request.url.path, exc_info=exc)
    return error_response(
        message="An unexpected server error occurred. Please try again later.",
        category="server_error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def total_days(calendar: Calendar) -> int:
    return max((day.day_number for day in calendar.days), default=0)


def build_profile(calendar: Calendar, role: ViewerRole) -> CalendarProfile:
    return CalendarProfile(
        slug=calendar.slug,
        recipient_name=calendar.recipient_name,
        theme_color=calendar.theme_color,
        has_password=calendar.has_password,
        start_date=calendar.start_date,
        total_days=total_days(calendar),
        background=parse_background(calendar.background),
        card_style=parse_card_style(calendar.card_style),
        role=role,
    )


# Router setup
router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/health")
def health():
    """Health check endpoint - returns service status and database connectivity"""
    db_connected = check_db_connection()

    return {
        "status": "ok" if db_connected else "degraded",
        "service": "calendar",
        "database": "connected" if db_connected else "disconnected"
    }


@router.post("/calendars", response_model=CalendarProfile, status_code=201)
def create_calendar(
    calendar_data: CalendarCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Create a calendar together with its empty day slots.

    The creator is signed in as admin straight away.
    """
    if calendar_data.slug in RESERVED_SLUGS:
        raise HTTPException(status_code=400, detail="Slug is reserved")

    existing = db.query(Calendar).filter(Calendar.slug == calendar_data.slug).first()
    if existing:
        raise HTTPException(status_code=400, detail="Slug already exists")

    access_code = calendar_data.access_code if (calendar_data.access_code or "").strip() else None

    calendar = Calendar(
        slug=calendar_data.slug,
        recipient_name=calendar_data.recipient_name,
        start_date=calendar_data.start_date.isoformat(),
        admin_code_hash=hash_password(calendar_data.admin_code),
        access_code_hash=hash_password(access_code) if access_code else None,
        theme_color=calendar_data.theme_color or DEFAULT_THEME_COLOR,
        background=(
            format_background(calendar_data.background)
            if calendar_data.background else DEFAULT_BACKGROUND
        ),
        card_style=(
            format_card_style(calendar_data.card_style)
            if calendar_data.card_style else DEFAULT_CARD_STYLE
        ),
    )
    calendar.days = [
        CalendarDay(
            day_number=day_number,
            content_type=DEFAULT_CONTENT_TYPE,
            title=f"Day {day_number}",
            content=DEFAULT_DAY_CONTENT,
        )
        for day_number in range(1, calendar_data.total_days + 1)
    ]

    db.add(calendar)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race for the same slug
        db.rollback()
        raise HTTPException(status_code=400, detail="Slug already exists")

    db.refresh(calendar)
    grant_admin(response, calendar.slug)

    logger.info("Created calendar %s with %d days", calendar.slug, calendar_data.total_days)
    return build_profile(calendar, ViewerRole.ADMIN)


@router.get("/{slug}", response_model=CalendarProfile)
def get_calendar_profile(
    calendar: Calendar = Depends(get_calendar),
    role: ViewerRole = Depends(get_viewer_role),
):
    """Calendar configuration and the caller's role. Never includes day content."""
    return build_profile(calendar, role)


@router.get("/{slug}/days", response_model=list[DayView])
def get_days(
    calendar: Calendar = Depends(get_calendar),
    role: ViewerRole = Depends(get_viewer_role),
    now: datetime = Depends(get_now),
):
    """
    All days of the calendar in order.

    Days that are not yet open (or have no content) are returned locked,
    without title or content. Admins see everything.
    """
    if role is ViewerRole.GUEST_LOCKED:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "message": "This calendar is password protected",
                "category": "security",
            },
        )

    return assemble_days(calendar.start_date, calendar.days, role, now)


@router.post("/{slug}/access", response_model=AuthResult)
def verify_access(
    credentials: PasswordCheck,
    response: Response,
    calendar: Calendar = Depends(get_calendar),
):
    """Check the guest password and hand out a guest session."""
    if not calendar.has_password:
        return AuthResult(success=True, role=ViewerRole.GUEST_WITH_ACCESS)

    if not verify_password(credentials.password, calendar.access_code_hash):
        logger.warning("Failed guest login for calendar %s", calendar.slug)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Wrong password", "category": "security"},
        )

    grant_access(response, calendar.slug)
    return AuthResult(success=True, role=ViewerRole.GUEST_WITH_ACCESS)


@router.post("/{slug}/admin", response_model=AuthResult)
def verify_admin(
    credentials: PasswordCheck,
    response: Response,
    calendar: Calendar = Depends(get_calendar),
):
    """Check the admin password and hand out an admin session."""
    if not verify_password(credentials.password, calendar.admin_code_hash):
        logger.warning("Failed admin login for calendar %s", calendar.slug)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Wrong password", "category": "security"},
        )

    grant_admin(response, calendar.slug)
    return AuthResult(success=True, role=ViewerRole.ADMIN)


@router.post("/{slug}/logout")
def logout(slug: str, response: Response):
    """Drop both the admin and the guest session for this calendar."""
    revoke_all(response, slug)
    return {"success": True}


@router.put("/{slug}/days/{day_number}", response_model=DayView)
def update_day(
    day_number: int,
    day_data: DayUpdate,
    calendar: Calendar = Depends(get_calendar),
    role: ViewerRole = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Replace the title, content and type of one day (admin only).

    Args:
        day_number: Day number (1..number of days in the calendar)
    """
    if day_number < 1 or day_number > total_days(calendar):
        raise HTTPException(status_code=404, detail=f"Day {day_number} not found")

    try:
        atomic_upsert(
            db=db,
            model=CalendarDay,
            conflict_values={'calendar_id': calendar.id, 'day_number': day_number},
            update_data={
                'title': day_data.title,
                'content': day_data.content,
                'content_type': day_data.content_type,
            },
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        sanitized_msg, _ = log_and_sanitize_error(e, "Day update", "Could not save the day")
        raise HTTPException(status_code=500, detail=sanitized_msg)

    logger.info("Updated day %d of calendar %s", day_number, calendar.slug)
    return DayView(
        day=day_number,
        locked=False,
        type=day_data.content_type,
        title=day_data.title,
        content=day_data.content,
    )


@router.patch("/{slug}/settings", response_model=CalendarProfile)
def update_settings(
    settings: CalendarSettingsUpdate,
    calendar: Calendar = Depends(get_calendar),
    role: ViewerRole = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Update name, theme and start date (admin only). Only provided fields change."""
    if settings.recipient_name is not None:
        calendar.recipient_name = settings.recipient_name
    if settings.theme_color is not None:
        calendar.theme_color = settings.theme_color
    if settings.start_date is not None:
        calendar.start_date = settings.start_date.isoformat()
    if settings.background is not None:
        calendar.background = format_background(settings.background)
    if settings.card_style is not None:
        calendar.card_style = format_card_style(settings.card_style)

    db.commit()
    db.refresh(calendar)
    return build_profile(calendar, role)


@router.put("/{slug}/passwords")
def update_passwords(
    passwords: PasswordUpdate,
    calendar: Calendar = Depends(get_calendar),
    role: ViewerRole = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Change the admin password and switch guest protection on or off (admin only)."""
    # blank fields mean "keep the current password"
    admin_code = passwords.admin_code if (passwords.admin_code or "").strip() else None
    access_code = passwords.access_code if (passwords.access_code or "").strip() else None

    if admin_code:
        calendar.admin_code_hash = hash_password(admin_code)

    if not passwords.use_guest_password:
        calendar.access_code_hash = None
    elif access_code:
        calendar.access_code_hash = hash_password(access_code)
    elif not calendar.access_code_hash:
        raise HTTPException(
            status_code=400,
            detail="A guest password is required to enable protection",
        )

    db.commit()
    logger.info("Updated passwords for calendar %s", calendar.slug)
    return {"success": True, "has_password": calendar.has_password}


app.include_router(router)
