"""
Pydantic schemas for the Calendar API.

Defines request/response models with validation.
"""
from datetime import date
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from advent.calendar.constants import DEFAULT_DAYS, MAX_DAYS, MIN_DAYS
from advent.calendar.themes import BackgroundStyle, CardStyle

ContentType = Literal[
    "text", "image", "video", "youtube", "spotify",
    "quiz", "map", "scratch", "typewriter", "link",
]


class ViewerRole(str, Enum):
    """Who is looking at a calendar, derived per request."""
    ADMIN = "admin"
    GUEST_WITH_ACCESS = "guest"
    GUEST_LOCKED = "locked"


class DayView(BaseModel):
    """One day as served to a viewer. Locked days never carry title or content."""
    day: int
    locked: bool
    type: str = "text"
    title: Optional[str] = None
    content: Optional[str] = None


class CalendarCreate(BaseModel):
    """Schema for creating a new calendar."""
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    recipient_name: str = Field(..., min_length=1, max_length=200)
    admin_code: str = Field(..., min_length=1, max_length=200)
    access_code: Optional[str] = Field(None, max_length=200)
    start_date: date
    total_days: int = Field(DEFAULT_DAYS, ge=MIN_DAYS, le=MAX_DAYS)
    theme_color: Optional[str] = Field(None, max_length=50)
    background: Optional[BackgroundStyle] = None
    card_style: Optional[CardStyle] = None


class CalendarSettingsUpdate(BaseModel):
    """Schema for updating calendar settings. All fields optional."""
    recipient_name: Optional[str] = Field(None, min_length=1, max_length=200)
    theme_color: Optional[str] = Field(None, max_length=50)
    start_date: Optional[date] = None
    background: Optional[BackgroundStyle] = None
    card_style: Optional[CardStyle] = None


class PasswordUpdate(BaseModel):
    """
    Blank admin_code keeps the current admin password. With
    use_guest_password off the guest password is removed; with it on, a
    blank access_code keeps the current one.
    """
    admin_code: Optional[str] = Field(None, max_length=200)
    use_guest_password: bool
    access_code: Optional[str] = Field(None, max_length=200)


class DayUpdate(BaseModel):
    """Schema for updating one day's content."""
    title: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = None
    content_type: ContentType = "text"


class PasswordCheck(BaseModel):
    password: str


class CalendarProfile(BaseModel):
    """Public view of a calendar's configuration."""
    slug: str
    recipient_name: str
    theme_color: Optional[str] = None
    has_password: bool
    start_date: Optional[str] = None
    total_days: int
    background: BackgroundStyle
    card_style: CardStyle
    role: ViewerRole


class AuthResult(BaseModel):
    success: bool
    role: ViewerRole
