"""
Calendar Models
Database models for advent calendars and their day slots
"""

from uuid import uuid4

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from advent.shared.database import Base
from advent.calendar.constants import (
    DEFAULT_BACKGROUND,
    DEFAULT_CARD_STYLE,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_THEME_COLOR,
)


class Calendar(Base):
    """
    A configured countdown page, addressed by its slug.

    The start date is kept as the ISO string the creator entered; it is only
    parsed when a day has to be gated. The number of days is the number of
    CalendarDay rows.
    """
    __tablename__ = "calendars"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    slug = Column(String(100), unique=True, nullable=False, index=True)
    recipient_name = Column(String(200), nullable=False)
    start_date = Column(String(32))
    admin_code_hash = Column(String(255), nullable=False)
    access_code_hash = Column(String(255), nullable=True)
    theme_color = Column(String(50), default=DEFAULT_THEME_COLOR)
    background = Column(String(255), default=DEFAULT_BACKGROUND)
    card_style = Column(String(255), default=DEFAULT_CARD_STYLE)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    days = relationship(
        "CalendarDay",
        back_populates="calendar",
        order_by="CalendarDay.day_number",
        cascade="all, delete-orphan",
    )

    @property
    def has_password(self) -> bool:
        return bool(self.access_code_hash)


class CalendarDay(Base):
    """
    One numbered day of a calendar

    Each day has:
    - day_number: 1-based position in the calendar
    - content_type: text, image, youtube, quiz, ...
    - title / content: optional; content is an opaque payload (JSON for structured types)
    """
    __tablename__ = "calendar_days"
    __table_args__ = (
        UniqueConstraint("calendar_id", "day_number", name="uq_calendar_day_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    calendar_id = Column(
        String(36),
        ForeignKey("calendars.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day_number = Column(Integer, nullable=False)
    content_type = Column(String(30), nullable=False, default=DEFAULT_CONTENT_TYPE)
    title = Column(String(200))
    content = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    calendar = relationship("Calendar", back_populates="days")
