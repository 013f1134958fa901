"""
Background and card styles

Calendars store their look as compact strings, either a legacy preset name
("classic", "winter", ...) or an encoded form:

    custom-bg:<start>,<end>,<pattern>,<quantity>,<size>,<rotation>,<animation>
    custom-card:<color>

Only the first field of each is required. These helpers turn the strings into
named records and back.
"""
import logging
from typing import Optional

from pydantic import BaseModel, Field

from advent.calendar.constants import CARD_DEFAULTS, THEME_DEFAULTS

logger = logging.getLogger(__name__)

BACKGROUND_PREFIX = "custom-bg:"
CARD_PREFIX = "custom-card:"

# fields are joined with commas when stored
NO_COMMA = r"^[^,]*$"


class BackgroundStyle(BaseModel):
    start_color: str = Field(..., min_length=1, max_length=32, pattern=NO_COMMA)
    end_color: Optional[str] = Field(None, max_length=32, pattern=NO_COMMA)
    pattern: str = Field("", max_length=16, pattern=NO_COMMA)
    quantity: int = Field(20, ge=0, le=200)
    size: float = Field(1.0, gt=0, le=10)
    rotation: int = Field(45, ge=-360, le=360)
    animation: str = Field("float", max_length=32, pattern=NO_COMMA)


class CardStyle(BaseModel):
    color: str = Field(..., min_length=1, max_length=32)


def _number(raw: str, cast, default):
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.debug("Ignoring malformed style value %r", raw)
        return default


def parse_background(value: Optional[str]) -> BackgroundStyle:
    """Decode a stored background; unknown preset names fall back to classic."""
    value = value or "classic"
    if not value.startswith(BACKGROUND_PREFIX):
        value = THEME_DEFAULTS.get(value, THEME_DEFAULTS["classic"])

    parts = value[len(BACKGROUND_PREFIX):].split(",")
    if not parts[0]:
        return parse_background("classic")
    # pad so positional lookups below never fail
    parts += [""] * (7 - len(parts))

    start = parts[0]
    # stored values were validated on write; don't re-reject legacy rows
    return BackgroundStyle.model_construct(
        start_color=start,
        end_color=parts[1] or start,
        pattern=parts[2],
        quantity=_number(parts[3], int, 20),
        size=_number(parts[4], float, 1.0),
        rotation=_number(parts[5], int, 45),
        animation=parts[6] or "float",
    )


def format_background(style: BackgroundStyle) -> str:
    fields = [
        style.start_color,
        style.end_color or style.start_color,
        style.pattern,
        str(style.quantity),
        f"{style.size:g}",
        str(style.rotation),
        style.animation,
    ]
    return BACKGROUND_PREFIX + ",".join(fields)


def parse_card_style(value: Optional[str]) -> CardStyle:
    value = value or "classic"
    if not value.startswith(CARD_PREFIX):
        value = CARD_DEFAULTS.get(value, CARD_DEFAULTS["classic"])
    color = value[len(CARD_PREFIX):]
    if not color:
        return parse_card_style("classic")
    return CardStyle(color=color)


def format_card_style(style: CardStyle) -> str:
    return CARD_PREFIX + style.color
