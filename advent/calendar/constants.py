"""
Calendar service constants
"""
import os

# Timezone whose local midnight unlocks the next day
REFERENCE_TIMEZONE = os.getenv("ADVENT_TIMEZONE", "Asia/Taipei")

# Bounds for the number of days chosen at creation
MIN_DAYS = 2
MAX_DAYS = 30
DEFAULT_DAYS = 25

# Content every new day slot starts with
DEFAULT_CONTENT_TYPE = "text"
DEFAULT_DAY_CONTENT = "No surprise here yet!"

# Session cookies (seconds)
ADMIN_COOKIE_MAX_AGE = 60 * 60 * 24
ACCESS_COOKIE_MAX_AGE = 60 * 60 * 24 * 30

# Legacy preset names -> encoded styles
THEME_DEFAULTS = {
    "classic": "custom-bg:#450a0a,#14532d",
    "winter": "custom-bg:#0f172a,#1e293b",
    "cozy": "custom-bg:#FDF6E3,#FDF6E3",
    "sugar": "custom-bg:#ffe4e6,#ccfbf1",
}

CARD_DEFAULTS = {
    "classic": "custom-card:#7f1d1d",
    "winter": "custom-card:#1e293b",
    "cozy": "custom-card:#78350f",
    "sugar": "custom-card:#fb7185",
}

DEFAULT_BACKGROUND = THEME_DEFAULTS["classic"]
DEFAULT_CARD_STYLE = CARD_DEFAULTS["classic"]
DEFAULT_THEME_COLOR = "custom"

# Slugs that collide with fixed routes under /calendar
RESERVED_SLUGS = {"health", "calendars", "docs", "redoc", "openapi.json"}
