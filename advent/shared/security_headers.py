"""Sikkerhetsheaders for API-tjenester."""

import os

from fastapi import FastAPI, Request
from fastapi.responses import Response


DEFAULT_CSP = (
    "default-src 'self'; "
    "img-src 'self' data: https:; "
    "font-src 'self' data: https:; "
    "script-src 'self' 'unsafe-inline'; "
    "style-src 'self' 'unsafe-inline'; "
    "frame-src https://www.youtube.com https://open.spotify.com https://www.google.com; "
    "connect-src 'self'"
)

HSTS_VALUE = "max-age=31536000; includeSubDomains; preload"


def security_headers(environment: str) -> dict[str, str]:
    """Headers som settes på alle svar (HSTS kun i produksjon)."""
    headers = {
        "Content-Security-Policy": DEFAULT_CSP,
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        # Kalenderinnhold er tidsstyrt og skal aldri caches
        "Cache-Control": "no-cache, no-store, must-revalidate",
    }
    if environment == "production":
        headers["Strict-Transport-Security"] = HSTS_VALUE
    return headers


def setup_security_headers(app: FastAPI) -> None:
    """Legg til sikkerhetsheaders på alle svar fra appen."""
    headers = security_headers(os.getenv("ENVIRONMENT", "development"))

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next) -> Response:
        response = await call_next(request)
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response
