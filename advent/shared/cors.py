"""Sentralisert CORS-konfigurasjon for kalendertjenesten."""

import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


# Development origins (kun i dev-miljø)
DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "https://localhost:3000",
]


def get_allowed_origins() -> list[str]:
    """Hent liste over tillatte CORS origins basert på miljø."""
    origins = []

    # FRONTEND_URL er frontenden som serverer kalendersidene
    frontend_url = os.getenv("FRONTEND_URL")
    if frontend_url:
        origins.append(frontend_url.rstrip("/"))

    # Ekstra origins, kommaseparert
    for origin in os.getenv("ALLOWED_ORIGINS", "").split(","):
        clean = origin.strip().rstrip("/")
        if clean and clean not in origins:
            origins.append(clean)

    env = os.getenv("ENVIRONMENT", "development")
    if env != "production":
        origins.extend(o for o in DEV_ORIGINS if o not in origins)

    return origins


def setup_cors(app: FastAPI) -> None:
    """Legg til CORS-middleware på en FastAPI-app.

    Credentials er tillatt fordi rollene bæres i cookies.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
