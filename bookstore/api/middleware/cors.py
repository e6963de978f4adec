"""
CORS for the browser frontend, which calls each service directly.
"""

from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Frontend dev servers, allowed outside production
DEV_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)


def allowed_origins(environment: str, extra_origins: Iterable[str] = ()) -> list[str]:
    """Dev origins (except in production) plus the configured extras, without duplicates."""
    origins = [] if environment == "production" else list(DEV_ORIGINS)
    for origin in extra_origins:
        if origin not in origins:
            origins.append(origin)
    return origins


def setup_cors(app: FastAPI, environment: str, extra_origins: Iterable[str] = ()) -> None:
    """Allow the frontend origins to call this service with a bearer token."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins(environment, extra_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=3600,
    )
