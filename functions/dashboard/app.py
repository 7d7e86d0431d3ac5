"""
FastAPI application entry point for the dashboard backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from dashboard.config import get_settings
from dashboard.routes import router


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=logging.INFO)
    app = FastAPI(title="Daily Verse Dashboard API", version="0.1.0")
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
