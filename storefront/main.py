"""
FastAPI application entrypoint for the storefront session bridge.
"""

from __future__ import annotations

from fastapi import FastAPI

from storefront.api.routes import router as api_router
from storefront.core.config import get_settings
from storefront.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Storefront Session Bridge",
        version="0.1.0",
        description="Session lifecycle for the storefront's e-commerce platform account.",
    )
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
