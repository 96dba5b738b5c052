"""
FastAPI application factory.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from budget_api import __version__
from budget_api.api.error_handlers import register_error_handlers
from budget_api.api.router import api_router
from budget_api.config import Settings
from budget_api.services.budget_service import BudgetService


def create_app(budget_service: BudgetService, settings: Optional[Settings] = None) -> FastAPI:
    """Build the read-only API around an initialized budget service."""
    settings = settings or Settings(_env_file=None)

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Read-only HTTP API over an Actual Budget server",
    )
    app.state.budget_service = budget_service

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    register_error_handlers(app)
    app.include_router(api_router)
    return app
