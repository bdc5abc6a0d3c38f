"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from config import AppSettings
from errors import register_error_handlers
from infrastructure.captcha.helpers import install_template_helpers
from infrastructure.http_client import HttpClient
from routes.captcha_routes import router as captcha_router
from routes.health_routes import router as health_router

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "routes", "templates")


def register_captcha_driver(app: FastAPI, name: str, driver: Any) -> None:
    """Install a driver class or resolver for every request's registry.

    Call during startup, before requests are served.
    """
    app.state.captcha_registrations[name] = driver


def create_app(
    settings: Optional[AppSettings] = None,
    drivers: Optional[Mapping[str, Any]] = None,
    http_client: Optional[HttpClient] = None,
) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        client = http_client or HttpClient(timeout=settings.captcha.http_timeout)
        app.state.http_client = client

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        if http_client is None:
            await client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.captcha_registrations = dict(drivers or {})

    templates = Jinja2Templates(directory=TEMPLATE_DIR)
    install_template_helpers(templates.env)
    app.state.templates = templates

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(captcha_router)

    return app
