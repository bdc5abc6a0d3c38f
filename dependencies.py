"""
FastAPI dependency providers.

App-wide collaborators (settings, the shared HttpClient, driver
registrations) live on ``app.state`` and are created in the lifespan. The
captcha registry and manager are built per request, so cached drivers never
outlive the request they were bound to.
"""

from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends, Request

from config import AppSettings, CaptchaSettings
from errors import CaptchaUnavailableError, CaptchaVerificationError
from infrastructure.captcha.manager import CaptchaManager
from infrastructure.captcha.protocol import CaptchaDriver
from infrastructure.captcha.registry import DriverRegistry
from infrastructure.http_client import HttpClient


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_captcha_settings(settings: AppSettings = Depends(get_settings)) -> CaptchaSettings:
    return settings.captcha


def get_http_client(request: Request) -> Optional[HttpClient]:
    """Return the shared HttpClient (None outside the app lifespan)."""
    return getattr(request.app.state, "http_client", None)


def get_captcha_registry(
    request: Request,
    settings: CaptchaSettings = Depends(get_captcha_settings),
    http_client: Optional[HttpClient] = Depends(get_http_client),
) -> DriverRegistry:
    return DriverRegistry(
        settings,
        http_client,
        request,
        registrations=getattr(request.app.state, "captcha_registrations", None),
    )


def get_captcha_manager(
    request: Request,
    registry: DriverRegistry = Depends(get_captcha_registry),
) -> CaptchaManager:
    """Build the request's CaptchaManager and expose it to templates."""
    manager = CaptchaManager(registry)
    request.state.captcha = manager
    return manager


def require_captcha(name: Optional[str] = None) -> Callable:
    """Dependency factory guarding a route with captcha verification.

    Usage:
        @router.post("/contact")
        async def contact(driver: CaptchaDriver = Depends(require_captcha())):
            ...
    """

    async def _require_captcha(
        manager: CaptchaManager = Depends(get_captcha_manager),
    ) -> CaptchaDriver:
        driver = manager.get(name)
        if driver is None:
            raise CaptchaUnavailableError("Captcha verification is not available.")
        if not await driver.verify():
            raise CaptchaVerificationError(
                "Captcha verification failed.",
                field=getattr(driver, "token_field", None),
            )
        return driver

    return _require_captcha
