"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. The global exception handler
converts AppError subclasses to consistent JSON responses.

Captcha errors split into two kinds: resolution errors (a driver name that
cannot be resolved, or an object that does not satisfy the driver contract)
and the request-level errors raised by the ``require_captcha`` dependency.
A failed verification inside a driver is never an exception.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class CaptchaError(AppError):
    """Base for driver resolution failures."""

    error_code = "captcha_error"


class DriverNotFoundError(CaptchaError):
    error_code = "captcha_driver_not_found"

    def __init__(self, driver: str) -> None:
        super().__init__(
            f"Unable to find CAPTCHA driver class for [{driver}]. "
            "Check your configuration or driver registrations.",
            details={"driver": driver},
        )
        self.driver = driver


class DriverContractError(CaptchaError):
    error_code = "captcha_contract_violation"

    def __init__(self, driver: str, cls: str, contract: str) -> None:
        super().__init__(
            f"CAPTCHA driver [{driver}] (class: {cls}) does not implement [{contract}].",
            details={"driver": driver, "class": cls, "contract": contract},
        )
        self.driver = driver
        self.cls = cls
        self.contract = contract


class CaptchaVerificationError(AppError):
    status_code = 422
    error_code = "captcha_failed"


class CaptchaUnavailableError(AppError):
    status_code = 503
    error_code = "captcha_unavailable"


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        return JSONResponse(
            status_code=500,
            content={"error": "An internal server error occurred.", "code": "internal_error"},
        )
