"""
Health check endpoint.

GET /health — checks that the default captcha driver resolves.
Rules:
- Default driver resolves → "healthy" (200).
- Default driver cannot be resolved → "unhealthy" (503); every guarded form
  would reject submissions.
- Captcha globally disabled (status=false) → "degraded" (200).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from dependencies import get_captcha_manager
from infrastructure.captcha.manager import CaptchaManager

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    manager: CaptchaManager = Depends(get_captcha_manager),
) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    driver = manager.get()
    if driver is None:
        checks["captcha"] = "error"
        overall = "unhealthy"
    else:
        checks["captcha"] = driver.identify()

    if not manager.registry.settings.status:
        checks["verification"] = "disabled"
        if overall == "healthy":
            overall = "degraded"
    else:
        checks["verification"] = "enabled"

    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(
        status_code=status_code,
        content={"status": overall, "driver": manager.default_name, "checks": checks},
    )
