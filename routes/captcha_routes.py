"""
Captcha form and verification endpoints.

GET  /captcha         — renders a form with the captcha widget (?driver= picks one)
POST /captcha/verify  — guarded by require_captcha(); 422 when verification fails
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from dependencies import get_captcha_manager, require_captcha
from infrastructure.captcha.manager import CaptchaManager
from infrastructure.captcha.protocol import CaptchaDriver
from shared.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/captcha", tags=["captcha"])


@router.get("", response_class=HTMLResponse)
async def captcha_form(
    request: Request,
    driver: Optional[str] = None,
    manager: CaptchaManager = Depends(get_captcha_manager),
) -> HTMLResponse:
    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "captcha_form.html",
        {"driver": driver, "captcha_manager": manager},
    )


@router.post("/verify")
async def verify_captcha(
    driver: CaptchaDriver = Depends(require_captcha()),
) -> dict:
    log.info("captcha_verified", driver=driver.identify())
    return {"success": True, "driver": driver.identify()}
