"""Base classes shared by the built-in captcha drivers.

``Driver`` carries the state every driver has (site key, secret, siteverify
URL, injected HTTP client and request). ``SiteVerifyDriver`` implements the
token lookup, siteverify POST and widget rendering once; hCaptcha and
reCAPTCHA only differ in the class attributes they set.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from markupsafe import escape
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from infrastructure.http_client import HttpClient
from shared.ip_utils import get_client_ip
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class CaptchaType(str, Enum):
    """Identifiers of the built-in drivers."""

    HCAPTCHA = "hcaptcha"
    RECAPTCHA = "recaptcha"
    NULL = "null-captcha"


class Driver:
    """State holder for a captcha driver; subclasses provide the behaviour."""

    default_url: str = ""

    def __init__(self, key: str = "", secret: str = "", url: Optional[str] = None) -> None:
        self.key = key
        self.secret = secret
        self.url = url or self.default_url
        self.http_client: Optional[HttpClient] = None
        self.request: Any = None

    def bind(self, http_client: Optional[HttpClient], request: Any) -> "Driver":
        """Inject the shared HTTP client and the current inbound request."""
        self.http_client = http_client
        self.request = request
        return self

    def __repr__(self) -> str:
        return f"<{type(self).__name__} url={self.url!r}>"


class SiteVerifyDriver(Driver):
    """Driver for vendors exposing a ``siteverify`` style endpoint."""

    driver_type: CaptchaType
    token_field: str
    widget_class: str
    script_src: str

    def identify(self) -> str:
        return self.driver_type.value

    async def _read_token(self) -> Optional[str]:
        """Return the vendor token from the bound request, if present."""
        request = self.request
        if request is None:
            return None

        token = request.query_params.get(self.token_field)
        if token:
            return token

        content_type = request.headers.get("content-type", "")
        if content_type.startswith(_FORM_CONTENT_TYPES):
            try:
                form = await request.form()
            except (MultiPartException, HTTPException):
                # malformed body, e.g. multipart without a boundary
                return None
            value = form.get(self.token_field)
            return value if isinstance(value, str) and value else None

        if content_type.startswith("application/json"):
            try:
                body = await request.json()
            except ValueError:
                return None
            value = body.get(self.token_field) if isinstance(body, dict) else None
            return value if isinstance(value, str) and value else None

        return None

    async def verify(self) -> bool:
        token = await self._read_token()
        if not token:
            return False

        remote_ip = get_client_ip(self.request)
        payload = {
            "secret": self.secret,
            "remoteip": remote_ip,
            "response": token,
        }
        try:
            response = await self.http_client.post_form(self.url, data=payload)
        except Exception as e:
            log.error(
                "captcha_request_failed",
                driver=self.identify(),
                remote_ip=hash_ip(remote_ip),
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if not 200 <= response.status_code < 300:
            log.error(
                "captcha_api_error",
                driver=self.identify(),
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            return False

        try:
            data = response.json()
        except ValueError:
            log.error("captcha_api_invalid_json", driver=self.identify())
            return False

        success = data.get("success", False) if isinstance(data, dict) else False
        if not success:
            log.warning(
                "captcha_verification_failed",
                driver=self.identify(),
                error_codes=data.get("error-codes", []) if isinstance(data, dict) else [],
            )
        return bool(success)

    def render_style(self) -> str:
        return (
            "<!-- Captcha StyleSheet -->\n"
            "<style>\n"
            f"    .{self.widget_class} > div {{\n"
            "        width: 100% !important;\n"
            "    }\n"
            f"    .{self.widget_class} iframe {{\n"
            "        width: 100% !important;\n"
            "    }\n"
            "</style>"
        )

    def render_markup(self) -> str:
        return (
            "<!-- Captcha Itself -->\n"
            '<div style="display:flex;margin-left:50px;">\n'
            f'    <div class="{self.widget_class}" data-sitekey="{escape(self.key)}"></div>\n'
            "</div>"
        )

    def render_script(self) -> str:
        return (
            "<!-- Captcha Script -->\n"
            f'<script src="{self.script_src}" async defer></script>'
        )
