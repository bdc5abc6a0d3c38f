"""Null captcha driver.

Bypasses verification entirely: ``verify()`` returns the configured status
flag and the renderers emit HTML comments only. Used as the default so that
turning captcha off needs no template or route changes.
"""

from __future__ import annotations

from typing import Optional

from infrastructure.captcha.base import CaptchaType, Driver


class NullDriver(Driver):
    def __init__(
        self,
        key: str = "",
        secret: str = "",
        url: Optional[str] = None,
        status: bool = True,
    ) -> None:
        super().__init__(key=key, secret=secret, url=url)
        self.status = status

    def identify(self) -> str:
        return CaptchaType.NULL.value

    async def verify(self) -> bool:
        return bool(self.status)

    def render_style(self) -> str:
        return "<!-- Captcha StyleSheet -->"

    def render_markup(self) -> str:
        return "<!-- Captcha Itself -->"

    def render_script(self) -> str:
        return "<!-- Captcha Script -->"
