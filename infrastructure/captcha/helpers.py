"""
Template helpers for rendering captcha widgets.

The plain helpers take a CaptchaManager explicitly. ``install_template_helpers``
registers context-aware versions as Jinja2 globals that find the
request-scoped manager on ``request.state.captcha`` (set by the
``get_captcha_manager`` dependency):

    {{ captcha_style() }}
    <form method="post">
        {{ captcha_markup() }}            {# default driver #}
        {{ captcha_markup("recaptcha") }} {# named driver #}
    </form>
    {{ captcha_script() }}
"""

from __future__ import annotations

from typing import Any, Optional

from jinja2 import Environment, pass_context
from jinja2.runtime import Context
from markupsafe import Markup

from infrastructure.captcha.manager import CaptchaManager
from infrastructure.captcha.protocol import CaptchaDriver


def captcha(manager: Optional[CaptchaManager], name: Optional[str] = None) -> Optional[CaptchaDriver]:
    """Return the named driver, or the current one when *name* is empty."""
    if manager is None:
        return None
    if not name:
        return manager.current
    return manager.get(name)


def captcha_style(manager: Optional[CaptchaManager], name: Optional[str] = None) -> Markup:
    driver = captcha(manager, name)
    return Markup(driver.render_style()) if driver is not None else Markup("")


def captcha_markup(manager: Optional[CaptchaManager], name: Optional[str] = None) -> Markup:
    driver = captcha(manager, name)
    return Markup(driver.render_markup()) if driver is not None else Markup("")


def captcha_script(manager: Optional[CaptchaManager], name: Optional[str] = None) -> Markup:
    driver = captcha(manager, name)
    return Markup(driver.render_script()) if driver is not None else Markup("")


def _manager_from_context(context: Context) -> Optional[CaptchaManager]:
    manager = context.get("captcha_manager")
    if manager is not None:
        return manager
    request: Any = context.get("request")
    if request is None:
        return None
    return getattr(request.state, "captcha", None)


def install_template_helpers(env: Environment) -> Environment:
    """Expose the helpers as globals on a Jinja2 environment."""

    @pass_context
    def _captcha(context: Context, name: Optional[str] = None):
        return captcha(_manager_from_context(context), name)

    @pass_context
    def _captcha_style(context: Context, name: Optional[str] = None) -> Markup:
        return captcha_style(_manager_from_context(context), name)

    @pass_context
    def _captcha_markup(context: Context, name: Optional[str] = None) -> Markup:
        return captcha_markup(_manager_from_context(context), name)

    @pass_context
    def _captcha_script(context: Context, name: Optional[str] = None) -> Markup:
        return captcha_script(_manager_from_context(context), name)

    env.globals.update(
        captcha=_captcha,
        captcha_style=_captcha_style,
        captcha_markup=_captcha_markup,
        captcha_script=_captcha_script,
    )
    return env
