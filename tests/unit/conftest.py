"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during unit tests. Tests control config exclusively through monkeypatch.setenv()
or by constructing settings objects directly.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from config import CaptchaSettings, DriverSettings


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


def _response(status_code=200, payload=None, text=""):
    resp = MagicMock(status_code=status_code, text=text)
    resp.json.return_value = payload if payload is not None else {}
    return resp


@pytest.fixture
def http_client():
    """A stand-in HttpClient whose post_form answers {"success": true}."""
    http = MagicMock()
    http.post_form = AsyncMock(return_value=_response(200, {"success": True}))
    return http


@pytest.fixture
def make_response():
    return _response


@pytest.fixture
def captcha_settings():
    return CaptchaSettings(
        default="hcaptcha",
        status=True,
        captchas={
            "hcaptcha": DriverSettings(key="hc-site-key", secret="hc-secret"),
            "recaptcha": DriverSettings(key="rc-site-key", secret="rc-secret"),
            "null-captcha": DriverSettings(key="NOT-REQUIRED", secret="NOT-REQUIRED"),
        },
    )
