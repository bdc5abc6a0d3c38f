import httpx
import pytest

from infrastructure.captcha.hcaptcha import HCaptchaDriver
from infrastructure.captcha.recaptcha import ReCaptchaDriver
from infrastructure.http_client import HttpClient


def _client(status_code=200, json=None, calls=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if json is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=json)

    return HttpClient(transport=httpx.MockTransport(handler))


async def test_verify_hcaptcha_success(make_request):
    calls = []
    async with _client(json={"success": True}, calls=calls) as http:
        driver = HCaptchaDriver(key="k", secret="s").bind(
            http, make_request(form={"h-captcha-response": "valid_token"})
        )
        assert await driver.verify()
    assert str(calls[0].url) == "https://hcaptcha.com/siteverify"


async def test_verify_hcaptcha_failure(make_request):
    async with _client(json={"success": False}) as http:
        driver = HCaptchaDriver(key="k", secret="s").bind(
            http, make_request(form={"h-captcha-response": "invalid_token"})
        )
        assert not await driver.verify()


async def test_verify_hcaptcha_http_error(make_request):
    async with _client(status_code=500) as http:
        driver = HCaptchaDriver(key="k", secret="s").bind(
            http, make_request(form={"h-captcha-response": "any_token"})
        )
        assert not await driver.verify()


async def test_verify_hcaptcha_non_json_body(make_request):
    async with _client(status_code=200) as http:
        driver = HCaptchaDriver(key="k", secret="s").bind(
            http, make_request(form={"h-captcha-response": "any_token"})
        )
        assert not await driver.verify()


async def test_verify_recaptcha_success(make_request):
    calls = []
    async with _client(json={"success": True}, calls=calls) as http:
        driver = ReCaptchaDriver(key="k", secret="s").bind(
            http, make_request(form={"g-recaptcha-response": "valid_token"})
        )
        assert await driver.verify()
    assert str(calls[0].url) == "https://www.google.com/recaptcha/api/siteverify"


if __name__ == "__main__":
    pytest.main()
