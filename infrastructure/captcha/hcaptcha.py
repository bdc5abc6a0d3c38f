"""hCaptcha driver.

The token arrives in the ``h-captcha-response`` form field posted by the
widget; it is checked against https://hcaptcha.com/siteverify.
"""

from infrastructure.captcha.base import CaptchaType, SiteVerifyDriver

_HCAPTCHA_VERIFY_URL = "https://hcaptcha.com/siteverify"


class HCaptchaDriver(SiteVerifyDriver):
    driver_type = CaptchaType.HCAPTCHA
    default_url = _HCAPTCHA_VERIFY_URL
    token_field = "h-captcha-response"
    widget_class = "h-captcha"
    script_src = "https://hcaptcha.com/1/api.js"
