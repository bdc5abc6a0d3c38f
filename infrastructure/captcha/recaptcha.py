"""Google reCAPTCHA (v2 checkbox) driver."""

from infrastructure.captcha.base import CaptchaType, SiteVerifyDriver

_RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


class ReCaptchaDriver(SiteVerifyDriver):
    driver_type = CaptchaType.RECAPTCHA
    default_url = _RECAPTCHA_VERIFY_URL
    token_field = "g-recaptcha-response"
    widget_class = "g-recaptcha"
    script_src = "https://www.google.com/recaptcha/api.js"
