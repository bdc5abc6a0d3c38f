"""
Captcha driver registry.

Resolves a driver name (or a driver class) to a constructed driver with the
shared HTTP client and the current request injected. Built-in drivers are
registered up front; applications add their own, or override built-ins, with
``register()``: either a driver class or a plain resolver function taking the
``{key, secret, url}`` config and returning a driver.

Every driver goes through the same validate-then-bind step, whichever way it
was constructed.
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Mapping, Optional, Union

from config import CaptchaSettings
from errors import CaptchaError, DriverContractError, DriverNotFoundError
from infrastructure.captcha.base import CaptchaType
from infrastructure.captcha.hcaptcha import HCaptchaDriver
from infrastructure.captcha.null import NullDriver
from infrastructure.captcha.protocol import CaptchaDriver, DriverConfig, DriverResolver
from infrastructure.captcha.recaptcha import ReCaptchaDriver
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

# Only these keys are forwarded to constructors and resolvers
_DRIVER_OPTIONS = ("key", "secret", "url")

DriverName = Union[str, type]


def _null_driver(config: DriverConfig, status: bool = True) -> NullDriver:
    return NullDriver(status=status, **config)


class DriverRegistry:
    def __init__(
        self,
        settings: CaptchaSettings,
        http_client: Optional[HttpClient],
        request: Any,
        registrations: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._request = request

        self._classes: dict[str, type] = {
            CaptchaType.HCAPTCHA.value: HCaptchaDriver,
            CaptchaType.RECAPTCHA.value: ReCaptchaDriver,
        }
        self._resolvers: dict[str, DriverResolver] = {
            CaptchaType.NULL.value: functools.partial(
                _null_driver, status=settings.status
            ),
        }

        for name, driver in (registrations or {}).items():
            self.register(name, driver)

    @property
    def settings(self) -> CaptchaSettings:
        return self._settings

    @property
    def http_client(self) -> Optional[HttpClient]:
        return self._http

    @property
    def request(self) -> Any:
        return self._request

    def register(self, name: str, driver: Any) -> "DriverRegistry":
        """Register a driver class or resolver function under *name*.

        The last registration for a name wins; a class replaces an earlier
        resolver and vice versa.
        """
        if inspect.isclass(driver):
            self._classes[name] = driver
            self._resolvers.pop(name, None)
        elif callable(driver):
            self._resolvers[name] = driver
            self._classes.pop(name, None)
        else:
            raise TypeError(
                f"Captcha driver [{name}] must be a class or a callable, "
                f"got {type(driver).__name__}"
            )
        log.debug("captcha_driver_registered", driver=name)
        return self

    def registered(self) -> list[str]:
        return sorted(set(self._classes) | set(self._resolvers))

    def resolve(
        self, name: Optional[DriverName] = None, config: Optional[Mapping[str, Any]] = None
    ) -> CaptchaDriver:
        """Resolve *name* to a ready-to-use driver, raising on failure.

        Raises:
            DriverNotFoundError: nothing is registered or aliased for *name*.
            DriverContractError: the constructed object is not a CaptchaDriver.
        """
        if not name:
            name = self._settings.default

        label = name.__qualname__ if isinstance(name, type) else name
        merged: DriverConfig = {
            "name": label,
            **self._settings.driver_settings(label),
            **(config or {}),
        }
        return self._create_driver(name, label, merged)

    def make(
        self, name: Optional[DriverName] = None, config: Optional[Mapping[str, Any]] = None
    ) -> Optional[CaptchaDriver]:
        """Like ``resolve()`` but logs resolution errors and returns None.

        Errors raised by application resolvers or driver constructors are
        logged and degrade the same way.
        """
        name = name or self._settings.default
        label = name.__qualname__ if isinstance(name, type) else name
        try:
            return self.resolve(name, config)
        except CaptchaError as e:
            log.error(
                "captcha_driver_resolution_failed",
                driver=label,
                error_code=e.error_code,
                error=e.message,
            )
        except Exception as e:
            log.error(
                "captcha_driver_resolution_failed",
                driver=label,
                error_code="captcha_driver_error",
                error=str(e),
                error_type=type(e).__name__,
            )
        return None

    def _create_driver(
        self, name: DriverName, label: str, config: DriverConfig
    ) -> CaptchaDriver:
        options: DriverConfig = {k: config[k] for k in _DRIVER_OPTIONS if k in config}

        alias: Optional[str] = None
        driver_cls: Optional[type] = None
        if isinstance(name, type):
            driver_cls = name
        else:
            alias = self._settings.drivers.get(name)
            driver_cls = self._classes.get(name)
            if driver_cls is None and alias:
                driver_cls = self._classes.get(alias)

        if driver_cls is not None:
            try:
                instance = driver_cls(**options)
            except TypeError as e:
                raise DriverContractError(
                    label, driver_cls.__qualname__, "__init__(key, secret, url)"
                ) from e
            return self._initialize(label, driver_cls.__qualname__, instance)

        resolver = self._resolvers.get(name)
        if resolver is None and alias:
            resolver = self._resolvers.get(alias)
        if resolver is not None:
            instance = resolver(options)
            return self._initialize(label, type(instance).__qualname__, instance)

        raise DriverNotFoundError(label)

    def _initialize(self, label: str, cls_name: str, instance: Any) -> CaptchaDriver:
        if not isinstance(instance, CaptchaDriver):
            raise DriverContractError(label, cls_name, CaptchaDriver.__qualname__)

        instance.bind(self._http, self._request)
        log.debug("captcha_driver_resolved", driver=label, driver_class=cls_name)
        return instance
