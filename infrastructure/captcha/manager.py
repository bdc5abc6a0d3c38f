"""
Request-scoped cache of resolved captcha drivers.

The manager never raises on a bad driver name: resolution failures are logged
by the registry and ``get()`` returns None, so a misconfigured captcha does
not take the whole page down. Callers use the returned driver directly.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from infrastructure.captcha.protocol import CaptchaDriver
from infrastructure.captcha.registry import DriverRegistry


class CaptchaManager:
    def __init__(self, registry: DriverRegistry) -> None:
        self._registry = registry
        self._drivers: dict[str, CaptchaDriver] = {}
        self._current: Optional[str] = None

    @property
    def registry(self) -> DriverRegistry:
        return self._registry

    @property
    def default_name(self) -> str:
        return self._registry.settings.default

    @property
    def drivers(self) -> dict[str, CaptchaDriver]:
        return dict(self._drivers)

    @property
    def current(self) -> Optional[CaptchaDriver]:
        """The most recently resolved driver, resolving the default if none yet."""
        if self._current is not None and self._current in self._drivers:
            return self._drivers[self._current]
        return self.get()

    def get(
        self, name: Optional[str] = None, config: Optional[Mapping[str, Any]] = None
    ) -> Optional[CaptchaDriver]:
        """Return the cached driver for *name*, resolving it on first use.

        *config* overrides the static settings for this resolution only; it is
        ignored when the driver is already cached.
        """
        name = name or self.default_name

        driver = self._drivers.get(name)
        if driver is None:
            driver = self._registry.make(name, config)
            if driver is None:
                return None
            self._drivers[name] = driver

        self._current = name
        return driver

    def set(self, name: str, driver: CaptchaDriver) -> "CaptchaManager":
        """Cache a pre-built driver under *name*.

        The driver becomes current only when nothing is current yet.
        """
        self._drivers[name] = driver
        if self._current is None:
            self._current = name
        return self

    def reset(
        self, name: Optional[str] = None, config: Optional[Mapping[str, Any]] = None
    ) -> Optional[CaptchaDriver]:
        name = name or self.default_name
        self.remove(name)
        return self.get(name, config)

    def remove(self, name: Optional[str] = None) -> None:
        name = name or self.default_name
        self._drivers.pop(name, None)
        if self._current == name:
            self._current = None
