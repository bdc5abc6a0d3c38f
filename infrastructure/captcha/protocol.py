"""CaptchaDriver protocol — routes and templates depend on this, not the concrete drivers.

The registry checks every resolved object against it with ``isinstance`` before
handing it out, so custom drivers need not subclass ``Driver``.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, TypedDict, runtime_checkable


class DriverConfig(TypedDict, total=False):
    name: str
    key: str
    secret: str
    url: Optional[str]


@runtime_checkable
class CaptchaDriver(Protocol):
    def identify(self) -> str: ...

    async def verify(self) -> bool: ...

    def render_style(self) -> str: ...

    def render_markup(self) -> str: ...

    def render_script(self) -> str: ...

    def bind(self, http_client: Any, request: Any) -> "CaptchaDriver": ...


# Override resolvers receive the {key, secret, url} subset of the merged config
DriverResolver = Callable[[DriverConfig], Any]
