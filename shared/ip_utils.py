"""
Client IP resolution for captcha verification.

The vendor siteverify endpoints accept a ``remoteip`` hint alongside the
response token. Behind a proxy the socket peer is the proxy itself, so
forwarding headers are consulted first when they are trusted.
"""

from __future__ import annotations

from typing import Any

# Checked in priority order; the first non-empty value wins
PROXY_IP_HEADERS: tuple[str, ...] = (
    "CF-Connecting-IP",
    "True-Client-IP",
    "X-Forwarded-For",
    "X-Real-IP",
    "X-Client-IP",
)


def get_client_ip(request: Any, trust_proxy_headers: bool = True) -> str:
    """Extract the client IP from a Starlette/FastAPI ``Request``.

    Args:
        request: The current request (anything with ``headers`` and ``client``).
        trust_proxy_headers: Consult ``PROXY_IP_HEADERS`` before the socket
            peer address. Disable when the app is exposed directly.

    Returns:
        The resolved client IP string, or ``""`` if none can be found.
    """
    if request is None:
        return ""

    if trust_proxy_headers:
        for header in PROXY_IP_HEADERS:
            ip_value = request.headers.get(header)
            if ip_value:
                # X-Forwarded-For: client, proxy1, proxy2
                client_ip = ip_value.split(",")[0].strip()
                if client_ip:
                    return client_ip

    client = getattr(request, "client", None)
    return client.host if client else ""
