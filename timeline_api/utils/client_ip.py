"""
Client IP extraction for requests that pass through proxies or load balancers.
"""
from typing import Optional

from fastapi import Request

# Checked in order; the first non-empty value wins
_PROXY_HEADERS = ("X-Real-IP", "CF-Connecting-IP", "True-Client-IP")


def get_client_ip(request: Request) -> Optional[str]:
    """
    Best-effort client IP.

    Order: first entry of X-Forwarded-For, then X-Real-IP, CF-Connecting-IP,
    True-Client-IP, then the socket peer.

    Only trust these headers when the app sits behind a proxy that strips
    them from external requests.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()
        if client_ip:
            return client_ip

    for header in _PROXY_HEADERS:
        value = request.headers.get(header)
        if value and value.strip():
            return value.strip()

    if request.client:
        return request.client.host
    return None
