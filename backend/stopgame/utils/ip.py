from __future__ import annotations

from flask import Request

# Checked in order; X-Forwarded-For may hold a chain, the client is first.
_IP_HEADERS = ("CF-Connecting-IP", "X-Real-IP", "X-Forwarded-For")


def client_ip(request: Request) -> str:
    for header in _IP_HEADERS:
        value = request.headers.get(header, "")
        first = value.split(",")[0].strip()
        if first:
            return first
    return request.remote_addr or "unknown"
