"""
Client network address lookup.

The address doubles as the voter identity for ratings and the source address
of audit records.
"""

from __future__ import annotations

from fastapi import Request

from . import config

UNKNOWN_ADDRESS = "unknown"


def client_address(request: Request) -> str:
    if config.trust_proxy_headers():
        # First hop is the original client when behind a trusted proxy.
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client is None or not request.client.host:
        return UNKNOWN_ADDRESS
    return request.client.host
