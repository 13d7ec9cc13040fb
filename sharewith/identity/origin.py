"""
Room keys.

Peers are grouped by the address the server sees them coming from: the first
``X-Forwarded-For`` hop when running behind a proxy, else the socket peer.
IPv4 and IPv6 loopback collapse to one key so local tabs find each other.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

LOOPBACK = "127.0.0.1"
_LOOPBACK_ALIASES = {"::1", "::ffff:127.0.0.1"}


def normalise_address(ip: str) -> str:
    ip = ip.strip()
    if ip in _LOOPBACK_ALIASES:
        return LOOPBACK
    return ip


def origin_key(
    headers: Mapping[str, str],
    remote_address: Optional[Any],
    trust_forwarded_for: bool = True,
) -> str:
    ip = ""
    if trust_forwarded_for:
        xff = headers.get("X-Forwarded-For", "")
        if xff:
            ip = xff.split(",")[0].strip()
    if not ip and remote_address:
        # (host, port) for IPv4, (host, port, flow, scope) for IPv6
        ip = remote_address[0] if isinstance(remote_address, (tuple, list)) else str(remote_address)
    return normalise_address(ip or "unknown")
