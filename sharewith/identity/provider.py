"""
Identity resolution for an inbound connection.

The server only needs three things from a handshake: an opaque peer id, a
display descriptor and the capability flags. The default provider keeps the
id in a cookie so a returning browser is recognised instead of re-issued.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Tuple

from websockets.datastructures import Headers

from .device import describe_device
from .identifiers import PeerID, new_peer_id
from .names import display_name

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Handshake:
    path: str
    headers: Headers
    remote_address: Optional[Tuple[Any, ...]] = None


@dataclass(frozen=True)
class Identity:
    peer_id: PeerID
    descriptor: Dict[str, Any] = field(default_factory=dict)
    capabilities: Dict[str, Any] = field(default_factory=dict)
    issued: bool = False   # True when the id was minted for this handshake


class IdentityProvider(Protocol):
    def resolve(self, handshake: Handshake) -> Identity: ...


def read_cookie(headers: Headers, name: str) -> Optional[str]:
    # Browsers send whatever other cookies the site set (JSON, spaces, bare
    # names); one odd pair must not hide ours.
    for raw in headers.get_all("Cookie"):
        for pair in raw.split(";"):
            key, sep, value = pair.partition("=")
            if not sep or key.strip() != name:
                continue
            value = value.strip().strip('"')
            if value:
                return value
    return None


def set_cookie_header(name: str, value: str) -> str:
    return f"{name}={value}; SameSite=Strict; Secure"


class CookieIdentityProvider:
    def __init__(self, cookie_name: str = "peerid") -> None:
        self.cookie_name = cookie_name

    def resolve(self, handshake: Handshake) -> Identity:
        peer_id = read_cookie(handshake.headers, self.cookie_name)
        issued = peer_id is None
        if issued:
            peer_id = new_peer_id()
            log.debug("issued peer id %s", peer_id)

        descriptor = describe_device(handshake.headers.get("User-Agent"))
        descriptor["displayName"] = display_name(peer_id)
        capabilities = {"rtcSupported": "webrtc" in handshake.path}
        return Identity(peer_id=peer_id, descriptor=descriptor, capabilities=capabilities, issued=issued)
