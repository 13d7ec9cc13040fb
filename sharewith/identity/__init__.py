from .device import describe_device
from .identifiers import PeerID, new_peer_id
from .names import display_name
from .origin import origin_key
from .provider import CookieIdentityProvider, Handshake, Identity, IdentityProvider, set_cookie_header

__all__ = [
    "PeerID", "new_peer_id",
    "describe_device", "display_name", "origin_key",
    "Handshake", "Identity", "IdentityProvider", "CookieIdentityProvider",
    "set_cookie_header",
]
