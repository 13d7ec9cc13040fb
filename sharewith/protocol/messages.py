# sharewith/protocol/messages.py
from __future__ import annotations
from typing import Any, Dict, Iterable, Mapping
from .types import *

# server side builders

def msg_display_name(descriptor: Mapping[str, Any]) -> Dict[str, Any]:
    return {"type": DISPLAY_NAME,
            "message": {"displayName": descriptor.get("displayName"), "deviceName": descriptor.get("deviceName")}}

def msg_peers(infos: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": PEERS, "peers": list(infos)}

def msg_peer_joined(info: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": PEER_JOINED, "peer": info}

def msg_peer_left(peer_id: str) -> Dict[str, Any]:
    return {"type": PEER_LEFT, "peerId": peer_id}

def msg_ping() -> Dict[str, Any]:
    return {"type": PING}
