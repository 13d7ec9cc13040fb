# tests/conftest.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

import pytest

from sharewith.config import Settings
from sharewith.identity import Identity
from sharewith.peer import Peer
from sharewith.transport import SignalingServer


class FakeConnection:

    """In-memory stand-in for a websocket; records what the server sends."""

    def __init__(self, name: str = "", journal: Optional[List[Tuple[str, Dict[str, Any]]]] = None):
        self.name = name
        self.journal = journal if journal is not None else []
        self.sent: List[Dict[str, Any]] = []
        self.open = True
        self.close_calls = 0

    @property
    def is_open(self) -> bool:
        return self.open

    async def send(self, text: str) -> None:
        if not self.open:
            raise ConnectionError("closed")
        msg = json.loads(text)
        self.sent.append(msg)
        self.journal.append((self.name, msg))

    async def close(self) -> None:
        self.open = False
        self.close_calls += 1

    def of_type(self, msg_type: str) -> List[Dict[str, Any]]:
        return [m for m in self.sent if m.get("type") == msg_type]


def make_identity(peer_id: str, rtc: bool = True) -> Identity:
    return Identity(
        peer_id=peer_id,
        descriptor={"displayName": f"Name {peer_id}", "deviceName": f"Device {peer_id}"},
        capabilities={"rtcSupported": rtc},
    )


def make_peer(peer_id: str, origin: str = "10.0.0.1", journal=None) -> Peer:
    conn = FakeConnection(peer_id, journal)
    ident = make_identity(peer_id)
    return Peer(id=peer_id, origin_key=origin, connection=conn,
                descriptor=ident.descriptor, capabilities=ident.capabilities)


def make_server(**overrides) -> SignalingServer:
    server = SignalingServer(Settings(**overrides))
    server.accepting = True   # no listener needed for dispatch tests
    return server


@pytest.fixture
def journal() -> List[Tuple[str, Dict[str, Any]]]:
    return []
