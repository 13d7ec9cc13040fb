"""
Room membership keyed by network origin.

- A room exists only while it has members: created on first join, deleted
  on last leave.
- join:  existing members hear "peer-joined" before the newcomer gets its
         "peers" roster, and only then is the newcomer inserted.
- leave: idempotent; cancels the heartbeat timer, removes, closes, then
         deletes the room or tells the remaining members "peer-left".
- Lookups never cross rooms.

Sends await the transport, so each room carries an asyncio.Lock that keeps
its membership changes and their broadcasts in dispatch order.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional

from .peer import Peer
from .protocol.messages import msg_peer_joined, msg_peer_left, msg_peers

log = logging.getLogger(__name__)

Sender = Callable[[Optional[Peer], Dict[str, Any]], Awaitable[None]]


@dataclass(eq=False)
class Room:
    key: str
    members: Dict[str, Peer] = field(default_factory=dict)   # peer id -> Peer
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


@dataclass
class RoomRegistry:
    send: Sender
    _rooms: Dict[str, Room] = field(default_factory=dict)    # origin key -> Room

    # ---- membership -----------------------------------------------------------

    async def join(self, peer: Peer) -> None:
        while True:
            room = self._rooms.get(peer.origin_key)
            if room is None:
                room = self._rooms[peer.origin_key] = Room(peer.origin_key)
            async with room.lock:
                if self._rooms.get(peer.origin_key) is not room:
                    continue  # torn down while we waited; start over

                # last-login-wins for a reused id within the room
                stale = room.members.get(peer.id)
                if stale is not None and stale is not peer:
                    log.info("peer %s replaced by a new connection", stale.tag())
                    await self._evict(room, stale)
                    if self._rooms.get(peer.origin_key) is not room:
                        self._rooms[peer.origin_key] = room

                try:
                    others = list(room.members.values())
                    joined = msg_peer_joined(peer.info())
                    for other in others:
                        await self.send(other, joined)
                    await self.send(peer, msg_peers(other.info() for other in others))
                    room.members[peer.id] = peer
                finally:
                    if not room.members and self._rooms.get(room.key) is room:
                        del self._rooms[room.key]  # join was interrupted
                log.info("peer %s joined room (%d members)", peer.tag(), len(room.members))
                return

    async def leave(self, peer: Peer) -> bool:
        """Remove ``peer``. Returns False when it was not a member."""
        peer.cancel_heartbeat()
        room = self._rooms.get(peer.origin_key)
        if room is None or room.members.get(peer.id) is not peer:
            return False
        async with room.lock:
            if room.members.get(peer.id) is not peer:
                return False
            await self._evict(room, peer)
        log.info("peer %s left room", peer.tag())
        return True

    async def _evict(self, room: Room, peer: Peer) -> None:
        # caller holds room.lock
        peer.cancel_heartbeat()
        del room.members[peer.id]
        await peer.close()

        if not room.members:
            if self._rooms.get(room.key) is room:
                del self._rooms[room.key]
            return

        left = msg_peer_left(peer.id)
        for other in list(room.members.values()):
            await self.send(other, left)

    # ---- lookup ---------------------------------------------------------------

    def find_peer(self, origin_key: str, peer_id: str) -> Optional[Peer]:
        room = self._rooms.get(origin_key)
        if room is None:
            return None
        return room.members.get(peer_id)

    def contains(self, peer: Peer) -> bool:
        return self.find_peer(peer.origin_key, peer.id) is peer

    def members(self, origin_key: str) -> List[Peer]:
        room = self._rooms.get(origin_key)
        return list(room.members.values()) if room else []

    def peers(self) -> Iterator[Peer]:
        for room in list(self._rooms.values()):
            yield from list(room.members.values())

    def __contains__(self, origin_key: object) -> bool:
        return origin_key in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)
