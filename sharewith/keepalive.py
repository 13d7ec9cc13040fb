"""
Per-peer keep-alive.

Each peer runs a single-shot timer of ``interval`` seconds. On every fire:

- no pong since the last ping (``now - last_heartbeat_at >= interval``):
  the peer is stale and leaves its room, which also cancels the timer;
- otherwise: ping again and re-arm.

A pong only moves ``last_heartbeat_at``; it never touches the timer.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Set

from .peer import Peer
from .protocol.messages import msg_ping
from .rooms import RoomRegistry

log = logging.getLogger(__name__)


class KeepAliveMonitor:
    def __init__(
        self,
        rooms: RoomRegistry,
        send: Callable[[Optional[Peer], Dict[str, Any]], Awaitable[None]],
        interval: float = 60.0,
    ) -> None:
        self.rooms = rooms
        self.send = send
        self.interval = interval
        self._tasks: Set[asyncio.Task] = set()

    def now(self) -> float:
        return asyncio.get_running_loop().time()

    async def start(self, peer: Peer) -> None:
        peer.last_heartbeat_at = self.now()
        await self._ping_and_arm(peer)

    def stop(self, peer: Peer) -> None:
        peer.cancel_heartbeat()

    def beat(self, peer: Peer) -> None:
        """Record a liveness acknowledgment."""
        peer.last_heartbeat_at = self.now()

    def is_stale(self, peer: Peer) -> bool:
        return self.now() - peer.last_heartbeat_at >= self.interval

    async def _ping_and_arm(self, peer: Peer) -> None:
        await self.send(peer, msg_ping())
        if not self.rooms.contains(peer):
            return  # left while the ping was in flight
        loop = asyncio.get_running_loop()
        peer.arm_heartbeat(loop.call_later(self.interval, self._on_timer, peer))

    def _on_timer(self, peer: Peer) -> None:
        peer.heartbeat_timer = None
        task = asyncio.ensure_future(self._check(peer))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _check(self, peer: Peer) -> None:
        if not self.rooms.contains(peer):
            return  # already gone
        if self.is_stale(peer):
            log.info("peer %s missed its heartbeat, evicting", peer.tag())
            await self.rooms.leave(peer)
            return
        await self._ping_and_arm(peer)

    async def drain(self) -> None:
        """Wait for in-flight timer follow-ups (used on shutdown)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
