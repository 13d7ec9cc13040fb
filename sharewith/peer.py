"""
Peer record for one live connection.

A Peer owns its connection handle and its heartbeat timer handle. At most one
timer is pending per Peer; arming a new one always cancels the previous one.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from websockets.asyncio.server import ServerConnection
from websockets.protocol import State

log = logging.getLogger(__name__)


class Connection(Protocol):
    """What a Peer needs from its transport."""

    @property
    def is_open(self) -> bool: ...

    async def send(self, text: str) -> None: ...

    async def close(self) -> None: ...


class WebSocketConnection:
    """Adapts a ``websockets`` server connection to :class:`Connection`."""

    def __init__(self, ws: ServerConnection, close_reason: str = "left") -> None:
        self.ws = ws
        self._close_reason = close_reason

    @property
    def is_open(self) -> bool:
        return self.ws.state is State.OPEN

    async def send(self, text: str) -> None:
        await self.ws.send(text)

    async def close(self) -> None:
        await self.ws.close(code=1000, reason=self._close_reason)


@dataclass(eq=False)
class Peer:

    """A connected browser. Identity is by object, not by field values."""

    id: str
    origin_key: str
    connection: Connection
    descriptor: Dict[str, Any] = field(default_factory=dict)
    capabilities: Dict[str, Any] = field(default_factory=dict)
    last_heartbeat_at: float = 0.0                      # monotonic, loop clock
    heartbeat_timer: Optional[asyncio.TimerHandle] = None

    @property
    def rtc_supported(self) -> bool:
        return bool(self.capabilities.get("rtcSupported", False))

    def info(self) -> Dict[str, Any]:
        """Public info disclosed to the rest of the room."""
        return {"id": self.id, "name": self.descriptor, **self.capabilities}

    def tag(self) -> str:
        return f"{self.id}@{self.origin_key}"

    # ---- heartbeat timer ------------------------------------------------------

    def arm_heartbeat(self, handle: asyncio.TimerHandle) -> None:
        self.cancel_heartbeat()
        self.heartbeat_timer = handle

    def cancel_heartbeat(self) -> None:
        if self.heartbeat_timer is not None:
            self.heartbeat_timer.cancel()
            self.heartbeat_timer = None

    # ---- connection -----------------------------------------------------------

    async def close(self) -> None:
        if not self.connection.is_open:
            return
        try:
            await self.connection.close()
        except Exception as e:
            log.debug("close failed for %s: %s", self.tag(), e)

    def __repr__(self) -> str:
        return f"<Peer id={self.id} ip={self.origin_key} rtcSupported={self.rtc_supported}>"
