# sharewith/transport.py

"""
ShareWith signaling server (WebSocket)

- One WebSocket listener; every connection is one Peer.
- Identity is resolved once, during the HTTP handshake. First-time clients
  get a ``peerid`` cookie in the 101 response so a reconnect keeps its id.
- Exactly ONE JSON object per WebSocket text frame.
- Control frames (pong, disconnect) are handled here; any frame carrying
  ``to`` is relayed to that peer inside the sender's room, or dropped.
- Sends are fire-and-forget: no queueing, no retry, never raised.
"""

from __future__ import annotations

import asyncio
import json
import logging
from http import HTTPStatus
from typing import Any, Dict, Optional, Union

from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.exceptions import ConnectionClosed
from websockets.http11 import Request, Response

from .config import Settings, settings as default_settings
from .identity import CookieIdentityProvider, Handshake, Identity, IdentityProvider, origin_key, set_cookie_header
from .keepalive import KeepAliveMonitor
from .peer import Connection, Peer, WebSocketConnection
from .protocol.frames import Disconnect, MalformedFrame, Pong, decode_frame
from .protocol.messages import msg_display_name
from .rooms import RoomRegistry

log = logging.getLogger(__name__)


class SignalingServer:

    """
    Coordinator for rooms, keep-alive and relay.

    ``rooms`` and ``identity`` can be injected; by default the server owns a
    fresh RoomRegistry that sends through :meth:`send`.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        rooms: Optional[RoomRegistry] = None,
        identity: Optional[IdentityProvider] = None,
    ) -> None:
        self.settings = settings or default_settings
        self.rooms = rooms if rooms is not None else RoomRegistry(send=self.send)
        self.identity = identity or CookieIdentityProvider(self.settings.COOKIE_NAME)
        self.keepalive = KeepAliveMonitor(self.rooms, self.send, self.settings.HEARTBEAT_INTERVAL)
        self.accepting = False
        self._server: Optional[Server] = None

    # ---- public API -----------------------------------------------------------

    async def start(self) -> None:

        """Start the WebSocket listener."""

        self._server = await serve(
            self._conn_handler,
            self.settings.HOST,
            self.settings.PORT,
            process_request=self._process_request,
            process_response=self._process_response,
            close_timeout=self.settings.CLOSE_TIMEOUT,
            max_size=self.settings.MAX_FRAME_SIZE,
        )
        self.accepting = True
        log.info("ShareWith server started on ws://%s:%d", self.settings.HOST, self.port)

    async def stop(self) -> None:

        """Stop accepting, evict every peer and close the listener."""

        self.accepting = False
        for peer in list(self.rooms.peers()):
            await self.rooms.leave(peer)
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
        await self.keepalive.drain()
        log.info("ShareWith server stopped")

    @property
    def port(self) -> int:
        if self._server is None:
            return self.settings.PORT
        return self._server.sockets[0].getsockname()[1]

    async def __aenter__(self) -> "SignalingServer":
        await self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.stop()

    # ---- handshake ------------------------------------------------------------

    def _process_request(self, ws: ServerConnection, request: Request) -> Optional[Response]:
        handshake = Handshake(path=request.path, headers=request.headers, remote_address=ws.remote_address)
        try:
            ws.identity = self.identity.resolve(handshake)
        except Exception as e:
            log.exception("identity resolution failed: %s", e)
            return ws.respond(HTTPStatus.INTERNAL_SERVER_ERROR, "identity unavailable\n")
        return None

    def _process_response(self, ws: ServerConnection, request: Request, response: Response) -> None:
        identity: Optional[Identity] = getattr(ws, "identity", None)
        if identity is not None and identity.issued and response.status_code == HTTPStatus.SWITCHING_PROTOCOLS:
            response.headers["Set-Cookie"] = set_cookie_header(self.settings.COOKIE_NAME, identity.peer_id)

    # ---- connection lifecycle -------------------------------------------------

    async def _conn_handler(self, ws: ServerConnection) -> None:
        identity: Optional[Identity] = getattr(ws, "identity", None)
        if identity is None:
            await ws.close(code=1011, reason="identity unavailable")
            return

        key = origin_key(ws.request.headers, ws.remote_address, self.settings.TRUST_FORWARDED_FOR)
        peer: Optional[Peer] = None
        try:
            peer = await self.accept(WebSocketConnection(ws), identity, key)
            async for raw in ws:
                await self.on_message(peer, raw)
        except ConnectionClosed:
            pass
        except Exception as e:
            log.exception("connection error for %s: %s", peer.tag() if peer else key, e)
        finally:
            if peer is not None:
                await self.rooms.leave(peer)
                log.info("disconnected: %s", peer.tag())

    async def accept(self, connection: Connection, identity: Identity, origin: str) -> Peer:

        """Register a resolved connection: join its room, start keep-alive, greet it."""

        peer = Peer(
            id=identity.peer_id,
            origin_key=origin,
            connection=connection,
            descriptor=identity.descriptor,
            capabilities=identity.capabilities,
        )
        await self.rooms.join(peer)
        await self.keepalive.start(peer)
        await self.send(peer, msg_display_name(peer.descriptor))
        return peer

    # ---- inbound --------------------------------------------------------------

    async def on_message(self, sender: Peer, raw: Union[str, bytes]) -> None:

        """Decode one frame and dispatch it. Malformed frames are logged and dropped."""

        try:
            frame = decode_frame(raw)
        except MalformedFrame as e:
            log.warning("dropping frame from %s: %s", sender.tag(), e)
            return

        if isinstance(frame, Disconnect):
            await self.rooms.leave(sender)
        elif isinstance(frame, Pong):
            self.keepalive.beat(sender)

        # independent of the control handling above
        if frame.target is not None:
            recipient = self.rooms.find_peer(sender.origin_key, frame.target)
            if recipient is None:
                log.debug("no peer %s in room of %s, dropping %s", frame.target, sender.tag(), frame.type)
                return
            await self.send(recipient, frame.relayed(sender.id))

    # ---- outbound -------------------------------------------------------------

    async def send(self, peer: Optional[Peer], message: Dict[str, Any]) -> None:
        if peer is None or not self.accepting or not peer.connection.is_open:
            return
        text = json.dumps(message, separators=(",", ":"), ensure_ascii=False)
        try:
            # room broadcasts hold the room lock across this await
            await asyncio.wait_for(peer.connection.send(text), self.settings.SEND_TIMEOUT)
        except asyncio.TimeoutError:
            log.info("send to %s timed out, dropping %s", peer.tag(), message.get("type"))
        except Exception as e:
            log.debug("send to %s failed: %s", peer.tag(), e)  # client likely disconnected


__all__ = ["SignalingServer"]
