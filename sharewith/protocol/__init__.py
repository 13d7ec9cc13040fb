from .frames import Disconnect, Frame, InboundFrame, MalformedFrame, Pong, Relay, decode_frame
from .messages import msg_display_name, msg_peer_joined, msg_peer_left, msg_peers, msg_ping

__all__ = [
    "Frame", "Pong", "Disconnect", "Relay", "InboundFrame",
    "MalformedFrame", "decode_frame",
    "msg_display_name", "msg_peers", "msg_peer_joined", "msg_peer_left",
    "msg_ping",
]
