'''
    Description:
        - ShareWith signaling relay: groups browsers by network origin into
          rooms, keeps them alive with ping/pong and relays addressed
          handshake messages between peers of the same room.
'''

from .peer import Peer
from .rooms import RoomRegistry
from .keepalive import KeepAliveMonitor
from .transport import SignalingServer

__all__ = ["Peer", "RoomRegistry", "KeepAliveMonitor", "SignalingServer"]
