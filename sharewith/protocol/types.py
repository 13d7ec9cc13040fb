# sharewith/protocol/types.py
from __future__ import annotations

# ---- Message types (server -> client) ----
DISPLAY_NAME = "display-name"
PEERS = "peers"
PEER_JOINED = "peer-joined"
PEER_LEFT = "peer-left"
PING = "ping"

# ---- Message types (client -> server) ----
PONG = "pong"
DISCONNECT = "disconnect"

# ---- Routing fields ----
F_TYPE = "type"
F_TO = "to"          # consumed by the server, never forwarded
F_SENDER = "sender"  # stamped by the server on relay

# Minimal shape docs (for human readers)
# Control:  { "type": "pong" } | { "type": "disconnect" }
# Relay:    { "type": "<anything>", "to": "<peer id>", ...payload }
# Delivered { "type": "<anything>", "sender": "<peer id>", ...payload }
