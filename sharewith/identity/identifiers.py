# ========== Imports ==========
import uuid  # peer ids are UUIDv4

# ========== Identifiers ==========
PeerID = str

# ========== Functions ==========
def new_peer_id() -> PeerID:
    return str(uuid.uuid4())
