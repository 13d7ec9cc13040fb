"""
Inbound frame decoding.

Every text frame from a client is exactly one JSON object, normally with a
string ``type``. Frames are decoded once, at the connection boundary, into
one of three variants:

- ``Pong``        liveness acknowledgment
- ``Disconnect``  voluntary leave
- ``Relay``       anything else (offer / answer / candidate / ...), including
                  frames with no usable ``type``

Any variant may carry a ``target`` (the ``to`` field). Control handling and
targeted delivery are independent, so a ``Pong`` with a ``to`` is still
relayed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .types import DISCONNECT, F_SENDER, F_TO, F_TYPE, PONG


class MalformedFrame(ValueError):
    """Raised when an inbound frame cannot be decoded."""


@dataclass(frozen=True)
class Frame:
    type: Optional[str]
    body: Dict[str, Any] = field(default_factory=dict)  # the frame minus "to"
    target: Optional[str] = None

    def relayed(self, sender_id: str) -> Dict[str, Any]:
        """The frame as delivered to its target: no ``to``, ``sender`` stamped."""
        out = dict(self.body)
        out[F_SENDER] = sender_id
        return out


@dataclass(frozen=True)
class Pong(Frame):
    pass


@dataclass(frozen=True)
class Disconnect(Frame):
    pass


@dataclass(frozen=True)
class Relay(Frame):
    pass


InboundFrame = Union[Pong, Disconnect, Relay]

_VARIANTS = {
    PONG: Pong,
    DISCONNECT: Disconnect,
}


def decode_frame(raw: Union[str, bytes]) -> InboundFrame:
    try:
        obj = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedFrame(f"invalid_json: {e}") from e

    if not isinstance(obj, dict):
        raise MalformedFrame("frame:not_object")
    msg_type = obj.get(F_TYPE)
    if not isinstance(msg_type, str):
        msg_type = None  # still routable by "to"

    target = obj.pop(F_TO, None)
    if target is not None and not isinstance(target, str):
        raise MalformedFrame("to:not_string")

    variant = _VARIANTS.get(msg_type, Relay)
    # An empty "to" addresses nobody.
    return variant(type=msg_type, body=obj, target=target or None)
