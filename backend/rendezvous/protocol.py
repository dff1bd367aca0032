"""Datagram envelope decoding and encoding.

Inbound:  {"version": str, "keys": {...}, "type": str, "data": any}
Outbound: {"type": str, "data": any}

``decode_packet`` is total: it returns a ``Packet`` or raises one of the
``PacketError`` subclasses below, never a bare ``KeyError``/``TypeError``.
"""
import hmac
import json
from dataclasses import dataclass
from typing import Any, Optional

from rendezvous.models import MessageType

REQUIRED_FIELDS = ('version', 'keys', 'type', 'data')

# Request types whose payload is a match token or lobby code
KEYED_PAYLOAD_TYPES = frozenset({
    MessageType.HOLEPUNCHING_BEGIN,
    MessageType.HOLEPUNCHING_CANCEL,
    MessageType.PRIVATE_LOBBY_RESERVE,
    MessageType.PRIVATE_LOBBY_FIND,
})


class PacketError(Exception):
    pass


class UndecodablePacket(PacketError):
    """Datagram is not UTF-8 JSON."""


class MalformedPacket(PacketError):
    """Envelope or payload does not have the expected shape."""


class UnknownMessageType(PacketError):
    pass


@dataclass
class Packet:
    version: Any
    keys: Any
    type: Any
    data: Any

    def key(self, family: str) -> Optional[str]:
        if isinstance(self.keys, dict):
            value = self.keys.get(family)
            if isinstance(value, str):
                return value
        return None

    def message_type(self) -> MessageType:
        try:
            return MessageType(self.type)
        except ValueError:
            raise UnknownMessageType(self.type)


def _reject_constant(name: str):
    raise ValueError(f'{name} is not valid JSON')


def decode_packet(raw: bytes) -> Packet:
    try:
        msg = json.loads(raw.decode('utf-8'), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError) as exc:
        raise UndecodablePacket(str(exc)) from exc
    if not isinstance(msg, dict) or any(name not in msg for name in REQUIRED_FIELDS):
        raise MalformedPacket('Invalid packet')
    return Packet(**{name: msg[name] for name in REQUIRED_FIELDS})


def validate_payload(msg_type: MessageType, data: Any) -> Any:
    """Check ``data`` against the schema of ``msg_type`` and return it.

    Tokens and codes are strings or numbers; ``1.0`` and ``1`` name the same
    token, so integral floats come back as ``int``.
    """
    if msg_type in KEYED_PAYLOAD_TYPES:
        if isinstance(data, bool) or not isinstance(data, (str, int, float)):
            raise MalformedPacket(f'{msg_type.value} expects a string or number payload')
        if isinstance(data, float) and data.is_integer():
            return int(data)
    return data


def keys_match(supplied: Optional[str], expected: str) -> bool:
    if supplied is None:
        return False
    return hmac.compare_digest(supplied.encode('utf-8'), expected.encode('utf-8'))


def encode_message(msg_type: MessageType, data: Any) -> bytes:
    payload = {'type': MessageType(msg_type).value, 'data': data}
    return json.dumps(payload, separators=(',', ':'), ensure_ascii=False).encode('utf-8')
