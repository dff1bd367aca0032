from typing import Any

from rendezvous.models import Endpoint, MessageType
from rendezvous.protocol import encode_message


class Responder:
    """Fire-and-forget replies over the server's UDP socket.

    ``transport`` is anything with ``sendto(bytes, address)``; in production
    that is the bound socket itself.
    """

    def __init__(self, transport, sink):
        self.transport = transport
        self.sink = sink

    def send(self, msg_type: MessageType, data: Any, endpoint: Endpoint) -> bool:
        try:
            self.transport.sendto(encode_message(msg_type, data), (endpoint.ip, endpoint.port))
        except (OSError, TypeError, ValueError) as exc:
            self.sink.error(f"[send-error] {MessageType(msg_type).value} to {endpoint.ip}:{endpoint.port}: {exc}")
            return False
        self.sink.incr('sent_packets')
        return True
