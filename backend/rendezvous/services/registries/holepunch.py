import json
from typing import Dict, Hashable

from rendezvous.models import Endpoint, Entry, MessageType
from .ttl import is_expired


def peer_payload(endpoint: Endpoint, **extra) -> str:
    """Peer address as the compact JSON string clients expect inside ``data``."""
    return json.dumps(dict(endpoint.to_dict(), **extra), separators=(',', ':'))


class HolepunchTable:
    """Match token -> first participant waiting for NAT traversal.

    Shared by every game version. When a second endpoint shows up for a token
    both sides learn each other's address; the waiting entry is left in the
    table until it expires or the token is cancelled.
    """

    def __init__(self, limit: int = 1000, timeout: float = 7):
        self.limit = limit
        self.timeout = timeout
        self.entries: Dict[Hashable, Entry] = {}

    def __len__(self):
        return len(self.entries)

    def sweep(self, now: float) -> int:
        stale = [token for token, e in self.entries.items() if is_expired(now, e.timestamp, self.timeout)]
        for token in stale:
            del self.entries[token]
        return len(stale)

    def begin(self, ctx, token: Hashable, endpoint: Endpoint) -> None:
        now = ctx.now()
        expired = self.sweep(now)
        if expired:
            ctx.sink.incr('total_holepunches_expired', expired)

        waiting = self.entries.get(token)
        if waiting is None:
            if len(self.entries) < self.limit:
                self.entries[token] = Entry(endpoint, now)
                ctx.responder.send(MessageType.HOLEPUNCHING_CONFIRMATION, 'Added to the map.', endpoint)
            else:
                ctx.sink.error(f'Holepunching map is full: {len(self.entries)}')
            return

        if waiting.endpoint == endpoint:
            waiting.touch(now)
            ctx.responder.send(MessageType.HOLEPUNCHING_CONFIRMATION, 'Already in the map.', endpoint)
            return

        # is_leader describes the peer in the payload: the earlier registrant leads
        ctx.responder.send(
            MessageType.HOLEPUNCHING_FOUND,
            peer_payload(waiting.endpoint, is_leader=True),
            endpoint,
        )
        ctx.responder.send(
            MessageType.HOLEPUNCHING_FOUND,
            peer_payload(endpoint, is_leader=False),
            waiting.endpoint,
        )

    def cancel(self, ctx, token: Hashable, endpoint: Endpoint) -> None:
        self.entries.pop(token, None)
        ctx.responder.send(MessageType.HOLEPUNCHING_CANCEL_CONFIRMATION, 'Removed from the list', endpoint)
