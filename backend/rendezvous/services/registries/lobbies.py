from typing import Dict, Hashable, List

from rendezvous.models import Endpoint, Entry, MessageType
from .holepunch import peer_payload
from .ttl import is_expired


def _join_codes(codes) -> str:
    return ','.join(str(c) for c in codes)


class PrivateLobbyRegistry:
    """Lobby code -> owning endpoint for one game version.

    An endpoint holds at most one code: reserving a new code releases every
    code it held before.
    """

    def __init__(self, version: str, limit: int = 500, timeout: float = 600):
        self.version = version
        self.limit = limit
        self.timeout = timeout
        self.entries: Dict[Hashable, Entry] = {}

    def __len__(self):
        return len(self.entries)

    def sweep(self, now: float) -> int:
        stale = [code for code, e in self.entries.items() if is_expired(now, e.timestamp, self.timeout)]
        for code in stale:
            del self.entries[code]
        return len(stale)

    def _sweep_and_count(self, ctx) -> float:
        now = ctx.now()
        expired = self.sweep(now)
        if expired:
            ctx.sink.incr('total_lobbies_expired', expired)
        return now

    def release(self, endpoint: Endpoint) -> List[Hashable]:
        """Drop every code owned by ``endpoint`` and return them in insertion order."""
        owned = [code for code, e in self.entries.items() if e.endpoint == endpoint]
        for code in owned:
            del self.entries[code]
        return owned

    def reserve(self, ctx, code: Hashable, endpoint: Endpoint) -> None:
        now = self._sweep_and_count(ctx)
        current = self.entries.get(code)
        if current is not None:
            if current.endpoint == endpoint:
                current.touch(now)
                ctx.responder.send(MessageType.PRIVATE_LOBBY_RESERVE_CONFIRMATION, 'Already in the map!', endpoint)
            else:
                ctx.responder.send(
                    MessageType.PRIVATE_LOBBY_CODE_TAKEN,
                    f'The code {code} has already been reserved.',
                    endpoint,
                )
            return

        removed = self.release(endpoint)
        if len(self.entries) < self.limit:
            self.entries[code] = Entry(endpoint, now)
            ctx.responder.send(
                MessageType.PRIVATE_LOBBY_RESERVE_CONFIRMATION,
                f'Added {code} to the map; Removed {_join_codes(removed)}',
                endpoint,
            )
        else:
            ctx.sink.error(f'Private lobby map is full: {len(self.entries)}')

    def find(self, ctx, code: Hashable, endpoint: Endpoint) -> None:
        self._sweep_and_count(ctx)
        owner = self.entries.get(code)
        if owner is None:
            ctx.responder.send(MessageType.PRIVATE_LOBBY_NOT_FOUND, f'No lobby with the code {code} exists.', endpoint)
        elif owner.endpoint == endpoint:
            ctx.responder.send(MessageType.PRIVATE_LOBBY_IS_SELF, "You can't join your own lobby!", endpoint)
        else:
            ctx.responder.send(MessageType.PRIVATE_LOBBY_FOUND, peer_payload(owner.endpoint), endpoint)
            ctx.responder.send(MessageType.PRIVATE_LOBBY_REQUEST, peer_payload(endpoint), owner.endpoint)

    def free(self, ctx, endpoint: Endpoint) -> None:
        removed = self.release(endpoint)
        ctx.responder.send(
            MessageType.PRIVATE_LOBBY_FREE_CONFIRMATION,
            f'Removed {_join_codes(removed)} from the list',
            endpoint,
        )
