from typing import List

from rendezvous.models import Endpoint, Entry, MessageType
from .ttl import is_expired


class RandomMatchmakingQueue:
    """FIFO queue of players waiting for a random opponent, one per game version."""

    def __init__(self, version: str, limit: int = 2, timeout: float = 7):
        self.version = version
        self.limit = limit
        self.timeout = timeout
        self.entries: List[Entry] = []

    def __len__(self):
        return len(self.entries)

    def sweep(self, now: float) -> int:
        before = len(self.entries)
        self.entries = [e for e in self.entries if not is_expired(now, e.timestamp, self.timeout)]
        return before - len(self.entries)

    def find(self, endpoint: Endpoint):
        for entry in self.entries:
            if entry.endpoint == endpoint:
                return entry
        return None

    def begin(self, ctx, endpoint: Endpoint) -> None:
        now = ctx.now()
        self.sweep(now)
        entry = self.find(endpoint)
        if entry is not None:
            entry.touch(now)
            ctx.responder.send(MessageType.RANDOM_MATCHMAKING_CONFIRMATION, 'Already in the list', endpoint)
        elif len(self.entries) < self.limit:
            self.entries.append(Entry(endpoint, now))
            ctx.responder.send(MessageType.RANDOM_MATCHMAKING_CONFIRMATION, 'Added to the list', endpoint)
        else:
            # Only reachable with a limit below 2; pairing drains the queue otherwise
            ctx.sink.error(f'Matchmaking list is full: {len(self.entries)}')
        self.pair_waiting(ctx)

    def pair_waiting(self, ctx) -> None:
        """Pair the two oldest entries until fewer than two remain."""
        while len(self.entries) >= 2:
            first, second = self.entries[0], self.entries[1]
            match_id = ctx.next_match_id()
            ctx.responder.send(MessageType.RANDOM_MATCHMAKING_FOUND, match_id, first.endpoint)
            ctx.responder.send(MessageType.RANDOM_MATCHMAKING_FOUND, match_id, second.endpoint)
            ctx.sink.record_match(match_id, first.endpoint, second.endpoint)
            ctx.sink.incr('total_matches')
            del self.entries[0:2]

    def cancel(self, ctx, endpoint: Endpoint) -> None:
        self.entries = [e for e in self.entries if e.endpoint != endpoint]
        ctx.responder.send(MessageType.RANDOM_MATCHMAKING_CANCEL_CONFIRMATION, 'Removed from the list', endpoint)
