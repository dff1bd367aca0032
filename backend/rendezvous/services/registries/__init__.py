"""Rendezvous registries: random matchmaking, holepunching and private lobbies.

Everything in this package is pure in-memory state driven by the packet
router. Nothing here touches sockets or files; replies go out through the
responder handed in by the caller, and expiry is evaluated lazily whenever a
registry is touched.
"""

from .ttl import timestamp_difference, is_expired
from .matchmaking import RandomMatchmakingQueue
from .holepunch import HolepunchTable
from .lobbies import PrivateLobbyRegistry
