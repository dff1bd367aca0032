import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from rendezvous.responder import Responder
from rendezvous.services.registries import HolepunchTable, PrivateLobbyRegistry, RandomMatchmakingQueue
from rendezvous.stats import StatsSink


@dataclass
class VersionRegistries:
    matchmaking: RandomMatchmakingQueue
    lobbies: PrivateLobbyRegistry


class ServerContext:
    """All mutable server state, built once from the Flask config.

    The packet router receives this object explicitly; nothing in the
    registries reaches for globals.
    """

    def __init__(self, config: Mapping, logger, transport=None,
                 clock: Callable[[], float] = time.time, stats=None):
        keys = config.get('SERVER_KEYS') or {}
        if not keys.get('random_matchmaking') or not keys.get('private_lobby'):
            raise RuntimeError('Server keys are not set (RANDOM_MATCHMAKING_KEY / PRIVATE_LOBBY_KEY).')
        self.server_keys = dict(keys)
        self.logger = logger
        self.clock = clock
        self.match_id_counter = int(config.get('MATCH_ID_COUNTER', 0))
        self.latest_version = config.get('LATEST_VERSION', '1.0.0')
        self.news = config.get('NEWS', '')

        self.sink = StatsSink(logger, stats=stats, log_connected_ips=bool(config.get('LOG_CONNECTED_IPS')))
        self.responder = Responder(transport, self.sink)

        self.versions: Dict[str, VersionRegistries] = {}
        for version in config.get('SUPPORTED_GAME_VERSIONS') or []:
            if not version:
                continue
            logger.info(f"[boot] creating registries for version {version}")
            self.versions[version] = VersionRegistries(
                matchmaking=RandomMatchmakingQueue(
                    version,
                    limit=int(config.get('RANDOM_MATCHMAKING_LIMIT', 2)),
                    timeout=float(config.get('RANDOM_MATCHMAKING_INACTIVE_TIMER', 7)),
                ),
                lobbies=PrivateLobbyRegistry(
                    version,
                    limit=int(config.get('PRIVATE_LOBBY_LIMIT', 500)),
                    timeout=float(config.get('PRIVATE_LOBBY_INACTIVE_TIMER', 600)),
                ),
            )
        self.holepunch = HolepunchTable(
            limit=int(config.get('HOLEPUNCHING_PAIRS_LIMIT', 1000)),
            timeout=float(config.get('HOLEPUNCHING_PAIRS_INACTIVE_TIMER', 7)),
        )

    def now(self) -> float:
        return self.clock()

    def next_match_id(self) -> int:
        match_id = self.match_id_counter
        self.match_id_counter += 1
        return match_id

    def registries_for(self, version) -> Optional[VersionRegistries]:
        if not isinstance(version, str):
            return None
        return self.versions.get(version)

    def bind_transport(self, transport) -> None:
        self.responder.transport = transport
