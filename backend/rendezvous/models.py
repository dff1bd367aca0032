from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import NamedTuple


class MessageType(str, Enum):
    """Wire names of every datagram type. Values must never change."""
    RANDOM_MATCHMAKING_BEGIN = 'random_matchmaking_begin'
    RANDOM_MATCHMAKING_CANCEL = 'random_matchmaking_cancel'
    RANDOM_MATCHMAKING_CANCEL_CONFIRMATION = 'random_matchmaking_cancel_confirmation'
    RANDOM_MATCHMAKING_CONFIRMATION = 'random_matchmaking_confirmation'
    RANDOM_MATCHMAKING_FOUND = 'random_matchmaking_found'
    HOLEPUNCHING_BEGIN = 'holepunching_begin'
    HOLEPUNCHING_CANCEL = 'holepunching_cancel'
    HOLEPUNCHING_CANCEL_CONFIRMATION = 'holepunching_cancel_confirmation'
    HOLEPUNCHING_CONFIRMATION = 'holepunching_confirmation'
    HOLEPUNCHING_FOUND = 'holepunching_found'
    PRIVATE_LOBBY_RESERVE = 'private_lobby_reserve'
    PRIVATE_LOBBY_RESERVE_CONFIRMATION = 'private_lobby_reserve_confirmation'
    PRIVATE_LOBBY_CODE_TAKEN = 'private_lobby_code_taken'
    PRIVATE_LOBBY_IS_SELF = 'private_lobby_is_self'
    PRIVATE_LOBBY_FIND = 'private_lobby_find'
    PRIVATE_LOBBY_FREE = 'private_lobby_free'
    PRIVATE_LOBBY_FOUND = 'private_lobby_found'
    PRIVATE_LOBBY_REQUEST = 'private_lobby_request'
    PRIVATE_LOBBY_NOT_FOUND = 'private_lobby_not_found'
    PRIVATE_LOBBY_FREE_CONFIRMATION = 'private_lobby_free_confirmation'
    FETCH_NEWS = 'fetch_news'
    NEWS = 'news'
    INCORRECT_VERSION = 'incorrect_version'


class Endpoint(NamedTuple):
    ip: str
    port: int

    def to_dict(self):
        return {'ip': self.ip, 'port': self.port}


@dataclass
class Entry:
    """A registered endpoint and the last time it was seen."""
    endpoint: Endpoint
    timestamp: float

    def touch(self, now: float) -> None:
        self.timestamp = now


@dataclass
class StatsLog:
    total_matches: int = 0
    total_holepunches_expired: int = 0
    total_lobbies_expired: int = 0
    sent_packets: int = 0
    received_packets: int = 0
    invalid_packets: int = 0
    invalid_typed_packets: int = 0

    @classmethod
    def from_dict(cls, data):
        known = {k: int(v) for k, v in (data or {}).items() if k in cls.__dataclass_fields__}
        return cls(**known)

    def to_dict(self):
        return asdict(self)


@dataclass
class MatchRecord:
    match_id: int
    ip1: str
    ip2: str

    def to_dict(self):
        return asdict(self)


@dataclass
class LogBuffers:
    matches_log: list = field(default_factory=list)
    debug_log: list = field(default_factory=list)
    error_log: list = field(default_factory=list)
