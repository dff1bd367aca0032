import json
import os
import sys
import pytest

# Ensure the backend root (containing the `rendezvous` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from rendezvous import create_app
from rendezvous.router import handle_datagram

RM_KEY = 'rm-test-key'
PL_KEY = 'pl-test-key'
VERSION = '1.0.0'


class TestConfig(Config):
    __test__ = False
    TESTING = True
    SERVER_KEYS = {'random_matchmaking': RM_KEY, 'private_lobby': PL_KEY}
    MATCH_ID_COUNTER = 0
    SUPPORTED_GAME_VERSIONS = [VERSION, '1.1.0']
    RANDOM_MATCHMAKING_LIMIT = 2
    HOLEPUNCHING_PAIRS_LIMIT = 1000
    PRIVATE_LOBBY_LIMIT = 500
    RANDOM_MATCHMAKING_INACTIVE_TIMER = 7
    HOLEPUNCHING_PAIRS_INACTIVE_TIMER = 7
    PRIVATE_LOBBY_INACTIVE_TIMER = 600
    LOG_CONNECTED_IPS = True
    LATEST_VERSION = VERSION
    NEWS = 'Tournament this weekend!'
    CONFIG_FILE = None


class RecordingTransport:
    """Stands in for the UDP socket; keeps every datagram sent."""

    def __init__(self):
        self.sent = []
        self.fail = False
        self.raw = []

    def sendto(self, payload, address):
        if self.fail:
            raise OSError('network is unreachable')
        self.raw.append(payload)
        self.sent.append((address, json.loads(payload.decode('utf-8'))))

    def drain(self):
        sent, self.sent = self.sent, []
        return sent

    def to(self, address):
        return [msg for addr, msg in self.sent if addr == address]


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def flask_app(tmp_path, transport, clock):
    config_class = type('TmpConfig', (TestConfig,), {'LOG_DIR': str(tmp_path / 'logs')})
    application = create_app(config_class, transport=transport, clock=clock)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def ctx(flask_app):
    return flask_app.extensions['rendezvous']


@pytest.fixture()
def send(ctx):
    """Deliver one request datagram as if it arrived from ``addr``."""
    def _send(addr, msg_type, data=None, version=VERSION, keys=None):
        if keys is None:
            keys = {'random_matchmaking': RM_KEY, 'private_lobby': PL_KEY}
        packet = {'version': version, 'keys': keys, 'type': msg_type, 'data': data}
        handle_datagram(ctx, json.dumps(packet).encode('utf-8'), addr)
    return _send
