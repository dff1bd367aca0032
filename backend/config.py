import os

class Config:
    # Shared secrets, one per operation family. Both are required at startup.
    SERVER_KEYS = {
        'random_matchmaking': os.environ.get('RANDOM_MATCHMAKING_KEY', ''),
        'private_lobby': os.environ.get('PRIVATE_LOBBY_KEY', ''),
    }
    MATCH_ID_COUNTER = int(os.environ.get('MATCH_ID_COUNTER', '0'))
    SUPPORTED_GAME_VERSIONS = [v for v in os.environ.get('SUPPORTED_GAME_VERSIONS', '1.0.0').split(',') if v]
    # Registry capacities
    RANDOM_MATCHMAKING_LIMIT = int(os.environ.get('RANDOM_MATCHMAKING_LIMIT', '2'))
    HOLEPUNCHING_PAIRS_LIMIT = int(os.environ.get('HOLEPUNCHING_PAIRS_LIMIT', '1000'))
    PRIVATE_LOBBY_LIMIT = int(os.environ.get('PRIVATE_LOBBY_LIMIT', '500'))
    # Inactivity timeouts (seconds)
    RANDOM_MATCHMAKING_INACTIVE_TIMER = int(os.environ.get('RANDOM_MATCHMAKING_INACTIVE_TIMER', '7'))
    HOLEPUNCHING_PAIRS_INACTIVE_TIMER = int(os.environ.get('HOLEPUNCHING_PAIRS_INACTIVE_TIMER', '7'))
    PRIVATE_LOBBY_INACTIVE_TIMER = int(os.environ.get('PRIVATE_LOBBY_INACTIVE_TIMER', '600'))
    # Log flush interval (seconds) and whether match logs carry player IPs
    LOGGING_INTERVAL = int(os.environ.get('LOGGING_INTERVAL', '14400'))
    LOG_CONNECTED_IPS = os.environ.get('LOG_CONNECTED_IPS', '0').lower() in ('1', 'true', 'yes')
    LOG_DIR = os.environ.get('LOG_DIR', 'logs')
    UDP_HOST = os.environ.get('UDP_HOST', '0.0.0.0')
    UDP_PORT = int(os.environ.get('UDP_PORT', '63567'))
    HTTP_PORT = int(os.environ.get('HTTP_PORT', '8080'))
    LATEST_VERSION = os.environ.get('LATEST_VERSION', '1.0.0')
    NEWS = os.environ.get('NEWS', 'There is no news or announcements!')
    # Optional JSON overrides, lower-case keys (e.g. {"udp_port": 4000})
    CONFIG_FILE = os.environ.get('CONFIG_FILE', 'config.json')
